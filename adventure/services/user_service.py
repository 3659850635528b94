"""
User management service for creator and marketer accounts
"""

import logging
from typing import Dict, Iterable, Optional

from pymongo.errors import DuplicateKeyError

from adventure.core.security import hash_password, verify_password
from adventure.db.mongodb import mongodb
from adventure.exceptions import AuthenticationError, ConflictError, ValidationError
from adventure.models.status_enums import UserRole
from adventure.models.user import User
from adventure.utils.object_id_utils import to_object_id, with_str_id

logger = logging.getLogger(__name__)


class UserService:
    """Service for registering, authenticating and looking up users"""

    async def register(self, name: str, email: str, password: str, role: str) -> User:
        """Create a new account"""
        if not name or not email or not password or not role:
            raise ValidationError("All fields are required")

        if role not in [r.value for r in UserRole]:
            raise ValidationError("Role must be either creator or marketer")

        db = mongodb.get_database()
        email = email.strip().lower()

        if await db.users.find_one({"email": email}):
            raise ConflictError("User already exists")

        user = User(name=name, email=email, password_hash=hash_password(password), role=role)
        try:
            result = await db.users.insert_one(user.model_dump(exclude={"id"}))
        except DuplicateKeyError as e:
            raise ConflictError("User already exists") from e

        user.id = str(result.inserted_id)
        logger.info("Registered %s account %s", user.role, user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the matching user"""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid credentials")

        logger.info("User %s logged in", user.id)
        return user

    async def get_user_by_email(self, email: str) -> Optional[User]:
        db = mongodb.get_database()
        user_doc = await db.users.find_one({"email": email.strip().lower()})
        return User(**with_str_id(user_doc)) if user_doc else None

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        object_id = to_object_id(user_id)
        if object_id is None:
            return None

        db = mongodb.get_database()
        user_doc = await db.users.find_one({"_id": object_id})
        return User(**with_str_id(user_doc)) if user_doc else None

    async def get_names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """Map user ids to display names"""
        object_ids = [oid for oid in (to_object_id(uid) for uid in set(user_ids)) if oid is not None]
        if not object_ids:
            return {}

        db = mongodb.get_database()
        names = {}
        async for user_doc in db.users.find({"_id": {"$in": object_ids}}):
            names[str(user_doc["_id"])] = user_doc.get("name", "Unknown")
        return names


user_service = UserService()
