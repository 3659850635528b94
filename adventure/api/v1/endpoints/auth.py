import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from adventure.api.dependencies import get_current_user
from adventure.core.security import create_access_token
from adventure.models.token import TokenResponse
from adventure.models.user import User, UserPublic
from adventure.services.user_service import user_service

router = APIRouter()
logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _token_response(user: User) -> TokenResponse:
    access_token = create_access_token({"user_id": user.id})
    return TokenResponse(access_token=access_token, token_type="bearer", user=UserPublic.from_user(user))


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """Create a creator or marketer account and return a JWT"""
    user = await user_service.register(request.name, request.email, request.password, request.role)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """Exchange email and password for a JWT"""
    user = await user_service.authenticate(request.email, request.password)
    return _token_response(user)


@router.get("/me", response_model=UserPublic)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return UserPublic.from_user(current_user)
