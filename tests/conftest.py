"""
Pytest configuration and fixtures for testing
"""

import copy
import os
import tempfile
from datetime import datetime, timedelta, UTC
from types import SimpleNamespace

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017/adventure_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LLM_PROVIDER", "mock")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="adventure-uploads-"))

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from adventure.core.security import create_access_token, hash_password
from adventure.db.mongodb import mongodb
from adventure.models.campaign import Campaign
from adventure.models.user import User
from adventure.models.video import Video


def _matches_query(doc, query):
    for key, condition in (query or {}).items():
        value = doc.get(key)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    """Minimal stand-in for a Motor cursor"""

    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def limit(self, count):
        self._docs = self._docs[:count]
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield copy.deepcopy(doc)

    async def to_list(self, length=None):
        return [copy.deepcopy(doc) for doc in self._docs[:length]]


class FakeCollection:
    """In-memory collection implementing the Motor calls the services use"""

    def __init__(self, name, unique_indexes=None):
        self.name = name
        self.docs = []
        self.unique_indexes = list(unique_indexes or [])

    def seed(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return doc["_id"]

    async def create_index(self, keys, unique=False):
        if unique:
            fields = (keys,) if isinstance(keys, str) else tuple(field for field, _ in keys)
            self.unique_indexes.append(fields)

    async def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        for fields in self.unique_indexes:
            if any(all(existing.get(f) == doc.get(f) for f in fields) for existing in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name}")
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query):
        for doc in self.docs:
            if _matches_query(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None, projection=None):
        return FakeCursor(doc for doc in self.docs if _matches_query(doc, query))

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches_query(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query):
        return sum(1 for doc in self.docs if _matches_query(doc, query))

    async def delete_one(self, query):
        for doc in self.docs:
            if _matches_query(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        before = len(self.docs)
        self.docs = [doc for doc in self.docs if not _matches_query(doc, query)]
        return SimpleNamespace(deleted_count=before - len(self.docs))


class FakeDatabase:
    """Attribute-style access to FakeCollections, like a Motor database"""

    def __init__(self):
        self._collections = {
            "users": FakeCollection("users", [("email",)]),
            "matches": FakeCollection("matches", [("video_id", "campaign_id")]),
        }

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def fake_db(monkeypatch):
    """Route every mongodb.get_database() call to an in-memory database"""
    db = FakeDatabase()
    monkeypatch.setattr(mongodb, "get_database", lambda: db)
    return db


@pytest.fixture
def make_user(fake_db):
    def _make_user(name="Alice", role="creator", email=None, password="secret123"):
        user = User(
            name=name,
            email=email or f"{name.lower()}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        user.id = str(fake_db.users.seed(user.model_dump(exclude={"id"})))
        return user

    return _make_user


@pytest.fixture
def make_video(fake_db):
    counter = {"n": 0}

    def _make_video(creator_id, title="Funny Cats", genre="comedy", tone="playful"):
        counter["n"] += 1
        video = Video(
            title=title,
            genre=genre,
            tone=tone,
            video_path=f"uploads/videos/video-{counter['n']}.mp4",
            creator_id=creator_id,
            created_at=datetime.now(UTC) + timedelta(seconds=counter["n"]),
        )
        video.id = str(fake_db.videos.seed(video.model_dump(exclude={"id"})))
        return video

    return _make_video


@pytest.fixture
def make_campaign(fake_db):
    counter = {"n": 0}

    def _make_campaign(marketer_id, product_name="Snack Box", category="food", description="Tasty snacks"):
        counter["n"] += 1
        campaign = Campaign(
            product_name=product_name,
            category=category,
            description=description,
            asset_path=f"uploads/assets/asset-{counter['n']}.png",
            marketer_id=marketer_id,
            created_at=datetime.now(UTC) + timedelta(seconds=counter["n"]),
        )
        campaign.id = str(fake_db.campaigns.seed(campaign.model_dump(exclude={"id"})))
        return campaign

    return _make_campaign


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}

    return _auth_headers
