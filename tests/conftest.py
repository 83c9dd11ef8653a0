from datetime import datetime, timedelta, timezone

import fakeredis
import httpx
import mongomock
import pytest

from portfolio.cache import ContentCache
from portfolio.main import app
from portfolio.services.auth_service import get_current_admin
from portfolio.services.blog import BlogRepository
from portfolio.services.projects import ProjectRepository

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class AsyncCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    async def to_list(self, length=None):
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class AsyncCollection:
    """Awaitable facade over a mongomock collection, shaped like AsyncMongoClient's."""

    def __init__(self, collection):
        self._collection = collection

    def find(self, *args, **kwargs):
        return AsyncCursor(self._collection.find(*args, **kwargs))

    def __getattr__(self, name):
        method = getattr(self._collection, name)

        async def call(*args, **kwargs):
            return method(*args, **kwargs)

        return call


class AsyncDatabase:
    def __init__(self, database):
        self._database = database

    def __getitem__(self, name):
        return AsyncCollection(self._database[name])

    async def command(self, name):
        return {"ok": 1.0}


@pytest.fixture
def db():
    return AsyncDatabase(mongomock.MongoClient()["portfolio_test"])


@pytest.fixture
async def redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache(redis):
    return ContentCache(redis, prefix="test")


@pytest.fixture
def projects(db, cache):
    return ProjectRepository(db, cache)


@pytest.fixture
def blog(db, cache):
    return BlogRepository(db, cache)


@pytest.fixture
async def client(db, cache):
    app.state.db = db
    app.state.cache = cache
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def admin_client(client):
    app.dependency_overrides[get_current_admin] = lambda: {"email": "admin@example.com", "role": "admin"}
    yield client
    app.dependency_overrides.pop(get_current_admin, None)


def project_doc(slug: str, minutes: int = 0, **fields) -> dict:
    """A raw ``projects`` document as the store holds it."""
    created = BASE_TIME + timedelta(minutes=minutes)
    doc = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "description": "A project used in tests.",
        "excerpt": "Test project excerpt.",
        "featuredImage": "https://img.example.com/cover.png",
        "technologies": [],
        "category": "Web",
        "status": "completed",
        "featured": False,
        "published": True,
        "createdAt": created,
        "updatedAt": created,
    }
    doc.update(fields)
    return doc


def post_doc(slug: str, minutes: int = 0, **fields) -> dict:
    """A raw ``blog`` document as the store holds it."""
    created = BASE_TIME + timedelta(minutes=minutes)
    doc = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "excerpt": "Test post excerpt.",
        "content": "Body of a test post.",
        "author": {"name": "Tester", "email": "tester@example.com"},
        "tags": [],
        "category": "Engineering",
        "published": True,
        "featured": False,
        "readTime": 3,
        "views": 0,
        "likes": 0,
        "createdAt": created,
        "updatedAt": created,
        "publishedAt": created,
    }
    doc.update(fields)
    return doc
