# conftest.py
import os
import time
import uuid
from types import SimpleNamespace
from typing import AsyncGenerator, Dict, List, Optional

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# the app refuses to start without a signing key
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from app.main import app
from app.core.config import settings
from app.core.auth import Principal, optional_current_user, require_admin, require_staff
from app.core.database.db import get_session
from app.core.database.base import Base
from featured_images.adapters.outbound.cache_memory import InMemoryResolutionCache
from featured_images.domain.entities import EntityResolutionState, PluginSettings, SizeDescriptor
from featured_images.domain.errors import SizeLookupError
from featured_images.services.featured_image_service import FeaturedImageService
from featured_images.services.hooks import ResolutionHooks
from featured_images.services.preview_coordinator import PreviewCoordinator
from featured_images.services.provider_resolver import FlickrResolver
from featured_images.services.secret_store import SecretStore
from shared.wiring import (
    get_preview_coordinator,
    get_resolution_cache,
    get_secret_store,
    get_size_lookup,
)

FLICKR_PAGE = "https://www.flickr.com/photos/someone/12345/"

SIZES = [
    {"label": "Large 1600", "width": 1600, "height": 900, "media": "photo", "source": "https://live.staticflickr.com/A.jpg"},
    {"label": "Medium 800", "width": 800, "height": 600, "media": "photo", "source": "https://live.staticflickr.com/B.jpg"},
    {"label": "Original", "width": "2000", "height": "3000", "media": "photo", "source": "https://live.staticflickr.com/C.jpg"},
]


# ---- Fakes ------------------------------------------------------------------

class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSizeLookup:
    """Stands in for FlickrSizesClient; records every outbound call."""

    def __init__(self, sizes: Optional[list] = None) -> None:
        self.sizes = [SizeDescriptor.model_validate(s) for s in (sizes if sizes is not None else SIZES)]
        self.error: Optional[SizeLookupError] = None
        self.calls: List[tuple] = []

    def fetch_sizes(self, photo_id: str, api_key: str) -> List[SizeDescriptor]:
        self.calls.append((photo_id, api_key))
        if self.error is not None:
            raise self.error
        return list(self.sizes)


class FakeStateRepository:
    def __init__(self) -> None:
        self.rows: Dict[uuid.UUID, EntityResolutionState] = {}
        self.puts = 0

    async def get(self, content_id):
        state = self.rows.get(content_id)
        return state.model_copy(deep=True) if state else None

    async def put(self, content_id, state):
        self.puts += 1
        self.rows[content_id] = state.model_copy(deep=True)


class FakeContentRepository:
    def __init__(self) -> None:
        self.items: Dict[uuid.UUID, SimpleNamespace] = {}

    def add(self, title="Harbour at dusk", description="Evening walk.", canonical_url="https://example.org/p/1",
            native_image_url=None) -> uuid.UUID:
        cid = uuid.uuid4()
        self.items[cid] = SimpleNamespace(
            id=cid,
            title=title,
            description=description,
            canonical_url=canonical_url,
            native_image_url=native_image_url,
        )
        return cid

    async def get(self, content_id):
        return self.items.get(content_id)

    async def exists(self, content_id) -> bool:
        return content_id in self.items


class StaticSettings:
    """SettingsService stand-in; tests mutate `.value` directly."""

    def __init__(self, **overrides) -> None:
        self.value = PluginSettings(**{"api_key": "flickr-key", **overrides})

    async def load(self) -> PluginSettings:
        return self.value


# ---- Service-level fixtures -------------------------------------------------

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

@pytest.fixture
def memory_cache(clock) -> InMemoryResolutionCache:
    return InMemoryResolutionCache(clock=clock)

@pytest.fixture
def size_lookup() -> FakeSizeLookup:
    return FakeSizeLookup()

@pytest.fixture
def hooks() -> ResolutionHooks:
    return ResolutionHooks()

@pytest.fixture
def resolver(memory_cache, size_lookup, hooks) -> FlickrResolver:
    return FlickrResolver(memory_cache, size_lookup, hooks)

@pytest.fixture
def plugin_settings() -> StaticSettings:
    return StaticSettings()

@pytest.fixture
def state_repo() -> FakeStateRepository:
    return FakeStateRepository()

@pytest.fixture
def content_repo() -> FakeContentRepository:
    return FakeContentRepository()

@pytest.fixture
def featured_service(state_repo, content_repo, resolver, plugin_settings, hooks) -> FeaturedImageService:
    return FeaturedImageService(
        state_repo=state_repo,
        content_repo=content_repo,
        resolver=resolver,
        settings_service=plugin_settings,
        hooks=hooks,
    )

@pytest.fixture
def secret_store() -> SecretStore:
    return SecretStore("test-secret")


# ---- Async engine + session --------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def SessionMaker(async_engine):
    return async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)

@pytest_asyncio.fixture(scope="function")
async def override_get_session(SessionMaker):
    async def _dep():
        async with SessionMaker() as s:
            yield s
    app.dependency_overrides[get_session] = _dep
    yield
    app.dependency_overrides.pop(get_session, None)

@pytest_asyncio.fixture
async def db_session(SessionMaker):
    async with SessionMaker() as s:
        yield s


# ---- App overrides ----------------------------------------------------------

STAFF = Principal(sub="editor-1", roles=frozenset({"editor"}))
ADMIN = Principal(sub="admin-1", roles=frozenset({"admin"}))

@pytest.fixture
def override_auth():
    # Given: we bypass auth for tests to isolate router/service behavior
    app.dependency_overrides[require_staff] = lambda: STAFF
    app.dependency_overrides[require_admin] = lambda: ADMIN
    app.dependency_overrides[optional_current_user] = lambda: None
    yield
    for dep in (require_staff, require_admin, optional_current_user):
        app.dependency_overrides.pop(dep, None)

@pytest.fixture
def override_featured_deps(memory_cache, size_lookup, secret_store):
    coordinator = PreviewCoordinator()
    app.dependency_overrides[get_resolution_cache] = lambda: memory_cache
    app.dependency_overrides[get_size_lookup] = lambda: size_lookup
    app.dependency_overrides[get_secret_store] = lambda: secret_store
    app.dependency_overrides[get_preview_coordinator] = lambda: coordinator
    yield coordinator
    for dep in (get_resolution_cache, get_size_lookup, get_secret_store, get_preview_coordinator):
        app.dependency_overrides.pop(dep, None)


# ---- HTTP client -------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def client(override_get_session, override_featured_deps) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


# ---- Bearer tokens -----------------------------------------------------------

def make_token(sub: str = "user-1", roles=(), secret: Optional[str] = None, **claims) -> str:
    """Mint a token the way the external identity service does."""
    now = int(time.time())
    payload = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "nbf": now,
        "exp": now + 600,
        "sub": sub,
        "roles": list(roles),
        **claims,
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")

def bearer(*roles: str, secret: Optional[str] = None) -> dict:
    return {"Authorization": f"Bearer {make_token(roles=roles, secret=secret)}"}
