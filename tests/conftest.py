from collections.abc import AsyncGenerator
from contextlib import contextmanager
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings

# Override settings for tests (before the app and engine are imported)
settings.database_url = "sqlite+aiosqlite://"
settings.jwt_secret_key = "test-secret-key-that-is-at-least-32-bytes-long"
settings.fernet_key = "KxJCocbnA3KD20pkgSN3uUZybasKP1X9lAJDX4oLxoQ="  # test-only Fernet key
settings.app_env = "development"
settings.openai_api_key = ""
settings.anthropic_api_key = ""
settings.google_api_key = ""
settings.perplexity_api_key = ""
settings.llm_retry_base_delay = 0.0
settings.llm_rate_limit_delay = 0.0

from app.collectors.llm_base import BaseLlmCollector, LlmResponse  # noqa: E402
from app.core.exceptions import LlmProviderError  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.core.security import create_access_token, hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.postgres import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402

limiter.enabled = False

# One shared in-memory SQLite database for the whole test run; tables are
# recreated around every test
test_engine = create_async_engine(
    "sqlite+aiosqlite://",
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test and drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def user(db: AsyncSession) -> User:
    """A free-plan test user."""
    u = User(
        email="test@example.com",
        password_hash=hash_password("testpassword123"),
        plan="free",
    )
    db.add(u)
    await db.commit()
    return u


@pytest.fixture
async def auth_headers(user: User) -> dict[str, str]:
    """Auth headers with a valid access token."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


class FakeCollector(BaseLlmCollector):
    """Offline collector: answers from a prompt → text callable, or raises."""

    def __init__(self, provider: str, display_name: str, answer=None, error: str | None = None):
        super().__init__(api_key="fake")
        self.provider = provider
        self.display_name = display_name
        self.answer = answer or (lambda prompt: "")
        self.error = error
        self.prompts: list[str] = []

    async def query_llm(self, prompt: str) -> LlmResponse:
        self.prompts.append(prompt)
        if self.error:
            raise LlmProviderError(self.display_name, self.error, status_code=401)
        return LlmResponse(text=self.answer(prompt), model="fake")


@pytest.fixture
def fake_collector():
    """Factory for offline collectors, e.g. ``fake_collector("chatgpt", "ChatGPT", answer=...)``."""
    return FakeCollector


def make_response(status_code: int, payload: dict | list | None = None, url: str = "https://llm.test/") -> httpx.Response:
    """A real httpx.Response so raise_for_status behaves as in production."""
    return httpx.Response(status_code, json=payload if payload is not None else {}, request=httpx.Request("POST", url))


@pytest.fixture
def http_response():
    return make_response


@pytest.fixture
def mock_http():
    """Patch ``<module>.httpx.AsyncClient``; each ``post`` returns the next item.

    Items are httpx.Response objects or exceptions to raise.
    """

    @contextmanager
    def _patch(module: str, *results):
        with patch(f"{module}.httpx.AsyncClient") as MockClient:
            mock_client = AsyncMock()
            mock_client.post.side_effect = list(results)
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=False)
            MockClient.return_value = mock_client
            yield mock_client

    return _patch
