"""Test configuration and fixtures."""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config.database import configure_engine, init_models
from app.config.settings import settings
from app.dependencies.database import get_db
from app.dependencies.services import get_captcha_config, get_captcha_verifier
from app.main import app
from app.models.user import User, UserCapability
from app.services.account_gate import CaptchaConfig, CaptchaKeys, CaptchaVariant
from app.services.feature_flag_service import FeatureFlagService
from app.services.jwt_service import JWTService
from app.utils.security import hash_password

TEST_PASSWORD = "Correct-Horse-42"


@pytest.fixture(scope="session", autouse=True)
def setup_test_settings():
    """Setup test settings configuration."""
    settings.TESTING = True
    settings.ENVIRONMENT = "test"
    settings.CONFIRMATION_REQUIRED = True
    yield


class StubCaptchaVerifier:
    """Answers reCAPTCHA checks without calling the provider."""

    def __init__(self):
        self.results: dict[CaptchaVariant, bool] = {}
        self.calls: list[tuple[CaptchaVariant, str, str]] = []

    async def verify(self, variant, secret_key, token, remote_ip=None):
        self.calls.append((variant, secret_key, token))
        return self.results.get(variant, True)


class CaptchaHarness:
    """reCAPTCHA keys and verifier answers for one test."""

    def __init__(self):
        self.config = CaptchaConfig()
        self.verifier = StubCaptchaVerifier()

    def configure(self, *variants: CaptchaVariant, secrets: bool = True):
        self.config = CaptchaConfig(
            {
                variant: CaptchaKeys(
                    site_key=f"{variant.value}-site-key",
                    secret_key=f"{variant.value}-secret-key" if secrets else None,
                )
                for variant in variants
            }
        )

    def reject(self, *variants: CaptchaVariant):
        for variant in variants:
            self.verifier.results[variant] = False


@pytest.fixture
def captcha() -> CaptchaHarness:
    return CaptchaHarness()


# Fresh in-memory database per test
@pytest_asyncio.fixture
async def engine():
    engine = configure_engine(
        create_async_engine(
            "sqlite+aiosqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_local(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Async test client
@pytest_asyncio.fixture
async def async_client(session_local, captcha) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client bound to the test database."""

    async def override_get_db():
        async with session_local() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_captcha_config] = lambda: captcha.config
    app.dependency_overrides[get_captcha_verifier] = lambda: captcha.verifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def enable_features(session_local):
    """Seed the feature flags (off) and switch on the named ones."""

    async def _enable(*names):
        async with session_local() as session:
            flag_service = FeatureFlagService(session)
            await flag_service.seed(enabled=False)
            for name in names:
                await flag_service.enable(getattr(name, "value", name))

    return _enable


@pytest_asyncio.fixture
async def make_user(session_local):
    """Create a user straight in the database."""

    async def _make_user(
        username: str | None = None,
        email: str | None = None,
        password: str = TEST_PASSWORD,
        is_superuser: bool = False,
        confirmed: bool = True,
        capabilities: tuple[tuple[str, str], ...] = (),
        **fields,
    ) -> User:
        unique_id = str(uuid.uuid4())[:8]
        username = username or f"user_{unique_id}"

        async with session_local() as session:
            user = User(
                username=username,
                email=email or f"{username}@example.com",
                password_hash=hash_password(password),
                is_active=True,
                is_superuser=is_superuser,
                confirmed_at=datetime.now(timezone.utc) if confirmed else None,
                capabilities=[
                    UserCapability(category=getattr(category, "value", category), name=getattr(name, "value", name))
                    for category, name in capabilities
                ],
                **fields,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)

        # Handy for login tests
        user.original_password = password
        return user

    return _make_user


def auth_headers_for(user: User) -> dict[str, str]:
    token = JWTService().create_access_token(user.id, user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def superuser(make_user) -> User:
    return await make_user(username="chief", is_superuser=True)


@pytest_asyncio.fixture
async def superuser_headers(superuser) -> dict[str, str]:
    return auth_headers_for(superuser)
