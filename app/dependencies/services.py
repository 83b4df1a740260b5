"""Service dependency injection."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.dependencies.database import get_db
from app.services.account_gate import CaptchaConfig, CaptchaVerifier, FeatureFlagSet
from app.services.captcha_service import RecaptchaVerifier
from app.services.feature_flag_service import FeatureFlagService
from app.services.jwt_service import JWTService
from app.services.user_service import UserService


async def get_user_service(db: AsyncSession = Depends(get_db)) -> AsyncGenerator[UserService, None]:
    """Get UserService instance."""
    yield UserService(db)


async def get_feature_flag_service(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[FeatureFlagService, None]:
    """Get FeatureFlagService instance."""
    yield FeatureFlagService(db)


async def get_feature_flags(
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
) -> FeatureFlagSet:
    """Snapshot of the feature flags, read once per request."""
    return await flag_service.snapshot()


def get_captcha_config() -> CaptchaConfig:
    """reCAPTCHA keys from settings."""
    return CaptchaConfig.from_settings(settings)


def get_captcha_verifier() -> CaptchaVerifier:
    """Collaborator that checks reCAPTCHA tokens with the provider."""
    return RecaptchaVerifier()


def get_jwt_service() -> JWTService:
    """Get JWTService instance."""
    return JWTService()
