"""Feature flag lookup, toggling and seeding."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.features import FEATURE_DESCRIPTIONS, FeatureFlagName
from app.models.feature_flag import FeatureFlag
from app.utils.exceptions import NotFoundError

from .account_gate import FeatureFlagSet

logger = logging.getLogger(__name__)


class FeatureFlagService:
    """Service for feature flag operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_flags(self) -> list[FeatureFlag]:
        result = await self.db.execute(select(FeatureFlag).order_by(FeatureFlag.name))
        return list(result.scalars().all())

    async def get_flag(self, name: str) -> FeatureFlag | None:
        result = await self.db.execute(select(FeatureFlag).where(FeatureFlag.name == name))
        return result.scalar_one_or_none()

    async def snapshot(self) -> FeatureFlagSet:
        """Read every flag once, for use throughout a single request."""
        return FeatureFlagSet.from_flags(await self.get_flags())

    async def set_enabled(self, name: str, enabled: bool) -> FeatureFlag:
        flag = await self.get_flag(name)
        if not flag:
            raise NotFoundError(f"Feature flag '{name}' not found")

        flag.enabled = enabled
        await self.db.commit()
        await self.db.refresh(flag)

        logger.info(
            f"Feature flag {name} {'enabled' if enabled else 'disabled'}",
            extra={"feature_flag": name, "enabled": enabled},
        )
        return flag

    async def enable(self, name: str) -> FeatureFlag:
        return await self.set_enabled(name, True)

    async def disable(self, name: str) -> FeatureFlag:
        return await self.set_enabled(name, False)

    async def seed(self, enabled: bool = False) -> list[FeatureFlag]:
        """Create any known flag that is missing; existing flags are left alone."""
        created = []
        for flag_name in FeatureFlagName:
            if await self.get_flag(flag_name.value):
                continue

            flag = FeatureFlag(
                name=flag_name.value,
                description=FEATURE_DESCRIPTIONS[flag_name],
                enabled=enabled,
            )
            self.db.add(flag)
            created.append(flag)

        if created:
            await self.db.commit()
            logger.info(
                f"Seeded {len(created)} feature flags",
                extra={"feature_flags": [flag.name for flag in created]},
            )

        return created
