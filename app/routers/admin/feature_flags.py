"""Admin routes for feature flags."""

from fastapi import APIRouter, Depends

from app.dependencies.auth import get_current_active_user
from app.dependencies.services import get_feature_flag_service
from app.models.feature_flag import FeatureFlag
from app.models.user import User
from app.policies import Action, authorise
from app.schemas.admin import (
    FeatureFlagDetailResponse,
    FeatureFlagListResponse,
    FeatureFlagResponse,
    FeatureFlagUpdate,
)
from app.services.feature_flag_service import FeatureFlagService
from app.utils.exceptions import NotFoundError

router = APIRouter()


@router.get("", response_model=FeatureFlagListResponse)
async def list_feature_flags(
    current_user: User = Depends(get_current_active_user),
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """List feature flags."""

    flags = await flag_service.get_flags()
    authorise(flags or FeatureFlag, Action.LIST, current_user)

    return FeatureFlagListResponse(
        feature_flags=[FeatureFlagResponse.model_validate(flag) for flag in flags]
    )


@router.put("/{name}", response_model=FeatureFlagDetailResponse)
async def update_feature_flag(
    name: str,
    flag_update: FeatureFlagUpdate,
    current_user: User = Depends(get_current_active_user),
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Switch a feature flag on or off."""

    flag = await flag_service.get_flag(name)
    if not flag:
        raise NotFoundError(f"Feature flag '{name}' not found")

    authorise(flag, Action.UPDATE, current_user)

    flag = await flag_service.set_enabled(name, flag_update.enabled)

    return FeatureFlagDetailResponse(
        message="Feature flag updated",
        feature_flag=FeatureFlagResponse.model_validate(flag),
    )
