"""Constants package."""

from .features import (
    ACCOUNT_CONFIRMED_NOTICE,
    ACCOUNT_UPDATED_NOTICE,
    CAPTCHA_FAILED_ALERT,
    CAPTCHA_FALLBACK_ALERT,
    FEATURE_DESCRIPTIONS,
    FEATURE_NAMES,
    REGISTRATION_NOTICE,
    FeatureFlagName,
    feature_name,
    feature_off_alert,
)
from .status_codes import APIStatus

__all__ = [
    "APIStatus",
    "FeatureFlagName",
    "FEATURE_NAMES",
    "FEATURE_DESCRIPTIONS",
    "feature_name",
    "feature_off_alert",
    "REGISTRATION_NOTICE",
    "CAPTCHA_FAILED_ALERT",
    "CAPTCHA_FALLBACK_ALERT",
    "ACCOUNT_UPDATED_NOTICE",
    "ACCOUNT_CONFIRMED_NOTICE",
]
