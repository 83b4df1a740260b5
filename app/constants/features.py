"""Feature flag names and the user-facing copy that goes with them."""

from enum import Enum


class FeatureFlagName(str, Enum):
    """Flags the account screens are gated by."""

    USER_LOGIN = "user_login"
    USER_PROFILES = "user_profiles"
    USER_REGISTRATION = "user_registration"


FEATURE_NAMES = {
    FeatureFlagName.USER_LOGIN: "User logins",
    FeatureFlagName.USER_PROFILES: "User profiles",
    FeatureFlagName.USER_REGISTRATION: "User registrations",
}

FEATURE_DESCRIPTIONS = {
    FeatureFlagName.USER_LOGIN: "Allow users to log in",
    FeatureFlagName.USER_PROFILES: "Show public user profile pages",
    FeatureFlagName.USER_REGISTRATION: "Allow new users to create an account",
}


def feature_name(flag: str) -> str:
    """Human-facing name of a feature flag."""
    try:
        return FEATURE_NAMES[FeatureFlagName(flag)]
    except ValueError:
        return flag.replace("_", " ").capitalize()


def feature_off_alert(flag: str) -> str:
    return f"{feature_name(flag)} are not enabled"


# Account flow copy
REGISTRATION_NOTICE = (
    "A message with a confirmation link has been sent to your email address. "
    "Please follow the link to activate your account."
)
CAPTCHA_FAILED_ALERT = "The CAPTCHA check failed, please try again"
CAPTCHA_FALLBACK_ALERT = "Please complete the CAPTCHA to finish registering"
ACCOUNT_UPDATED_NOTICE = "Your account has been updated successfully."
ACCOUNT_CONFIRMED_NOTICE = "Your email address has been successfully confirmed."
