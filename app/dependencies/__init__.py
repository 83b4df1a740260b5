"""FastAPI dependencies."""

from .auth import *
from .database import *
from .services import *

__all__ = [
    "get_current_user",
    "get_current_active_user",
    "get_optional_current_user",
    "get_db",
    "get_user_service",
    "get_feature_flag_service",
    "get_feature_flags",
    "get_captcha_config",
    "get_captcha_verifier",
    "get_jwt_service",
]
