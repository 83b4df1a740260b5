"""Configuration module."""

from .database import init_models
from .settings import settings

__all__ = ["settings", "init_models"]
