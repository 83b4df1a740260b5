"""API routers."""

from . import account, admin

__all__ = ["account", "admin"]
