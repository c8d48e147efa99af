"""
Route modules.
"""

from .auth import router as auth_router
from .dashboard import router as dashboard_router
from .misc import router as misc_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "misc_router",
]
