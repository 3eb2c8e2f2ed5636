"""
TIMEBOX API - Authentication Module

Verifies access tokens issued by the hosted OAuth provider.
"""

from timebox.auth.router import router as auth_router
from timebox.auth.dependencies import CurrentOwner, get_current_owner

__all__ = ["auth_router", "CurrentOwner", "get_current_owner"]
