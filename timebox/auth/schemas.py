"""
TIMEBOX API - Authentication Schemas

Pydantic models for authentication responses.
"""

from typing import Optional

from pydantic import BaseModel


class IdentityResponse(BaseModel):
    """Public information about the token subject."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
