from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timebox.auth.models import Identity
from timebox.auth.service import AuthService


# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService()


async def get_current_owner(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Identity:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    identity = auth_service.decode_token(credentials.credentials)
    if identity is None:
        raise credentials_exception

    return identity


# Type alias for cleaner dependency injection
CurrentOwner = Annotated[Identity, Depends(get_current_owner)]
