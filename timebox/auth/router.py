"""
TIMEBOX API - Authentication Router

OAuth sign-in redirect and current identity info.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from timebox.auth.schemas import IdentityResponse
from timebox.auth.service import AuthService
from timebox.auth.dependencies import CurrentOwner, get_auth_service


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get(
    "/login/{provider}",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Start OAuth sign-in",
)
async def login(
    provider: str,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    redirect_to: Optional[str] = Query(
        default=None,
        description="Where the provider sends the user after sign-in",
    ),
) -> RedirectResponse:
    """
    Redirect to the hosted auth provider's OAuth flow.

    The provider issues the access token used in
    `Authorization: Bearer <token>` on every other endpoint.
    """
    url = auth_service.authorize_url(provider, redirect_to)
    if url is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unsupported OAuth provider",
        )
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get(
    "/me",
    response_model=IdentityResponse,
    summary="Get current user info",
)
async def get_me(current_owner: CurrentOwner) -> IdentityResponse:
    """
    Get the current authenticated user's public information.

    Requires a valid JWT token in the Authorization header.
    """
    return IdentityResponse(
        id=current_owner.id,
        email=current_owner.email,
        role=current_owner.role,
    )
