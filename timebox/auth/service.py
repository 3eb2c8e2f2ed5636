from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

from jose import jwt, JWTError

from timebox.config import settings
from timebox.auth.models import Identity


class AuthService:
    """
    Token verification against the hosted auth provider.

    Sign-in happens entirely at the provider (OAuth); this service only
    checks the access tokens it issues and builds the authorize URL.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret = secret or settings.AUTH_JWT_SECRET
        self.algorithm = algorithm or settings.AUTH_JWT_ALGORITHM
        self.audience = audience or settings.AUTH_JWT_AUDIENCE

    def create_access_token(
        self,
        user_id: str,
        email: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a token shaped like the provider's; used by tests and local tooling."""
        if expires_delta is None:
            expires_delta = timedelta(hours=1)

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": user_id,
            "aud": self.audience,
            "role": "authenticated",
            "exp": now + expires_delta,
            "iat": now,
        }
        if email is not None:
            to_encode["email"] = email
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[Identity]:
        """Decode and validate a JWT token. Returns the identity if valid."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except JWTError:
            return None
        if not payload.get("sub"):
            return None
        return Identity.from_claims(payload)

    def authorize_url(self, provider: str, redirect_to: Optional[str] = None) -> Optional[str]:
        """Provider OAuth authorize URL, or None if the provider is not enabled."""
        provider = provider.lower()
        if provider not in settings.AUTH_OAUTH_PROVIDERS:
            return None
        query = urlencode({
            "provider": provider,
            "redirect_to": redirect_to or settings.AUTH_REDIRECT_URL,
        })
        return f"{settings.AUTH_PROVIDER_URL.rstrip('/')}/auth/v1/authorize?{query}"
