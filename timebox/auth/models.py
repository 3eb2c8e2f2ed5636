from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Authenticated owner, as asserted by the hosted auth provider's token."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: dict) -> "Identity":
        """Build an identity from decoded JWT claims."""
        return cls(
            id=claims["sub"],
            email=claims.get("email"),
            role=claims.get("role"),
        )
