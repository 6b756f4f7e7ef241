"""Caller identity as seen by the service."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class TokenUser:
    """The authenticated caller.

    ``id`` is opaque: it is compared against owner and member ids, never parsed.
    """

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(Protocol):
    """Turns bearer tokens into callers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the caller for a token, or None if it must be rejected."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for ``user`` (tests and local tooling only)."""
        ...
