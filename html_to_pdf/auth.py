"""Access gate for the letterhead feature."""

import hmac
from typing import Optional, Protocol


class Authorizer(Protocol):
    def authorize(self, token: Optional[str]) -> bool:  # pragma: no cover - interface
        ...


class SharedSecretAuthorizer:
    """Accept exactly one shared secret.

    A placeholder gate, not authentication: swap in another ``Authorizer`` to
    check real credentials.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Letterhead secret must not be empty")
        self._secret = secret

    def authorize(self, token: Optional[str]) -> bool:
        if token is None:
            return False
        return hmac.compare_digest(str(token).encode("utf-8"), self._secret.encode("utf-8"))


__all__ = ["Authorizer", "SharedSecretAuthorizer"]
