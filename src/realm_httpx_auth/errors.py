"""Exception hierarchy for the realm authentication flow."""

from __future__ import annotations

from typing import Optional

import httpx


class RealmAuthError(RuntimeError):
    """Base class for every failure of a realm-authenticated request."""


class TransportError(RealmAuthError):
    """Raised when the network call itself fails (DNS, connect, I/O, timeout)."""


class ChallengeError(RealmAuthError):
    """Raised when a Bearer challenge cannot be followed."""


class ChallengeFormatError(ChallengeError):
    """Raised when a ``WWW-Authenticate`` value is malformed."""


class MissingRealmError(ChallengeError):
    """Raised when a challenge parsed cleanly but names no realm."""


class TokenError(RealmAuthError):
    """Raised when a bearer token cannot be obtained from the realm."""


class AuthExchangeError(TokenError):
    """Raised when the realm answers the token request with a non-200 status."""

    def __init__(self, message: str, response: Optional[httpx.Response] = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def body(self) -> str:
        if self.response is None:
            return ""
        return self.response.text


class TokenDecodeError(TokenError):
    """Raised when the realm returned 200 without a usable ``token`` field."""
