"""Command-line HTTP client that follows Bearer realm authentication challenges."""

from .auth import BasicCredential, RealmAuth, fetch_token, parse_credential
from .challenge import RealmChallenge, parse_challenge
from .client import RequestSpec, aexecute, execute
from .errors import (
    AuthExchangeError,
    ChallengeError,
    ChallengeFormatError,
    MissingRealmError,
    RealmAuthError,
    TokenDecodeError,
    TokenError,
    TransportError,
)

__all__ = [
    "AuthExchangeError",
    "BasicCredential",
    "ChallengeError",
    "ChallengeFormatError",
    "MissingRealmError",
    "RealmAuth",
    "RealmAuthError",
    "RealmChallenge",
    "RequestSpec",
    "TokenDecodeError",
    "TokenError",
    "TransportError",
    "aexecute",
    "execute",
    "fetch_token",
    "parse_challenge",
    "parse_credential",
]
