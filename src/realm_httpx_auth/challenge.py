"""Parser for ``WWW-Authenticate: Bearer`` challenges.

A registry answers an unauthenticated request with something like::

    Bearer realm="https://auth.example.com/token",service="registry",scope="repository:x:pull"

The ``realm`` names the token endpoint; every other parameter is forwarded to
it as a query parameter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .errors import ChallengeFormatError, MissingRealmError

BEARER_SCHEME = "Bearer"


@dataclass(frozen=True)
class RealmChallenge:
    realm_url: str
    params: dict[str, str] = field(default_factory=dict)


def is_bearer_challenge(header_value: str) -> bool:
    parts = header_value.split(None, 1)
    return bool(parts) and parts[0] == BEARER_SCHEME


def parse_challenge(header_value: str) -> RealmChallenge:
    """Parse a full ``Bearer ...`` header value into a :class:`RealmChallenge`.

    Raises :class:`ChallengeFormatError` for a different scheme or a malformed
    parameter list and :class:`MissingRealmError` when no realm is named.
    """
    if not is_bearer_challenge(header_value):
        raise ChallengeFormatError(
            f"Not a {BEARER_SCHEME} challenge: {header_value!r}"
        )
    parts = header_value.split(None, 1)
    return parse_challenge_params(parts[1] if len(parts) > 1 else "")


def parse_challenge_params(text: str) -> RealmChallenge:
    """Parse the parameter list that follows the ``Bearer`` scheme token."""
    realm = ""
    params: dict[str, str] = {}
    for segment in _split_segments(text):
        key, sep, value = segment.strip().partition("=")
        key = key.strip()
        if not sep or not key:
            raise ChallengeFormatError(
                f"Malformed challenge parameter {segment.strip()!r}"
            )
        value = _unquote(value)
        if key == "realm":
            realm = value
        else:
            params[key] = value

    if not realm:
        raise MissingRealmError("Challenge does not name a realm")
    return RealmChallenge(realm_url=realm, params=params)


def _split_segments(text: str) -> Iterator[str]:
    # Commas inside a quoted value (e.g. scope="repository:x:pull,push") do not split.
    current: list[str] = []
    quoted = False
    for char in text:
        if char == '"':
            quoted = not quoted
        elif char == "," and not quoted:
            yield "".join(current)
            current = []
            continue
        current.append(char)
    yield "".join(current)


def _unquote(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value
