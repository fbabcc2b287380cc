from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Generator, Optional

import httpx

from .challenge import RealmChallenge, is_bearer_challenge, parse_challenge
from .errors import (
    AuthExchangeError,
    ChallengeFormatError,
    TokenDecodeError,
    TransportError,
)

_LOG = logging.getLogger("realm_httpx_auth")


@dataclass(frozen=True)
class BasicCredential:
    identity: str
    secret: str = ""

    @classmethod
    def from_string(cls, value: str) -> "BasicCredential":
        """Parse ``user:pass``; a value without ``:`` is a user with no password."""
        identity, _, secret = value.partition(":")
        return cls(identity=identity, secret=secret)

    def authorization_header(self) -> str:
        """Basic header value.

        On the first request it replaces an explicit ``Authorization`` header
        (``-u`` wins over ``-H "Authorization: ..."``).
        """
        userpass = f"{self.identity}:{self.secret}".encode("utf-8")
        return "Basic " + base64.b64encode(userpass).decode("ascii")


def parse_credential(value: Optional[str]) -> Optional[BasicCredential]:
    """Return ``None`` for a missing or empty credential string."""
    if not value:
        return None
    return BasicCredential.from_string(value)


@dataclass(frozen=True)
class TokenResponse:
    token: str

    @classmethod
    def from_json(cls, content: bytes) -> "TokenResponse":
        try:
            data = json.loads(content)
        except (ValueError, json.JSONDecodeError) as exc:
            raise TokenDecodeError(f"Token response is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise TokenDecodeError("Token response is not a JSON object")
        token = data.get("token")
        if not isinstance(token, str):
            raise TokenDecodeError("Token response has no string 'token' field")
        return cls(token=token)


class RealmAuth(httpx.Auth):
    """Basic auth that follows a ``WWW-Authenticate: Bearer`` realm challenge.

    The first request carries ``credential`` (if any). A 401 answered with a
    Bearer challenge is followed only when ``realm_credential`` is set: the
    realm is asked for a token with those credentials and the original request
    is sent once more with ``Authorization: Bearer <token>``. The retried
    response is final, even if it is another 401.
    """

    requires_request_body = True
    requires_response_body = True

    def __init__(
        self,
        credential: Optional[BasicCredential] = None,
        realm_credential: Optional[BasicCredential] = None,
    ) -> None:
        self._credential = credential
        self._realm_credential = realm_credential

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        if self._credential is not None:
            request.headers["Authorization"] = self._credential.authorization_header()
        response = yield request

        if self._realm_credential is None:
            return
        challenge = _challenge_to_follow(response)
        if challenge is None:
            return

        _LOG.info("Following realm auth to: %s", challenge.realm_url)
        token_request = build_token_request(
            challenge,
            self._realm_credential,
            origin=response.request.url,
            extensions=_timeout_extensions(request),
        )
        token_response = yield token_request
        token = decode_token_response(challenge, token_response)

        retry = _clone_request(request)
        retry.headers["Authorization"] = f"Bearer {token}"
        yield retry


def fetch_token(
    challenge: RealmChallenge,
    credential: BasicCredential,
    client: httpx.Client,
    *,
    origin: Optional[httpx.URL] = None,
) -> str:
    """Exchange ``credential`` for a bearer token at the challenge's realm."""
    request = build_token_request(challenge, credential, origin=origin)
    try:
        response = client.send(request)
    except httpx.HTTPError as exc:
        raise TransportError(
            f"Failed to query realm {challenge.realm_url}: {exc}"
        ) from exc
    return decode_token_response(challenge, response)


def build_token_request(
    challenge: RealmChallenge,
    credential: BasicCredential,
    *,
    origin: Optional[httpx.URL] = None,
    extensions: Optional[dict[str, Any]] = None,
) -> httpx.Request:
    try:
        url = httpx.URL(challenge.realm_url)
        if origin is not None:
            url = origin.join(url)
        url = url.copy_merge_params(challenge.params)
    except httpx.InvalidURL as exc:
        raise ChallengeFormatError(
            f"Invalid realm URL {challenge.realm_url!r}: {exc}"
        ) from exc
    return httpx.Request(
        "GET",
        url,
        headers={"Authorization": credential.authorization_header()},
        extensions=extensions,
    )


def decode_token_response(challenge: RealmChallenge, response: httpx.Response) -> str:
    if response.status_code != httpx.codes.OK:
        _LOG.warning(
            "Failed to get token from %s (status %s): %s",
            challenge.realm_url,
            response.status_code,
            response.text,
        )
        raise AuthExchangeError(
            f"Failed to get token from {challenge.realm_url}: "
            f"status {response.status_code}",
            response=response,
        )
    token = TokenResponse.from_json(response.content).token
    _LOG.info("Obtained bearer token from %s", challenge.realm_url)
    return token


def _challenge_to_follow(response: httpx.Response) -> Optional[RealmChallenge]:
    if response.status_code != httpx.codes.UNAUTHORIZED:
        return None
    for value in response.headers.get_list("www-authenticate"):
        if is_bearer_challenge(value):
            return parse_challenge(value)
    return None


def _clone_request(request: httpx.Request) -> httpx.Request:
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=request.headers,
        content=request.content,
        extensions=request.extensions,
    )


def _timeout_extensions(request: httpx.Request) -> dict[str, Any]:
    # Requests yielded from an auth flow do not get the client's timeout.
    timeout = request.extensions.get("timeout")
    return {"timeout": timeout} if timeout is not None else {}
