from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from .auth import BasicCredential, RealmAuth
from .errors import TransportError

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class RequestSpec:
    method: str
    url: str
    headers: Sequence[tuple[str, str]] = ()
    body: bytes = b""

    def build_request(self) -> httpx.Request:
        return httpx.Request(
            self.method,
            self.url,
            headers=list(self.headers),
            content=self.body or None,
        )


def execute(
    spec: RequestSpec,
    credential: Optional[BasicCredential] = None,
    realm_credential: Optional[BasicCredential] = None,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """Send ``spec`` once, following a Bearer realm challenge if asked to.

    The returned response has its body loaded. Any failure of the underlying
    network calls is raised as :class:`TransportError`; challenge and token
    failures propagate as their own :class:`RealmAuthError` subclasses.
    """
    auth = RealmAuth(credential=credential, realm_credential=realm_credential)
    try:
        with httpx.Client(
            http2=True,
            follow_redirects=True,
            timeout=timeout,
            transport=transport,
        ) as client:
            return client.send(spec.build_request(), auth=auth)
    except httpx.HTTPError as exc:
        raise TransportError(_describe_failure(spec, exc)) from exc


async def aexecute(
    spec: RequestSpec,
    credential: Optional[BasicCredential] = None,
    realm_credential: Optional[BasicCredential] = None,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    auth = RealmAuth(credential=credential, realm_credential=realm_credential)
    try:
        async with httpx.AsyncClient(
            http2=True,
            follow_redirects=True,
            timeout=timeout,
            transport=transport,
        ) as client:
            return await client.send(spec.build_request(), auth=auth)
    except httpx.HTTPError as exc:
        raise TransportError(_describe_failure(spec, exc)) from exc


def _describe_failure(spec: RequestSpec, exc: Exception) -> str:
    return f"{spec.method} {spec.url} failed: {exc}"
