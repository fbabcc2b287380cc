from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, Optional, TextIO

import httpx


@dataclass(frozen=True)
class OutputOptions:
    show_headers: bool = False
    show_body: bool = True


def render_response(
    response: httpx.Response,
    options: OutputOptions,
    stream: Optional[TextIO] = None,
) -> None:
    out = stream if stream is not None else sys.stdout
    if options.show_headers:
        print(_status_line(response), file=out)
        for line in _format_headers(response.headers):
            print(line, file=out)
        print(file=out)
    if options.show_body:
        print(response.text, end="", file=out)


def _status_line(response: httpx.Response) -> str:
    return f"{response.http_version} {response.status_code} {response.reason_phrase}"


def _format_headers(headers: httpx.Headers) -> Iterable[str]:
    for key, value in headers.multi_items():
        yield f"{key}: {value}"
