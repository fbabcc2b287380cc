from __future__ import annotations

import argparse
import logging
import sys

import httpx

from .auth import parse_credential
from .client import DEFAULT_TIMEOUT_SECONDS, RequestSpec, execute
from .errors import RealmAuthError
from .render import OutputOptions, render_response


def _header(value: str) -> tuple[str, str]:
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {value!r}")
    return name.strip(), content.strip()


def _clean_url(value: str) -> str:
    if "://" not in value:
        value = f"http://{value}"
    try:
        return str(httpx.URL(value))
    except httpx.InvalidURL as exc:
        raise argparse.ArgumentTypeError(f"invalid URL {value!r}: {exc}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="realm-http",
        description="Transfer a URL with Bearer realm auth support.",
    )
    parser.add_argument("url", type=_clean_url, help="URL to request")
    parser.add_argument(
        "-X", "--request", dest="method", default="GET", metavar="METHOD",
        help="HTTP method (default: GET)",
    )
    parser.add_argument(
        "-d", "--data", default="", metavar="DATA", help="request body",
    )
    parser.add_argument(
        "-u", "--user", default="", metavar="USER:PASSWORD",
        help="basic authentication credentials",
    )
    parser.add_argument(
        "--realm-user", default="", metavar="USER:PASSWORD",
        help="credentials for the realm named in a WWW-Authenticate challenge",
    )
    parser.add_argument(
        "-H", "--header", dest="headers", type=_header, action="append",
        default=[], metavar="HEADER", help="add a request header, repeatable",
    )
    parser.add_argument(
        "-i", "--include", action="store_true", help="show response headers",
    )
    parser.add_argument(
        "-I", "--head", action="store_true", help="show response headers only",
    )
    parser.add_argument(
        "-V", "--verbose", action="store_true",
        help="be verbose about what is going on",
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS, metavar="SECONDS",
        help=f"network timeout (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        format="* %(message)s",
        level=logging.INFO if verbose else logging.WARNING,
    )


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    spec = RequestSpec(
        method=args.method.upper(),
        url=args.url,
        headers=tuple(args.headers),
        body=args.data.encode("utf-8"),
    )
    options = OutputOptions(
        show_headers=args.include or args.head,
        show_body=not args.head,
    )

    try:
        response = execute(
            spec,
            parse_credential(args.user),
            parse_credential(args.realm_user),
            timeout=args.timeout,
        )
    except RealmAuthError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1

    render_response(response, options)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
