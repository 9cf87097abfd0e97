"""
Command line entry point.

    spiderweb ROOT_URL MAX_URLS TIMEOUT

Prints every link reachable from ROOT_URL, one per line and sorted, with
query parameters broken out onto indented lines. TIMEOUT is in milliseconds.
"""

from __future__ import annotations

import argparse
import re
from typing import List, Optional, Tuple

from .config import MAX_TIMEOUT, MAX_URLS, MIN_TIMEOUT, MIN_URLS, load_env
from .crawler import CrawlState, spider_web
from .log import get_logger

logger = get_logger("spiderweb.cli")

ALLOWED_SCHEMES = ("http", "https")

MSG_ARG_COUNT = "invalid number of args input"
MSG_SCHEME = "invalid scheme in root url"
MSG_MAX_URLS = f"invalid maximum number of reachable urls, must be {MIN_URLS} - {MAX_URLS}"
MSG_TIMEOUT = f"invalid timeout value, must be {MIN_TIMEOUT} - {MAX_TIMEOUT}"

_INT_RE = re.compile(r"[+-]?\d+")


class InvalidInput(ValueError):
    """Command line input rejected before any network activity."""


def _bounded_int(raw: str, low: int, high: int, message: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise InvalidInput(message)
    value = int(raw)
    if value < low or value > high:
        raise InvalidInput(message)
    return value


def validate_args(args: List[str]) -> Tuple[str, int, int]:
    """Check the three positional arguments; returns (root_url, max_urls, timeout)."""
    if len(args) != 3:
        raise InvalidInput(MSG_ARG_COUNT)

    root_url, raw_max, raw_timeout = args
    scheme, sep, _ = root_url.partition("://")
    if not sep or scheme not in ALLOWED_SCHEMES:
        raise InvalidInput(MSG_SCHEME)

    max_urls = _bounded_int(raw_max, MIN_URLS, MAX_URLS, MSG_MAX_URLS)
    timeout = _bounded_int(raw_timeout, MIN_TIMEOUT, MAX_TIMEOUT, MSG_TIMEOUT)
    return root_url, max_urls, timeout


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="spiderweb",
        description="List the links reachable from a single web page",
    )
    p.add_argument(
        "args",
        nargs="*",
        metavar="ARG",
        help=(
            "ROOT_URL MAX_URLS TIMEOUT: http(s) url to fetch, maximum number "
            f"of urls ({MIN_URLS}-{MAX_URLS}) "
            f"and fetch timeout in ms ({MIN_TIMEOUT}-{MAX_TIMEOUT})"
        ),
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    ns = parse_args(argv)
    try:
        root_url, max_urls, timeout = validate_args(ns.args)
    except InvalidInput as e:
        print(e)
        return 0

    logger.info(
        f"Spider start: url={root_url} max_urls={max_urls} timeout={timeout}ms"
    )
    result = spider_web(root_url, max_urls, timeout)
    return 1 if result.state is CrawlState.FAILED else 0


if __name__ == "__main__":
    raise SystemExit(main())
