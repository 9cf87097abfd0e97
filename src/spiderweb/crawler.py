from __future__ import annotations

import enum
import re
import sys
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ReadTimeoutError
from urllib3.util.retry import Retry

from .config import SpiderConfig
from .log import get_logger
from .tree import parse_document
from .walker import get_url_list

logger = get_logger("spiderweb.crawler")

# text/*, application/xml, application/xhtml+xml and friends
_HTML_CONTENT_TYPE = re.compile(r"^(text/|(application|text)/\w*\+?xml)", re.I)
_CHUNK_SIZE = 8192


class CrawlState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


# states whose (possibly empty) url list is printed
PRINTED_STATES = frozenset({CrawlState.SUCCEEDED, CrawlState.TIMED_OUT})


class UnsupportedContentType(requests.RequestException):
    """The response is not something the HTML parser can read."""


@dataclass
class FetchedDocument:
    url: str  # final url, after redirects
    content: Union[str, bytes]
    truncated: bool = False


@dataclass
class CrawlResult:
    root_url: str
    state: CrawlState = CrawlState.IDLE
    urls: List[str] = field(default_factory=list)
    error: Optional[str] = None


def _build_session(ua: str) -> requests.Session:
    s = requests.Session()
    # one attempt only; read=False re-raises read timeouts instead of
    # wrapping them in MaxRetryError, so requests reports ReadTimeout
    retry = Retry(total=0, read=False, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({"User-Agent": ua})
    return s


def _read_body(
    resp: requests.Response, deadline: float, max_body_bytes: int
) -> tuple[bytes, bool]:
    chunks: List[bytes] = []
    size = 0
    try:
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise requests.exceptions.ReadTimeout(
                    f"Fetch deadline exceeded while reading {resp.url}"
                )
            chunks.append(chunk)
            size += len(chunk)
            if max_body_bytes and size >= max_body_bytes:
                body = b"".join(chunks)[:max_body_bytes]
                return body, size > max_body_bytes
    except requests.exceptions.ConnectionError as e:
        # requests reports a socket read timeout during streaming as ConnectionError
        if e.args and isinstance(e.args[0], ReadTimeoutError):
            raise requests.exceptions.ReadTimeout(str(e)) from e
        raise
    return b"".join(chunks), False


def fetch_document(
    session: requests.Session,
    url: str,
    timeout: float,
    max_body_bytes: int = 0,
) -> FetchedDocument:
    """GET ``url`` following redirects, bounded by ``timeout`` seconds overall."""
    deadline = time.monotonic() + timeout
    logger.info(f"Fetching URL: {url} (timeout {timeout:.3f}s)")
    with session.get(url, timeout=timeout, allow_redirects=True, stream=True) as resp:
        resp.raise_for_status()
        ctype = resp.headers.get("Content-Type", "")
        if ctype and not _HTML_CONTENT_TYPE.match(ctype):
            raise UnsupportedContentType(
                f"Unhandled content type {ctype!r} for {resp.url}", response=resp
            )
        body, truncated = _read_body(resp, deadline, max_body_bytes)
        if truncated:
            logger.warning(f"Body truncated at {max_body_bytes} bytes: {resp.url}")
        content: Union[str, bytes] = body
        # without a declared charset the parser sniffs it from the markup
        if "charset" in ctype.lower() and resp.encoding:
            try:
                content = body.decode(resp.encoding, errors="replace")
            except LookupError:
                logger.warning(
                    f"Unknown charset {resp.encoding!r} for {resp.url}; sniffing from markup"
                )
        logger.info(f"Fetched {len(body)} bytes from {resp.url}")
        return FetchedDocument(url=resp.url, content=content, truncated=truncated)


def print_urls(urls: Iterable[str], out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    for url in urls:
        print(url, file=out)


def spider_web(
    root_url: str,
    max_urls: int,
    timeout: int,
    *,
    config: Optional[SpiderConfig] = None,
    session: Optional[requests.Session] = None,
    out: Optional[TextIO] = None,
) -> CrawlResult:
    """Print the sorted links reachable from ``root_url``.

    ``timeout`` is in milliseconds. A timed out fetch prints whatever was
    collected (nothing, since collection starts after the fetch); any other
    I/O failure is logged and nothing is printed.
    """
    cfg = config or SpiderConfig.from_env()
    result = CrawlResult(root_url=root_url)
    own_session = session is None
    sess = session or _build_session(cfg.user_agent)
    try:
        result.state = CrawlState.FETCHING
        doc = fetch_document(
            sess, root_url, cfg.fetch_timeout(timeout), cfg.max_body_bytes
        )
        root = parse_document(doc.content, doc.url, cfg.parser)
        result.urls = get_url_list(root, max_urls).sort().to_list()
        result.state = CrawlState.SUCCEEDED
    except requests.Timeout as e:
        result.state = CrawlState.TIMED_OUT
        logger.warning(f"Fetch timed out for {root_url}: {e}")
    except (requests.RequestException, OSError) as e:
        result.state = CrawlState.FAILED
        result.error = f"{type(e).__name__}: {e}"
        logger.error(f"Crawl failed for {root_url}: {result.error}", exc_info=True)
    finally:
        if own_session:
            sess.close()
        if result.state in PRINTED_STATES:
            print_urls(result.urls, out)

    logger.info(f"Crawl {result.state.value}: {len(result.urls)} urls")
    return result
