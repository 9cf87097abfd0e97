"""
Navigable element tree used by the link walker.

The walker only needs a narrow view of a parsed page: tag name, raw
attributes, the absolute form of ``href`` and element-only first-child /
next-sibling links. ``SoupNode`` provides that view over BeautifulSoup.
"""

from __future__ import annotations

import urllib.parse
from typing import Optional, Protocol, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

# schemes an href may resolve to; anything else (javascript:, data:, tel:) is unresolvable
RESOLVABLE_SCHEMES = frozenset({"http", "https", "ftp", "file", "mailto"})
NETWORK_SCHEMES = frozenset({"http", "https", "ftp"})


class TreeNode(Protocol):
    def tag(self) -> str:
        ...

    def attribute(self, name: str) -> Optional[str]:
        ...

    def resolved_href(self) -> str:
        ...

    def first_child(self) -> Optional["TreeNode"]:
        ...

    def next_sibling(self) -> Optional["TreeNode"]:
        ...


def resolve_url(base_url: str, href: Optional[str]) -> str:
    """Resolve ``href`` against ``base_url``; returns "" when it cannot be made absolute."""
    if href is None:
        return ""
    try:
        resolved = urllib.parse.urljoin(base_url, href.strip())
        parts = urllib.parse.urlsplit(resolved)
    except ValueError:
        return ""
    scheme = parts.scheme.lower()
    if scheme not in RESOLVABLE_SCHEMES:
        return ""
    if scheme in NETWORK_SCHEMES and not parts.netloc:
        return ""
    return resolved


class SoupNode:
    """TreeNode over a BeautifulSoup ``Tag``."""

    __slots__ = ("_el", "base_url")

    def __init__(self, el: Tag, base_url: str) -> None:
        self._el = el
        self.base_url = base_url

    def __repr__(self) -> str:
        return f"SoupNode(<{self._el.name}>)"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other._el is self._el

    def __hash__(self) -> int:
        return id(self._el)

    def _wrap(self, el: Optional[Tag]) -> Optional["SoupNode"]:
        return SoupNode(el, self.base_url) if el is not None else None

    def tag(self) -> str:
        return self._el.name

    def attribute(self, name: str) -> Optional[str]:
        value = self._el.get(name)
        # multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def resolved_href(self) -> str:
        return resolve_url(self.base_url, self.attribute("href"))

    def first_child(self) -> Optional["SoupNode"]:
        return self._wrap(self._el.find(True, recursive=False))

    def next_sibling(self) -> Optional["SoupNode"]:
        return self._wrap(self._el.find_next_sibling(True))


def document_base(soup: BeautifulSoup, url: str) -> str:
    """Base url for relative links: the first ``<base href>`` if any, else ``url``."""
    base = soup.find("base", href=True)
    if base is not None:
        resolved = resolve_url(url, base.get("href"))
        if resolved:
            return resolved
    return url


def parse_document(
    html: Union[str, bytes], url: str, parser: str = "html.parser"
) -> Optional[SoupNode]:
    """Parse ``html`` fetched from ``url`` and return its first element, if any."""
    soup = BeautifulSoup(html, parser)
    root = soup.find(True, recursive=False)
    if root is None:
        return None
    return SoupNode(root, document_base(soup, url))
