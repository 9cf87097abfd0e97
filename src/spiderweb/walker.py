from __future__ import annotations

import collections
from typing import Deque, Optional

from .log import get_logger
from .tree import TreeNode
from .url_list import UrlList

logger = get_logger("spiderweb.walker")

LINK_TAG = "a"


def is_valid_url(current: TreeNode, url_list: UrlList) -> bool:
    """True for an ``<a>`` with a resolvable, not yet seen, non-fragment href."""
    if current.tag() != LINK_TAG:
        return False

    url = current.resolved_href()
    if not url:
        return False
    if url_list.contains(url):
        return False

    rel_url = current.attribute("href") or ""
    if rel_url.startswith("#"):
        return False

    return True


def get_next_element(
    current: TreeNode, sibling_queue: Deque[TreeNode]
) -> Optional[TreeNode]:
    """Next element in level order, or None once the document is exhausted.

    Every element reached is queued so its children come after the rest of
    its level.
    """
    nxt = current.next_sibling()

    while nxt is None and sibling_queue:
        nxt = sibling_queue.popleft().first_child()

    if nxt is not None:
        sibling_queue.append(nxt)

    return nxt


def get_url_list(root: Optional[TreeNode], max_urls: int) -> UrlList:
    """Collect up to ``max_urls`` links from a level-order walk starting at ``root``."""
    url_list = UrlList(max_urls)
    sibling_queue: Deque[TreeNode] = collections.deque()
    current = root
    if current is not None:
        sibling_queue.append(current)

    while current is not None and not url_list.is_full:
        if is_valid_url(current, url_list):
            entry = url_list.add(current.resolved_href())
            logger.debug(f"Collected: {entry!r}")
        current = get_next_element(current, sibling_queue)

    logger.info(f"Collected {len(url_list)} urls (max {max_urls})")
    return url_list
