"""
Level-order walk and link admission over a synthetic element tree.
"""

import collections

from fakes import a, el
from spiderweb.url_list import UrlList
from spiderweb.walker import get_next_element, get_url_list, is_valid_url


def visit_order(root):
    queue = collections.deque([root])
    current = root
    order = []
    while current is not None:
        order.append(current.label)
        current = get_next_element(current, queue)
    return order


class TestGetNextElement:
    def test_level_order(self):
        root = el(
            "div",
            el("div", el("p", id="a1"), el("div", el("p", id="x"), id="a2"), id="a"),
            el("div", el("p", id="b1"), id="b"),
            el("p", id="c"),
            id="r",
        )
        assert visit_order(root) == ["r", "a", "b", "c", "a1", "a2", "b1", "x"]

    def test_visits_each_element_once(self):
        root = el("html", el("head", el("title")), el("body", el("p", el("a"), el("a")), el("a")))
        order = visit_order(root)
        assert len(order) == 8

    def test_single_root(self):
        assert visit_order(el("a", id="only")) == ["only"]

    def test_deep_chain(self):
        root = el("div", el("div", el("div", el("a", id="leaf"), id="d2"), id="d1"), id="d0")
        assert visit_order(root) == ["d0", "d1", "d2", "leaf"]


class TestIsValidUrl:
    def test_anchor_with_absolute_href(self):
        assert is_valid_url(a("https://other.test/x"), UrlList(5))

    def test_relative_href_resolves(self):
        assert is_valid_url(a("/about"), UrlList(5))

    def test_non_anchor_rejected(self):
        node = el("link", href="https://other.test/style.css")
        assert not is_valid_url(node, UrlList(5))

    def test_anchor_without_href_rejected(self):
        assert not is_valid_url(a(), UrlList(5))

    def test_unresolvable_href_rejected(self):
        assert not is_valid_url(a("javascript:void(0)"), UrlList(5))

    def test_duplicate_rejected(self):
        urls = UrlList(5)
        urls.add("https://other.test/x")
        assert not is_valid_url(a("https://other.test/x"), urls)

    def test_fragment_rejected(self):
        assert not is_valid_url(a("#section"), UrlList(5))

    def test_fragment_on_other_page_accepted(self):
        assert is_valid_url(a("/page#section"), UrlList(5))


class TestGetUrlList:
    def test_empty_tree(self):
        assert len(get_url_list(None, 10)) == 0

    def test_single_valid_root(self):
        urls = get_url_list(a("https://other.test/"), 10)
        assert list(urls) == ["https://other.test/"]

    def test_collects_in_level_order(self):
        root = el(
            "body",
            a("/first"),
            el("div", a("/third")),
            a("/second"),
        )
        assert list(get_url_list(root, 10)) == [
            "https://example.test/first",
            "https://example.test/second",
            "https://example.test/third",
        ]

    def test_duplicates_and_fragments_skipped(self):
        root = el(
            "body",
            a("https://b.test/"),
            a("/c"),
            a("https://b.test/"),
            a("#top"),
            el("p", a("https://a.test/")),
        )
        urls = get_url_list(root, 10)
        assert len(urls) == 3
        assert urls.sort().to_list() == [
            "https://a.test/",
            "https://b.test/",
            "https://example.test/c",
        ]

    def test_stops_at_capacity(self):
        root = el("body", a("/1"), a("/2"), a("/3"), el("div", a("/4")))
        urls = get_url_list(root, 2)
        assert list(urls) == ["https://example.test/1", "https://example.test/2"]

    def test_query_urls_formatted(self):
        root = el("body", a("/s?q=x&a=1"))
        assert list(get_url_list(root, 5)) == ["https://example.test/s\n\ta=1\n\tq=x"]

    def test_dedup_on_raw_url_with_query(self):
        root = el("body", a("/s?q=x&a=1"), a("/s?q=x&a=1"))
        assert len(get_url_list(root, 5)) == 1
