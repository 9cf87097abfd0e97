from __future__ import annotations

from typing import List, Sequence


def _query_key(token: str) -> str:
    if "=" not in token:
        raise ValueError(f"query token without '=': {token!r}")
    return token.split("=", 1)[0]


def build_query_list(queries: Sequence[str]) -> List[str]:
    """Insertion-sort query tokens by name.

    Only the part before the first ``=`` is compared. A token is placed after
    every token whose name is less than or equal to its own, so tokens sharing
    a name keep their input order.
    """
    sorted_queries: List[str] = []
    for token in queries:
        key = _query_key(token)
        j = 0
        while j < len(sorted_queries):
            if key < _query_key(sorted_queries[j]):
                break
            j += 1
        sorted_queries.insert(j, token)
    return sorted_queries


def format_url(url: str) -> str:
    """Render ``url`` with its query split onto tab-indented, name-sorted lines.

    URLs without ``?`` are returned unchanged, and so is any URL whose query
    cannot be split into ``name=value`` tokens. Empty tokens count as
    malformed too, so ``?a=1&`` (trailing ``&``) and ``?a=1&&b=2`` come back
    as given rather than having the empty token dropped.
    """
    path, sep, query_string = url.partition("?")
    if not sep:
        return url
    try:
        sorted_queries = build_query_list(query_string.split("&"))
    except ValueError:
        return url
    return path + "".join(f"\n\t{q}" for q in sorted_queries)
