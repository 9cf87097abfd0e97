from __future__ import annotations

from typing import Iterator, List, MutableSequence, Set

from .formatting import format_url


def insertion_sort(items: MutableSequence[str]) -> MutableSequence[str]:
    """Stable in-place ascending sort; returns ``items`` for chaining."""
    for i in range(1, len(items)):
        j = i
        while j > 0 and items[j - 1] > items[j]:
            items[j - 1], items[j] = items[j], items[j - 1]
            j -= 1
    return items


class UrlList:
    """Bounded list of formatted urls, deduplicated on the raw absolute url.

    Only ``capacity`` entries are ever held; ``add`` past that point raises.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._entries: List[str] = []
        self._raw: Set[str] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def contains(self, raw_url: str) -> bool:
        return raw_url in self._raw

    def add(self, raw_url: str) -> str:
        """Format and append ``raw_url``. Returns the stored entry."""
        if self.is_full:
            raise OverflowError(f"url list is full ({self.capacity} entries)")
        if raw_url in self._raw:
            raise ValueError(f"duplicate url: {raw_url}")
        entry = format_url(raw_url)
        self._raw.add(raw_url)
        self._entries.append(entry)
        return entry

    def sort(self) -> "UrlList":
        insertion_sort(self._entries)
        return self

    def to_list(self) -> List[str]:
        return list(self._entries)
