"""Display-width aware line wrapping on grapheme-cluster boundaries."""

from __future__ import annotations

from collections import deque
from functools import lru_cache

import regex
from wcwidth import wcswidth, wcwidth

GRAPHEME_RE = regex.compile(r"\X")
# Only visible lines go through the cache; counting never does.
WRAP_CACHE_SIZE = 4096


def graphemes(text: str) -> list[str]:
    return GRAPHEME_RE.findall(text)


def cluster_width(cluster: str) -> int:
    width = wcswidth(cluster)
    if width >= 0:
        return width
    # Non-printable code points count as zero columns.
    return sum(max(0, wcwidth(ch)) for ch in cluster)


def display_width(text: str) -> int:
    return sum(cluster_width(cluster) for cluster in graphemes(text))


def _split(line: str, max_width: int) -> tuple[str, ...]:
    wrapped: list[str] = []
    current: list[str] = []
    current_width = 0

    for cluster in graphemes(line):
        width = cluster_width(cluster)
        if current_width + width <= max_width:
            current.append(cluster)
            current_width += width
            continue
        if current:
            wrapped.append("".join(current))
            current = []
            current_width = 0
        if width > max_width:
            # Unsplittable and wider than the pane: give it a row of its own.
            wrapped.append(cluster)
        else:
            current.append(cluster)
            current_width = width

    if current or not wrapped:
        wrapped.append("".join(current))
    return tuple(wrapped)


_wrap = lru_cache(maxsize=WRAP_CACHE_SIZE)(_split)


def wrap_line(line: str, max_width: int) -> list[str]:
    """Split ``line`` into sub-lines no wider than ``max_width`` columns.

    Concatenating the result gives back ``line``. An empty line yields one
    empty sub-line so it still occupies a row.
    """
    return list(_wrap(line, max(0, max_width)))


def wrapped_count(line: str, max_width: int) -> int:
    return len(_split(line, max(0, max_width)))


class WrapIndex:
    """Wrapped-row counts for one pane's history at one width.

    ``update`` only counts lines pushed since the previous call and drops
    the counts of evicted lines; a width change recounts everything.
    """

    def __init__(self) -> None:
        self.width: int | None = None
        self.first_seq = 0
        self.counts: deque[int] = deque()
        self.total = 0

    def update(self, first_seq: int, lines: list[str], width: int) -> deque[int]:
        if width != self.width:
            self.width = width
            self.counts = deque(wrapped_count(line, width) for line in lines)
            self.total = sum(self.counts)
            self.first_seq = first_seq
            return self.counts

        while self.counts and self.first_seq < first_seq:
            self.total -= self.counts.popleft()
            self.first_seq += 1
        if not self.counts:
            # Everything previously counted was evicted or cleared.
            self.first_seq = first_seq

        for line in lines[len(self.counts):]:
            count = wrapped_count(line, width)
            self.counts.append(count)
            self.total += count
        return self.counts
