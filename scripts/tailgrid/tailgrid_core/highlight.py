"""Ordered-regex highlighting of raw log lines into styled segments.

Every rule runs against the whole line; matches are swept left to right.
Overlap policy is first-match-wins: matches are ordered by start offset and
then by rule order, and a match that starts inside an already emitted one is
dropped. Segments therefore always partition the line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tailgrid_core.models import Segment

UNSTYLED = ""

TIMESTAMP_PATTERN = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d{3})?(?:,\d{3})?"
IPV4_PATTERN = r"\b(?:\d{1,3}\.){3}\d{1,3}\b"

DEFAULT_RULES: list[tuple[str, str]] = [
    (TIMESTAMP_PATTERN, "green"),
    (r"WARNING|WARN", "yellow"),
    (r"ERROR|FATAL|FAILURE", "red"),
    (r"\{.*?\}", "cyan"),
    (r"INFO", "blue"),
    (IPV4_PATTERN, "magenta"),
]


@dataclass(frozen=True)
class MatchRule:
    pattern: re.Pattern
    style: str

    @classmethod
    def compile(cls, pattern: str, style: str) -> "MatchRule":
        try:
            return cls(re.compile(pattern), style)
        except re.error as exc:
            raise ValueError(f"invalid highlight pattern {pattern!r}: {exc}") from exc


class HighlightEngine:
    def __init__(self, rules: list[MatchRule] | None = None):
        self._rules: list[MatchRule] = list(rules or [])

    def add_rule(self, pattern: str, style: str) -> "HighlightEngine":
        self._rules.append(MatchRule.compile(pattern, style))
        return self

    @property
    def rules(self) -> tuple[MatchRule, ...]:
        return tuple(self._rules)

    def matches(self, line: str) -> list[tuple[int, int, str]]:
        found: list[tuple[int, int, int, str]] = []
        for order, rule in enumerate(self._rules):
            for match in rule.pattern.finditer(line):
                if match.end() > match.start():
                    found.append((match.start(), order, match.end(), rule.style))
        found.sort(key=lambda item: (item[0], item[1]))

        kept: list[tuple[int, int, str]] = []
        last_end = 0
        for start, _order, end, style in found:
            if start < last_end:
                continue
            kept.append((start, end, style))
            last_end = end
        return kept

    def format(self, line: str) -> list[Segment]:
        segments: list[Segment] = []
        cursor = 0
        for start, end, style in self.matches(line):
            if start > cursor:
                segments.append((line[cursor:start], UNSTYLED))
            segments.append((line[start:end], style))
            cursor = end
        if cursor < len(line) or not segments:
            segments.append((line[cursor:], UNSTYLED))
        return segments


def split_segments(segments: list[Segment], sub_lines: list[str]) -> list[list[Segment]]:
    """Cut a formatted line at wrap boundaries.

    ``sub_lines`` must concatenate to the text of ``segments``.
    """
    rows: list[list[Segment]] = []
    queue = list(segments)
    index = 0
    for sub_line in sub_lines:
        row: list[Segment] = []
        remaining = len(sub_line)
        while remaining > 0 and index < len(queue):
            text, style = queue[index]
            if len(text) <= remaining:
                row.append((text, style))
                remaining -= len(text)
                index += 1
            else:
                row.append((text[:remaining], style))
                queue[index] = (text[remaining:], style)
                remaining = 0
        rows.append(row)
    return rows


def create_log_formatter() -> HighlightEngine:
    engine = HighlightEngine()
    for pattern, style in DEFAULT_RULES:
        engine.add_rule(pattern, style)
    return engine
