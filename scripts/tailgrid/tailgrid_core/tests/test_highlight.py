from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from tailgrid_core.highlight import (  # noqa: E402
    HighlightEngine,
    MatchRule,
    create_log_formatter,
    split_segments,
)


class DefaultRulesTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_log_formatter()

    def test_error_line_scenario(self):
        self.assertEqual(
            self.engine.format("2024-01-01 10:00:00 ERROR disk full"),
            [
                ("2024-01-01 10:00:00", "green"),
                (" ", ""),
                ("ERROR", "red"),
                (" disk full", ""),
            ],
        )

    def test_unmatched_line_is_single_unstyled_segment(self):
        self.assertEqual(self.engine.format("nothing to see here"), [("nothing to see here", "")])
        self.assertEqual(self.engine.format(""), [("", "")])

    def test_rule_set(self):
        self.assertEqual(len(self.engine.rules), 6)
        line = "2024-01-01 10:00:00,123 WARNING {job=7} INFO from 192.168.1.20 FATAL"
        styled = [(text, style) for text, style in self.engine.format(line) if style]
        self.assertEqual(
            styled,
            [
                ("2024-01-01 10:00:00,123", "green"),
                ("WARNING", "yellow"),
                ("{job=7}", "cyan"),
                ("INFO", "blue"),
                ("192.168.1.20", "magenta"),
                ("FATAL", "red"),
            ],
        )

    def test_braces_are_lazy(self):
        styled = [t for t, s in self.engine.format("{a} and {b}") if s == "cyan"]
        self.assertEqual(styled, ["{a}", "{b}"])


class OverlapPolicyTests(unittest.TestCase):
    def test_earlier_start_wins(self):
        engine = HighlightEngine().add_rule(r"b\w+", "red").add_rule(r"a\w+", "blue")
        self.assertEqual(engine.format("abcd"), [("abcd", "blue")])

    def test_rule_order_breaks_ties(self):
        engine = HighlightEngine().add_rule(r"ab", "red").add_rule(r"abc", "blue")
        self.assertEqual(engine.format("abcx"), [("ab", "red"), ("cx", "")])

    def test_segments_partition_line(self):
        engine = (
            HighlightEngine()
            .add_rule(r"\d+", "green")
            .add_rule(r"1\d{2}\.\d", "magenta")
            .add_rule(r"ERR\w*", "red")
            .add_rule(r"RR", "yellow")
        )
        line = "x 123.4 ERROR 99 ERRRR"
        segments = engine.format(line)
        self.assertEqual("".join(text for text, _ in segments), line)
        self.assertTrue(all(text for text, _ in segments))

    def test_empty_matches_ignored(self):
        engine = HighlightEngine().add_rule(r"x*", "red")
        self.assertEqual(engine.format("abc"), [("abc", "")])

    def test_invalid_pattern(self):
        with self.assertRaises(ValueError):
            MatchRule.compile("(", "red")


class SplitSegmentsTests(unittest.TestCase):
    def test_split_across_wraps(self):
        rows = split_segments([("abc", "red"), ("def", "")], ["ab", "cd", "ef"])
        self.assertEqual(
            rows,
            [[("ab", "red")], [("c", "red"), ("d", "")], [("ef", "")]],
        )

    def test_empty_line(self):
        self.assertEqual(split_segments([("", "")], [""]), [[]])


if __name__ == "__main__":
    unittest.main()
