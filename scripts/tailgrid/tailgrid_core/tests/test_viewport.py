from __future__ import annotations

import random
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from tailgrid_core.viewport import ScrollCommand, ViewportState, max_scroll  # noqa: E402


class AutoFollowTests(unittest.TestCase):
    def test_follow_scenario(self):
        viewport = ViewportState()
        self.assertEqual(viewport.reconcile(12, 5), 7)
        self.assertEqual(viewport.scroll_position, 7)

    def test_everything_fits(self):
        viewport = ViewportState()
        self.assertEqual(viewport.reconcile(3, 10), 0)
        self.assertEqual(viewport.reconcile(0, 0), 0)

    def test_follow_ignores_previous_position(self):
        viewport = ViewportState()
        viewport.scroll_position = 99
        self.assertEqual(viewport.reconcile(30, 10), 20)
        self.assertEqual(viewport.reconcile(31, 10), 21)

    def test_follow_tail_from_ingestion(self):
        viewport = ViewportState()
        viewport.reconcile(12, 5)
        viewport.follow_tail()
        self.assertEqual(viewport.scroll_position, 8)

    def test_pending_rows_cleared_by_next_frame(self):
        viewport = ViewportState()
        viewport.reconcile(12, 5)
        viewport.follow_tail()
        viewport.follow_tail()
        self.assertEqual(viewport.scroll_position, 9)
        self.assertEqual(viewport.reconcile(13, 5), 8)

    def test_navigation_clamps_to_last_frame_not_estimate(self):
        viewport = ViewportState()
        viewport.reconcile(12, 5)
        for _ in range(3):
            viewport.follow_tail()
        self.assertFalse(viewport.scroll(ScrollCommand.LINE_DOWN))
        self.assertFalse(viewport.has_user_scrolled)
        self.assertTrue(viewport.scroll(ScrollCommand.LINE_UP))
        self.assertEqual(viewport.scroll_position, 6)


class ManualScrollTests(unittest.TestCase):
    def setUp(self):
        self.viewport = ViewportState()
        self.viewport.reconcile(12, 5)

    def test_line_up_enters_manual_mode(self):
        self.assertTrue(self.viewport.scroll(ScrollCommand.LINE_UP))
        self.assertTrue(self.viewport.has_user_scrolled)
        self.assertEqual(self.viewport.scroll_position, 6)
        # New content no longer moves the view.
        self.assertEqual(self.viewport.reconcile(20, 5), 6)
        self.viewport.follow_tail()
        self.assertEqual(self.viewport.scroll_position, 6)

    def test_down_at_tail_stays_in_follow_mode(self):
        self.assertFalse(self.viewport.scroll(ScrollCommand.LINE_DOWN))
        self.assertFalse(self.viewport.has_user_scrolled)
        self.assertEqual(self.viewport.scroll_position, 7)

    def test_page_home_end(self):
        self.viewport.scroll(ScrollCommand.PAGE_UP)
        self.assertEqual(self.viewport.scroll_position, 2)
        self.viewport.scroll(ScrollCommand.PAGE_UP)
        self.assertEqual(self.viewport.scroll_position, 0)
        self.viewport.scroll(ScrollCommand.PAGE_DOWN)
        self.assertEqual(self.viewport.scroll_position, 5)
        self.viewport.scroll(ScrollCommand.END)
        self.assertEqual(self.viewport.scroll_position, 7)
        self.viewport.scroll(ScrollCommand.HOME)
        self.assertEqual(self.viewport.scroll_position, 0)

    def test_shrinking_content_clamps(self):
        self.viewport.scroll(ScrollCommand.LINE_UP)
        self.assertEqual(self.viewport.reconcile(8, 5), 3)
        self.assertEqual(self.viewport.reconcile(2, 5), 0)

    def test_snap_to_tail_and_reset(self):
        self.viewport.scroll(ScrollCommand.HOME)
        self.viewport.snap_to_tail()
        self.assertFalse(self.viewport.has_user_scrolled)
        self.assertEqual(self.viewport.scroll_position, 7)
        self.viewport.scroll(ScrollCommand.HOME)
        self.viewport.reset()
        self.assertEqual(self.viewport.scroll_position, 0)
        self.assertEqual(self.viewport.total_lines, 0)
        self.assertFalse(self.viewport.has_user_scrolled)

    def test_random_navigation_stays_clamped(self):
        rng = random.Random(3)
        commands = list(ScrollCommand)
        viewport = ViewportState()
        for _ in range(500):
            total = rng.randint(0, 40)
            height = rng.randint(0, 15)
            viewport.reconcile(total, height)
            for _ in range(rng.randint(1, 4)):
                viewport.scroll(rng.choice(commands))
                self.assertGreaterEqual(viewport.scroll_position, 0)
                self.assertLessEqual(viewport.scroll_position, max_scroll(total, height))
            if not viewport.has_user_scrolled:
                self.assertEqual(viewport.reconcile(total, height), max_scroll(total, height))


if __name__ == "__main__":
    unittest.main()
