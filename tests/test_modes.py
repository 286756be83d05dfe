from __future__ import annotations

import unittest
from datetime import date

from yappad.modes import BucketMode, SortMode, has_note_suffix, with_note_suffix


class SortModeTests(unittest.TestCase):
    def test_next_cycles_through_all_four_modes(self) -> None:
        seen = []
        mode = SortMode.MODIFIED_DESC
        for _ in range(4):
            seen.append(mode)
            mode = mode.next()

        self.assertEqual(mode, SortMode.MODIFIED_DESC)
        self.assertEqual(len(set(seen)), 4)
        self.assertEqual(
            seen,
            [SortMode.MODIFIED_DESC, SortMode.MODIFIED_ASC, SortMode.CREATED_DESC, SortMode.CREATED_ASC],
        )

    def test_parse_accepts_values_and_rejects_garbage(self) -> None:
        self.assertIs(SortMode.parse("created-asc"), SortMode.CREATED_ASC)
        self.assertIs(SortMode.parse(" Modified-Desc "), SortMode.MODIFIED_DESC)
        self.assertIsNone(SortMode.parse("newest"))
        self.assertIsNone(SortMode.parse(3))

    def test_labels_are_human_readable(self) -> None:
        self.assertEqual(SortMode.MODIFIED_DESC.label, "Modified (Newest)")
        self.assertEqual(SortMode.CREATED_ASC.label, "Created (Oldest)")


class BucketModeTests(unittest.TestCase):
    def test_tab_cycle_treats_all_as_daily(self) -> None:
        self.assertIs(BucketMode.ALL.next_journal(), BucketMode.WEEKLY)
        self.assertIs(BucketMode.DAILY.next_journal(), BucketMode.WEEKLY)
        self.assertIs(BucketMode.WEEKLY.next_journal(), BucketMode.MONTHLY)
        self.assertIs(BucketMode.MONTHLY.next_journal(), BucketMode.YEARLY)
        self.assertIs(BucketMode.YEARLY.next_journal(), BucketMode.DAILY)

    def test_default_names_follow_bucket_granularity(self) -> None:
        today = date(2026, 1, 14)
        self.assertEqual(BucketMode.DAILY.default_note_name(today), "2026-01-14.md")
        self.assertEqual(BucketMode.ALL.default_note_name(today), "2026-01-14.md")
        self.assertEqual(BucketMode.WEEKLY.default_note_name(today), "2026-W03.md")
        self.assertEqual(BucketMode.MONTHLY.default_note_name(today), "2026-01.md")
        self.assertEqual(BucketMode.YEARLY.default_note_name(today), "2026.md")

    def test_weekly_name_uses_iso_week_year(self) -> None:
        self.assertEqual(BucketMode.WEEKLY.default_note_name(date(2024, 12, 31)), "2025-W01.md")

    def test_all_bucket_creates_notes_in_daily_dir(self) -> None:
        self.assertEqual(BucketMode.ALL.subdir, "")
        self.assertEqual(BucketMode.ALL.default_note_dir, "daily")
        self.assertEqual(
            BucketMode.ALL.default_placeholder(date(2026, 1, 14)),
            "daily/2026-01-14.md (default)",
        )

    def test_parse_accepts_names_and_digits_case_insensitively(self) -> None:
        self.assertIs(BucketMode.parse("Weekly"), BucketMode.WEEKLY)
        self.assertIs(BucketMode.parse("0"), BucketMode.ALL)
        self.assertIs(BucketMode.parse("4"), BucketMode.YEARLY)

    def test_parse_rejects_unknown_mode(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            BucketMode.parse("hourly")
        self.assertIn("unknown mode: hourly", str(ctx.exception))


class NoteSuffixTests(unittest.TestCase):
    def test_suffix_is_appended_only_when_missing(self) -> None:
        self.assertEqual(with_note_suffix("ideas"), "ideas.md")
        self.assertEqual(with_note_suffix("ideas.md"), "ideas.md")
        self.assertEqual(with_note_suffix("ideas.markdown"), "ideas.markdown")
        self.assertTrue(has_note_suffix("IDEAS.MD"))


if __name__ == "__main__":
    unittest.main()
