from __future__ import annotations

import unittest
from datetime import datetime, timezone

from astro_baba.ist_time import (
    add_days_ist,
    day_date_header_upper,
    format_short_date,
    instant_for_date_key,
    month_label,
    now_in_ist_text,
    to_ist_parts,
    weekday_index_for_date_key,
)

# 01:30 IST on Friday 2025-07-04
LATE_UTC = datetime(2025, 7, 3, 20, 0, tzinfo=timezone.utc)


class TestIstParts(unittest.TestCase):
    def test_utc_evening_is_next_ist_day(self) -> None:
        parts = to_ist_parts(LATE_UTC)
        self.assertEqual(parts.date_key, "2025-07-04")
        self.assertEqual(parts.time_key, "01:30")
        self.assertEqual(parts.weekday_index, 5)

    def test_naive_datetime_is_treated_as_utc(self) -> None:
        naive = datetime(2025, 7, 3, 20, 0)
        self.assertEqual(to_ist_parts(naive).date_key, "2025-07-04")

    def test_weekday_index_is_sunday_based(self) -> None:
        self.assertEqual(weekday_index_for_date_key("2025-01-26"), 0)
        self.assertEqual(weekday_index_for_date_key("2025-10-18"), 6)

    def test_instant_for_date_key_is_noon_ist(self) -> None:
        instant = instant_for_date_key("2025-10-18")
        self.assertEqual(instant, datetime(2025, 10, 18, 6, 30, tzinfo=timezone.utc))
        self.assertEqual(to_ist_parts(instant).time_key, "12:00")

    def test_add_days_crosses_month(self) -> None:
        start = instant_for_date_key("2025-07-30")
        self.assertEqual(to_ist_parts(add_days_ist(3, start)).date_key, "2025-08-02")


class TestFormatting(unittest.TestCase):
    def test_english_header_is_upper_case(self) -> None:
        self.assertEqual(day_date_header_upper("en", LATE_UTC), "FRIDAY, 04 JUL 2025")

    def test_hindi_header_uses_hindi_names(self) -> None:
        header = day_date_header_upper("hi", LATE_UTC)
        self.assertTrue(header.startswith("शुक्रवार"))
        self.assertIn("2025", header)

    def test_short_date_ordinals(self) -> None:
        self.assertEqual(format_short_date("en", LATE_UTC), "4th Jul 2025")
        self.assertEqual(format_short_date("en", instant_for_date_key("2025-07-11")), "11th Jul 2025")
        self.assertEqual(format_short_date("en", instant_for_date_key("2025-07-22")), "22nd Jul 2025")

    def test_now_text_and_month_label(self) -> None:
        self.assertEqual(now_in_ist_text("en", LATE_UTC), "Friday, 4 July 2025, 01:30")
        self.assertEqual(month_label(2025, 8), "AUG 2025")


if __name__ == "__main__":
    unittest.main()
