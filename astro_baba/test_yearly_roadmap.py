from __future__ import annotations

import unittest
from datetime import datetime, timezone

from astro_baba.yearly_roadmap import (
    MONTH_COUNT,
    PROTECTION,
    TONES,
    build_family_sections,
    build_month,
    build_yearly_roadmap,
    health_for_tone,
    protection_for_tone,
    tone_for_month,
)

AUG_2025 = datetime(2025, 8, 10, 6, 30, tzinfo=timezone.utc)


class TestRoadmapShape(unittest.TestCase):
    def test_thirteen_months_from_current_ist_month(self) -> None:
        roadmap = build_yearly_roadmap("leo", "en", "student", AUG_2025)
        self.assertEqual(roadmap.start, "2025-08-01")
        self.assertEqual(len(roadmap.months), MONTH_COUNT)
        self.assertEqual(roadmap.months[0].key, "AUG 2025")
        self.assertEqual(roadmap.months[4].key, "DEC 2025")
        self.assertEqual(roadmap.months[5].key, "JAN 2026")
        self.assertEqual(roadmap.months[-1].key, "AUG 2026")

    def test_ist_month_boundary(self) -> None:
        # 31 Jul 20:00 UTC is already 1 Aug in IST
        roadmap = build_yearly_roadmap("leo", "en", None, datetime(2025, 7, 31, 20, 0, tzinfo=timezone.utc))
        self.assertEqual(roadmap.start, "2025-08-01")

    def test_overview_months_are_relative_to_start(self) -> None:
        overview = build_yearly_roadmap("aries", "en", None, AUG_2025).overview
        self.assertEqual(overview.good[0], "Sep 2025, Jul 2026: new starts feel smooth; small launches shine.")
        self.assertIn("Om Gam Ganapataye Namah", " ".join(overview.remedies))
        self.assertTrue(overview.zodiac.startswith("Aries: "))

    def test_overview_uses_sign_ruler(self) -> None:
        overview = build_yearly_roadmap("leo", "en", None, AUG_2025).overview
        self.assertIn("Sun", overview.vedic)

    def test_persona_is_normalized(self) -> None:
        self.assertEqual(build_yearly_roadmap("leo", "en", "Freelance designer", AUG_2025).persona, "self_employed")
        self.assertEqual(build_yearly_roadmap("leo", "en", None, AUG_2025).persona, "not_working")

    def test_json_uses_camel_case(self) -> None:
        payload = build_yearly_roadmap("leo", "en", None, AUG_2025).to_json()
        self.assertIn("vedicNote", payload["notes"])
        self.assertEqual(len(payload["months"]), MONTH_COUNT)

    def test_hindi_roadmap(self) -> None:
        roadmap = build_yearly_roadmap("leo", "hi", "student", AUG_2025)
        first = roadmap.months[0]
        self.assertEqual(first.key, "AUG 2025")
        self.assertTrue(first.label.endswith("2025"))
        self.assertNotEqual(first.label, first.key)
        self.assertNotIn(first.title, TONES)


class TestMonthRules(unittest.TestCase):
    def test_tone_is_deterministic(self) -> None:
        tone = tone_for_month("leo", "student", "AUG 2025")
        self.assertIn(tone, TONES)
        self.assertEqual(tone, tone_for_month("leo", "student", "AUG 2025"))
        self.assertEqual(build_month("leo", "student", 2025, 8), build_month("leo", "student", 2025, 8))

    def test_protection_rules_later_rules_win(self) -> None:
        self.assertEqual(protection_for_tone("Change & Movement"), PROTECTION["ganesha"])
        self.assertEqual(protection_for_tone("Home & Harmony"), PROTECTION["lakshmi"])
        self.assertEqual(protection_for_tone("Momentum with Clarity"), PROTECTION["saraswati"])
        self.assertEqual(protection_for_tone("Study & Depth"), PROTECTION["narayan"])
        self.assertEqual(protection_for_tone("Fresh Seeds"), PROTECTION["shiva"])

    def test_health_buckets(self) -> None:
        discipline = health_for_tone("Health & Discipline Reset")
        self.assertNotEqual(discipline, health_for_tone("Fresh Seeds"))
        self.assertEqual(health_for_tone("Care & Maintenance"), health_for_tone("Home & Harmony"))

    def test_persona_hint_lands_in_money_line(self) -> None:
        block = build_month("leo", "student", 2025, 8)
        self.assertIn("Budget tools, course fees", block.money)


class TestFamily(unittest.TestCase):
    def test_one_roadmap_per_member(self) -> None:
        members = build_family_sections(
            [
                {"name": "Asha", "sign": "leo", "persona": "student"},
                {"name": "", "sign": "Virgo", "occupation": "homemaker"},
            ],
            "en",
            AUG_2025,
        )
        self.assertEqual([m.name for m in members], ["Asha", "Friend"])
        self.assertEqual(members[1].sign, "virgo")
        self.assertEqual(members[1].persona, "homemaker")
        self.assertEqual(len(members[0].roadmap.months), MONTH_COUNT)


if __name__ == "__main__":
    unittest.main()
