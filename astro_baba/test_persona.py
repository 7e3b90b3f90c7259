from __future__ import annotations

import unittest

from astro_baba.persona import (
    DEFAULT_PERSONA,
    PERSONA_POOLS,
    PERSONAS,
    normalize_persona,
    persona_lines,
    remedy_addon_line,
)


class TestNormalizePersona(unittest.TestCase):
    def test_free_text_occupations(self) -> None:
        cases = {
            "Freelance designer": "self_employed",
            "Small business owner": "self_employed",
            "IT consultant": "job_working",
            "Office employee": "job_working",
            "Homemaker": "homemaker",
            "university student": "student",
            "Not working right now": "not_working",
            "on a career break": "not_working",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(normalize_persona(raw), expected)

    def test_keywords_match_whole_words_only(self) -> None:
        # "it" inside "united" or "university" must not count as IT work
        self.assertEqual(normalize_persona("united"), DEFAULT_PERSONA)
        self.assertEqual(normalize_persona("university"), "student")

    def test_empty_and_unknown_fall_back(self) -> None:
        self.assertEqual(normalize_persona(None), DEFAULT_PERSONA)
        self.assertEqual(normalize_persona(""), DEFAULT_PERSONA)
        self.assertEqual(normalize_persona("astronaut"), DEFAULT_PERSONA)
        for bucket in PERSONAS:
            self.assertEqual(normalize_persona(bucket), bucket)


class TestPersonaLines(unittest.TestCase):
    def test_shape_and_determinism(self) -> None:
        picks = persona_lines("student", "leo", seed_key="2025-07-04|leo")
        self.assertEqual(picks["persona"], "student")
        self.assertEqual(len(picks["opportunities"]), 3)
        self.assertEqual(len(picks["cautions"]), 3)
        self.assertEqual(len(picks["remedy_addons"]), 1)
        self.assertEqual(picks, persona_lines("student", "leo", seed_key="2025-07-04|leo"))

    def test_picks_come_from_the_bucket_pool(self) -> None:
        picks = persona_lines("Freelance designer", "aries")
        pool = PERSONA_POOLS["self_employed"]
        for line in picks["opportunities"]:
            self.assertIn(line, pool["opportunities"])

    def test_no_pool_suggests_blue_sapphire(self) -> None:
        for bucket, pool in PERSONA_POOLS.items():
            for addon in pool["remedy_addons"]:
                with self.subTest(bucket=bucket):
                    self.assertNotIn("Blue Sapphire", str(addon))

    def test_remedy_addon_line_localizes(self) -> None:
        addon = {"gemstone": "Citrine", "reason": "Supports focus.", "hi": "एकाग्रता में सहायक।"}
        self.assertEqual(remedy_addon_line(addon), "Citrine: Supports focus.")
        self.assertEqual(remedy_addon_line(addon, "hi"), "Citrine: एकाग्रता में सहायक।")
        self.assertEqual(remedy_addon_line({"reason": "Rest well."}), "Rest well.")


if __name__ == "__main__":
    unittest.main()
