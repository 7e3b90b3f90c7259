from __future__ import annotations

import unittest

from astro_baba.output_scanner import missing_time_windows, scan_forbidden_patterns


class TestOutputScanner(unittest.TestCase):
    def test_clean_text_has_no_findings(self) -> None:
        text = "Namaste ji,\n• Rahu Kaal: 10:30–12:00\nआज स्पष्टता का दिन है।"
        self.assertEqual(scan_forbidden_patterns(text), [])

    def test_detects_mojibake_and_replacement_chars(self) -> None:
        self.assertTrue(scan_forbidden_patterns("Today\u00e2\u20ac\u2122s guidance"))
        self.assertTrue(scan_forbidden_patterns("broken \ufffd glyph"))

    def test_detects_assistant_voice_and_guarantees(self) -> None:
        findings = scan_forbidden_patterns("As an AI, I am 100% sure of this.")
        matches = {f["match"].lower() for f in findings}
        self.assertIn("as an ai", matches)
        self.assertTrue(any("100" in m for m in matches))
        self.assertIn("context", findings[0])

    def test_missing_time_windows(self) -> None:
        baseline = "Rahu 10:30–12:00, Abhijit 12:05–12:52"
        self.assertEqual(missing_time_windows(baseline, baseline), [])
        self.assertEqual(missing_time_windows(baseline, "Rahu 10:30–12:00 only"), ["12:05–12:52"])
        self.assertEqual(missing_time_windows(baseline, "Rahu 10:30-12:00, 12:05–12:52"), ["10:30–12:00"])


if __name__ == "__main__":
    unittest.main()
