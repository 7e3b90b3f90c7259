from __future__ import annotations

import json
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from fastapi.testclient import TestClient

from astro_baba import main
from astro_baba.cache_manager import DailyCache

# 12:00 IST, Friday 2025-07-04
FIXED_NOW = datetime(2025, 7, 4, 6, 30, tzinfo=timezone.utc)


class _FakeCompletions:
    def __init__(self, text: str):
        self.text = text
        self.payloads: list[dict] = []

    async def create(self, **payload):
        self.payloads.append(payload)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.text))])


class EndpointTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cache_root = Path(self._tmp.name)
        self.daily_cache = DailyCache(self.cache_root)
        self.llm_client = None
        main.app.dependency_overrides[main.get_daily_cache] = lambda: self.daily_cache
        main.app.dependency_overrides[main.get_llm_client] = lambda: self.llm_client
        main.app.dependency_overrides[main.get_now] = lambda: FIXED_NOW
        self.client = TestClient(main.app)

    def tearDown(self) -> None:
        main.app.dependency_overrides.clear()
        self._tmp.cleanup()


class TestJsonEndpoints(EndpointTestCase):
    def test_root(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.json(), {"ok": True, "service": "Astro-Baba Chat API"})

    def test_health(self) -> None:
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "ok")
        self.assertFalse(body["openai_configured"])
        self.assertIn("devanagari_font", body)

    def test_daily_shape_and_ist_windows(self) -> None:
        response = self.client.get("/daily", params={"sign": "Leo"})
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["date"], "2025-07-04")
        self.assertEqual(body["sign"], "leo")
        self.assertEqual(body["lang"], "en")
        self.assertEqual(body["vedic"]["rahuKaal"], "10:30–12:00")
        self.assertTrue(body["text"].startswith("**Leo • 2025-07-04**"))
        self.assertTrue(body["generatedAt"].endswith("Z"))
        self.assertEqual(body["rich"]["luckyNumber"], 9)

    def test_daily_is_cached_per_ist_date(self) -> None:
        first = self.client.get("/daily", params={"sign": "leo"}).json()
        second = self.client.get("/daily", params={"sign": "leo"}).json()
        self.assertEqual(first["generatedAt"], second["generatedAt"])
        path = self.cache_root / "2025-07-04" / "leo.en.json"
        self.assertTrue(path.is_file())
        self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["text"], first["text"])

    def test_hindi_daily(self) -> None:
        body = self.client.get("/daily", params={"sign": "leo", "lang": "hi"}).json()
        self.assertEqual(body["lang"], "hi")
        self.assertIn("नमस्ते जी,", body["text"])
        self.assertTrue((self.cache_root / "2025-07-04" / "leo.hi.json").is_file())

    def test_invalid_sign_and_lang(self) -> None:
        response = self.client.get("/daily", params={"sign": "pluto"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": main.INVALID_SIGN_MESSAGE})
        self.assertTrue(main.INVALID_SIGN_MESSAGE.startswith("Invalid sign. Use: aries, taurus"))
        self.assertEqual(self.client.get("/daily").status_code, 400)
        response = self.client.get("/weekly", params={"sign": "leo", "lang": "fr"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": main.INVALID_LANG_MESSAGE})

    def test_post_daily_adds_birthday_without_caching_it(self) -> None:
        response = self.client.post(
            "/daily",
            json={"sign": "leo", "user": {"name": "Asha", "dob": "1990-07-04"}},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertIn("Birthday blessings, Asha!", body["text"])
        self.assertEqual(body["rich"]["specialDay"]["birthday"].split("!")[0], "Birthday blessings, Asha")
        cached = json.loads((self.cache_root / "2025-07-04" / "leo.en.json").read_text(encoding="utf-8"))
        self.assertNotIn("Asha", cached["text"])

    def test_post_daily_invalid_sign_message(self) -> None:
        response = self.client.post("/daily", json={"sign": "pluto"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": main.INVALID_SIGN_MESSAGE})

    def test_weekly_is_seven_consecutive_days(self) -> None:
        body = self.client.get("/weekly", params={"sign": "aries"}).json()
        self.assertEqual(body["sign"], "aries")
        dates = [day["date"] for day in body["days"]]
        self.assertEqual(dates[0], "2025-07-04")
        self.assertEqual(dates[-1], "2025-07-10")
        self.assertEqual(len(dates), 7)
        self.assertEqual(body["days"][2]["vedic"]["rahuKaal"], "16:30–18:00")
        self.assertEqual(len(list((self.cache_root).iterdir())), 7)

    def test_yearly(self) -> None:
        body = self.client.get("/yearly", params={"sign": "leo", "persona": "student"}).json()
        self.assertEqual(body["start"], "2025-07-01")
        self.assertEqual(len(body["months"]), 13)
        self.assertEqual(body["persona"], "student")


class TestPdfEndpoints(EndpointTestCase):
    def assertPdf(self, response, kind: str) -> None:
        self.assertEqual(response.status_code, 200, response.text[:200] if response.status_code != 200 else "")
        self.assertEqual(response.headers["content-type"], "application/pdf")
        self.assertEqual(response.headers["cache-control"], "no-store")
        self.assertIn(f"_{kind}_", response.headers["content-disposition"])
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_report_from_daily(self) -> None:
        response = self.client.post(
            "/report/from-daily",
            json={"sign": "leo", "user": {"name": "Asha"}, "brand": {"appName": "My App"}},
        )
        self.assertPdf(response, "daily")
        expected = f'attachment; filename="My_App_daily_leo_{int(FIXED_NOW.timestamp() * 1000)}.pdf"'
        self.assertEqual(response.headers["content-disposition"], expected)

    def test_report_defaults_to_aries(self) -> None:
        response = self.client.post("/report/from-daily", json={})
        self.assertPdf(response, "daily")
        self.assertIn("_daily_aries_", response.headers["content-disposition"])

    def test_weekly_gemstone_mantra_reports(self) -> None:
        self.assertPdf(self.client.post("/report/weekly", json={"sign": "virgo"}), "weekly")
        self.assertPdf(self.client.post("/report/gemstone", json={"sign": "aquarius"}), "gemstone")
        self.assertPdf(self.client.post("/report/mantra", json={"sign": "leo"}), "mantra")

    def test_malformed_logo_url_still_renders(self) -> None:
        response = self.client.post("/report/gemstone", json={"sign": "leo", "brand": {"logoUrl": "http://[::1"}})
        self.assertPdf(response, "gemstone")

    def test_yearly_and_family_reports(self) -> None:
        self.assertPdf(self.client.post("/report/yearly", json={"sign": "leo", "persona": "student"}), "yearly")
        response = self.client.post(
            "/report/family",
            json={"members": [{"name": "Asha", "sign": "leo"}, {"name": "Ravi", "sign": "virgo", "occupation": "IT"}]},
        )
        self.assertPdf(response, "family")

    def test_family_requires_members(self) -> None:
        response = self.client.post("/report/family", json={"members": []})
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_generate_dispatches_packages(self) -> None:
        for package in ("daily", "weekly", "gemstone", "mantra", "yearly", "persona"):
            with self.subTest(package=package):
                response = self.client.post("/report/generate", json={"sign": "leo", "package": package})
                self.assertPdf(response, package)

    def test_generate_rejects_unknown_package(self) -> None:
        response = self.client.post("/report/generate", json={"sign": "leo", "package": "tarot"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": main.INVALID_PACKAGE_MESSAGE})


class TestChatEndpoints(EndpointTestCase):
    def test_chat_without_key(self) -> None:
        response = self.client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "OPENAI_API_KEY not set"})

    def test_chat_stream_without_key_sends_error_event(self) -> None:
        response = self.client.post("/chat/stream", json={"messages": []})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))
        self.assertEqual(response.headers["x-accel-buffering"], "no")
        self.assertIn("event: error", response.text)
        self.assertIn("OPENAI_API_KEY not set", response.text)

    def test_chat_prepends_system_message(self) -> None:
        completions = _FakeCompletions("Namaste!")
        self.llm_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        response = self.client.post(
            "/chat",
            json={"system": "Be brief.", "messages": [{"role": "user", "content": "hi"}], "model": "gpt-4o-mini"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), {"text": "Namaste!"})
        sent = completions.payloads[0]
        self.assertEqual(sent["messages"][0], {"role": "system", "content": "Be brief."})
        self.assertEqual(sent["temperature"], 0.7)

    def test_debug_endpoints(self) -> None:
        self.assertIn("present", self.client.get("/debug/key").json())
        self.assertIn("devanagari_font_available", self.client.get("/debug/fonts").json())
        self.assertEqual(self.client.get("/debug/version").json()["service"], "Astro-Baba Chat API")
        paths = {r["path"] for r in self.client.get("/debug/routes").json()["routes"]}
        self.assertIn("/report/generate", paths)


class TestSharedSecret(EndpointTestCase):
    def test_secret_gates_everything_but_liveness(self) -> None:
        with patch.dict(os.environ, {"ASTRO_SHARED_SECRET": "s3cret"}):
            self.assertEqual(self.client.get("/").status_code, 200)
            self.assertEqual(self.client.get("/health").status_code, 200)
            denied = self.client.get("/daily", params={"sign": "leo"})
            self.assertEqual(denied.status_code, 401)
            self.assertEqual(denied.json(), {"error": "Unauthorized"})
            allowed = self.client.get("/daily", params={"sign": "leo"}, headers={"x-api-key": "s3cret"})
            self.assertEqual(allowed.status_code, 200)


if __name__ == "__main__":
    unittest.main()
