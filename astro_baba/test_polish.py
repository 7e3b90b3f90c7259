"""Polish/translate fallbacks: no client, failing upstream, rejected output."""

from __future__ import annotations

import asyncio
import unittest

import httpx
from openai import AsyncOpenAI

from astro_baba.cache_manager import CacheManager
from astro_baba.content_bank import CAUT_POOL, HI_PHRASES, LEADS, OPP_POOL
from astro_baba.polish import (
    Provider,
    ProviderChain,
    clean_hi,
    dictionary_translate,
    hindi_template_lines,
    polish,
    polished_cache_key,
    translate,
    translate_many,
)


def _completion(content: str) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


def _client(handler) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key="test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )


def _failing_client() -> AsyncOpenAI:
    return _client(lambda request: httpx.Response(500, json={"error": {"message": "boom"}}))


class _Recorder:
    def __init__(self, content: str):
        self.content = content
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return httpx.Response(200, json=_completion(self.content))


BASELINE = "**Leo • 2025-07-04**\n• Rahu Kaal: 10:30–12:00\nKeep it simple today."


class TestPolish(unittest.TestCase):
    def test_without_client_returns_input(self) -> None:
        store = CacheManager(max_items=4)
        out = asyncio.run(polish(BASELINE, None, polish_cache=store))
        self.assertEqual(out, BASELINE)
        self.assertEqual(len(store), 0)

    def test_failing_upstream_falls_back_to_input(self) -> None:
        store = CacheManager(max_items=4)
        with self.assertLogs("astro_baba", level="WARNING"):
            out = asyncio.run(polish(BASELINE, _failing_client(), polish_cache=store))
        self.assertEqual(out, BASELINE)
        self.assertEqual(len(store), 0)

    def test_failing_upstream_keeps_hindi_input_verbatim(self) -> None:
        text = "Line one  with  spaces\n  indented line "
        with self.assertLogs("astro_baba", level="WARNING"):
            out = asyncio.run(polish(text, _failing_client(), lang="hi", polish_cache=CacheManager(max_items=4)))
        self.assertEqual(out, text)

    def test_accepted_hindi_output_is_cleaned(self) -> None:
        store = CacheManager(max_items=4)
        out = asyncio.run(polish("Start work", _client(_Recorder("  कायर्   शुरू करें ")), lang="hi", polish_cache=store))
        self.assertEqual(out, "कार्य शुरू करें")
        self.assertEqual(store.get(polished_cache_key("Start work", "hi")), "कार्य शुरू करें")

    def test_accepted_output_is_cached(self) -> None:
        polished = BASELINE.replace("Keep it simple today.", "Keep today gentle and simple.")
        recorder = _Recorder(polished)
        store = CacheManager(max_items=4)

        async def _twice():
            client = _client(recorder)
            first = await polish(BASELINE, client, polish_cache=store)
            second = await polish(BASELINE, client, polish_cache=store)
            return first, second

        first, second = asyncio.run(_twice())
        self.assertEqual(first, polished)
        self.assertEqual(second, polished)
        self.assertEqual(recorder.calls, 1)
        self.assertEqual(store.get(polished_cache_key(BASELINE, "en")), polished)

    def test_output_that_drops_time_windows_is_rejected(self) -> None:
        store = CacheManager(max_items=4)
        out = asyncio.run(polish(BASELINE, _client(_Recorder("A lovely day.")), polish_cache=store))
        self.assertEqual(out, BASELINE)
        self.assertEqual(len(store), 0)

    def test_output_with_assistant_voice_is_rejected(self) -> None:
        reply = BASELINE + "\nAs an AI I cannot predict this."
        out = asyncio.run(polish(BASELINE, _client(_Recorder(reply)), polish_cache=CacheManager(max_items=4)))
        self.assertEqual(out, BASELINE)

    def test_cache_key_shape(self) -> None:
        key = polished_cache_key("abc", "HI")
        self.assertTrue(key.startswith("llm_polished::"))
        self.assertTrue(key.endswith("::hi"))


class TestTranslate(unittest.TestCase):
    def test_non_hindi_target_is_untouched(self) -> None:
        self.assertEqual(asyncio.run(translate(LEADS[1], "en")), LEADS[1])

    def test_without_client_returns_input(self) -> None:
        self.assertEqual(asyncio.run(translate(LEADS[1], "hi")), LEADS[1])

    def test_failing_upstream_returns_input(self) -> None:
        with self.assertLogs("astro_baba", level="WARNING"):
            out = asyncio.run(translate(CAUT_POOL[1], "hi", _failing_client()))
        self.assertEqual(out, CAUT_POOL[1])

    def test_accepted_output_is_cleaned(self) -> None:
        out = asyncio.run(translate("Start work", "hi", _client(_Recorder("  कायर्   शुरू करें  "))))
        self.assertEqual(out, "कार्य शुरू करें")

    def test_translate_many_keeps_blank_slots(self) -> None:
        client = _client(_Recorder("अवसर"))
        out = asyncio.run(translate_many(["", OPP_POOL[0], "  "], "hi", client))
        self.assertEqual(out, ["", "अवसर", "  "])

    def test_translate_many_without_client_returns_lines(self) -> None:
        lines = [OPP_POOL[0], "", LEADS[1]]
        self.assertEqual(asyncio.run(translate_many(lines, "hi")), lines)

    def test_translate_many_with_wrong_line_count_returns_lines(self) -> None:
        client = _client(_Recorder("एक ही पंक्ति"))
        with self.assertLogs("astro_baba", level="WARNING"):
            out = asyncio.run(translate_many([OPP_POOL[0], LEADS[1]], "hi", client))
        self.assertEqual(out, [OPP_POOL[0], LEADS[1]])

    def test_translate_many_accepts_line_aligned_output(self) -> None:
        client = _client(_Recorder("पहली पंक्ति\nदूसरी पंक्ति"))
        out = asyncio.run(translate_many(["First line", "Second line"], "hi", client))
        self.assertEqual(out, ["पहली पंक्ति", "दूसरी पंक्ति"])

    def test_hindi_template_lines_use_phrase_bank(self) -> None:
        out = hindi_template_lines([OPP_POOL[0], "", CAUT_POOL[1]])
        self.assertEqual(out, [clean_hi(HI_PHRASES[OPP_POOL[0]]), "", clean_hi(HI_PHRASES[CAUT_POOL[1]])])


class TestCleanHi(unittest.TestCase):
    def test_fixes_ligature_slips_and_spacing(self) -> None:
        self.assertEqual(clean_hi("  कायर्   शुरू करें  "), "कार्य शुरू करें")

    def test_replaces_hinglish_leftovers(self) -> None:
        cleaned = clean_hi("इनबॉक्स ट्रिम")
        self.assertTrue(cleaned.startswith("इनबॉक्स"))
        self.assertNotIn("ट्रिम", cleaned)
        self.assertIn("संस्करण 1", clean_hi("ship version one"))

    def test_dictionary_translate_handles_labels(self) -> None:
        out = dictionary_translate("Leo")
        self.assertNotIn("Leo", out)
        self.assertEqual(dictionary_translate("Leonardo"), "Leonardo")


class TestProviderChain(unittest.TestCase):
    def test_first_usable_answer_wins(self) -> None:
        async def broken(text: str):
            raise RuntimeError("down")

        async def empty(text: str):
            return "   "

        async def upper(text: str):
            return text.upper()

        chain = ProviderChain([Provider("broken", broken), Provider("empty", empty), Provider("upper", upper)])
        with self.assertLogs("astro_baba", level="WARNING"):
            out, source = asyncio.run(chain.run("om"))
        self.assertEqual((out, source), ("OM", "upper"))

    def test_exhausted_chain_passes_text_through(self) -> None:
        async def empty(text: str):
            return None

        out, source = asyncio.run(ProviderChain([Provider("empty", empty)]).run("om"))
        self.assertEqual((out, source), ("om", "passthrough"))


if __name__ == "__main__":
    unittest.main()
