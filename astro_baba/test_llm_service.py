"""Tests for LLM audit hashing, SSE framing and the stream fallback."""

from __future__ import annotations

import asyncio
import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import httpx
from openai import AsyncOpenAI

from astro_baba import llm_service
from astro_baba.llm_service import (
    SSE_DONE,
    UpstreamError,
    candidate_openai_models,
    chat_completion,
    chunk_frame,
    drip_text,
    emit_llm_audit_event,
    error_frame,
    mask_key,
    resolve_request_id,
    sanitize_api_key,
    sha256_hex,
    stream_chat_events,
)

MESSAGES = [{"role": "user", "content": "How is my day?"}]


async def _collect(agen) -> list[str]:
    return [frame async for frame in agen]


def _frame_text(frames: list[str]) -> str:
    out = []
    for frame in frames:
        if frame.startswith("data: {"):
            chunk = json.loads(frame[len("data: "):])
            out.append(chunk["choices"][0]["delta"]["content"])
    return "".join(out)


class _FakeStream:
    def __init__(self, pieces: list[str]):
        self._pieces = pieces
        self.closed = False

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for piece in self._pieces:
            yield SimpleNamespace(id="chunk-1", choices=[SimpleNamespace(delta=SimpleNamespace(content=piece))])

    async def close(self) -> None:
        self.closed = True


class _FakeCompletions:
    def __init__(self, *, pieces=None, buffered="", stall_sec=0.0):
        self.pieces = pieces or []
        self.buffered = buffered
        self.stall_sec = stall_sec
        self.stream: _FakeStream | None = None
        self.buffered_calls = 0

    async def create(self, **payload):
        if payload.get("stream"):
            if self.stall_sec:
                await asyncio.sleep(self.stall_sec)
            self.stream = _FakeStream(self.pieces)
            return self.stream
        self.buffered_calls += 1
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.buffered))])


def _fake_client(completions: _FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _mock_client(status: int, body: dict) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key="test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(status, json=body))),
        max_retries=0,
    )


class TestLLMAudit(unittest.TestCase):
    def test_hashing_is_stable_for_identical_inputs(self) -> None:
        self.assertEqual(sha256_hex({"a": 1, "b": [1, 2]}), sha256_hex({"b": [1, 2], "a": 1}))
        self.assertNotEqual(sha256_hex(MESSAGES), sha256_hex([{"role": "user", "content": "other"}]))

    @patch("astro_baba.llm_service.llm_audit_logger.info")
    def test_audit_log_contains_no_raw_content(self, mock_info) -> None:
        secret = "very-sensitive-horoscope-text"
        event = emit_llm_audit_event(
            request_id="req-1",
            input_hash=sha256_hex({"text": secret}),
            model_used="openai/gpt-4o-mini",
            endpoint="polish",
            outcome="ok",
        )
        logged_line = mock_info.call_args[0][0]
        parsed = json.loads(logged_line)
        self.assertEqual(parsed, event)
        self.assertEqual(
            set(parsed.keys()),
            {"request_id", "input_hash", "timestamp_utc", "model_used", "endpoint", "outcome"},
        )
        self.assertNotIn(secret, logged_line)


class TestHelpers(unittest.TestCase):
    def test_request_id_resolution(self) -> None:
        self.assertEqual(resolve_request_id(None, " explicit "), "explicit")
        generated = resolve_request_id(None)
        self.assertEqual(len(generated), 36)
        self.assertNotEqual(generated, resolve_request_id(None))

    def test_key_helpers(self) -> None:
        self.assertEqual(sanitize_api_key("  <sk-abc>  "), "sk-abc")
        self.assertEqual(mask_key(""), "(missing)")
        self.assertEqual(mask_key("sk-1234567890abcdef"), "sk-1234567...cdef")

    def test_candidate_models_are_deduplicated(self) -> None:
        models = candidate_openai_models("gpt-4o-mini")
        self.assertEqual(len(models), len(set(models)))
        self.assertEqual(models[0], "gpt-4o-mini")

    def test_frames(self) -> None:
        frame = chunk_frame("नमस्ते", "c1")
        self.assertTrue(frame.startswith("data: ") and frame.endswith("\n\n"))
        self.assertIn("नमस्ते", frame)
        self.assertEqual(
            error_frame("boom", 500),
            'event: error\ndata: {"message": "boom", "status": 500}\n\n',
        )


class TestDrip(unittest.TestCase):
    def test_drip_rechunks_and_terminates(self) -> None:
        frames = asyncio.run(_collect(drip_text("abcdefghijk", chars=5, delay_sec=0)))
        self.assertEqual(len(frames), 4)
        self.assertEqual(frames[-1], SSE_DONE)
        self.assertEqual(_frame_text(frames), "abcdefghijk")

    def test_drip_stops_when_client_leaves(self) -> None:
        async def gone() -> bool:
            return True

        frames = asyncio.run(_collect(drip_text("abcdef", is_disconnected=gone, chars=2, delay_sec=0)))
        self.assertEqual(frames, [])


class TestStreamChatEvents(unittest.TestCase):
    def test_upstream_chunks_are_forwarded(self) -> None:
        completions = _FakeCompletions(pieces=["Hello", " ", "world"])
        frames = asyncio.run(
            _collect(
                stream_chat_events(
                    _fake_client(completions),
                    messages=MESSAGES,
                    model="gpt-4o-mini",
                    temperature=0.7,
                    request_id="req-s",
                    fallback_sec=1.0,
                )
            )
        )
        self.assertEqual(frames[0], ":\n\n")
        self.assertEqual(frames[-1], SSE_DONE)
        self.assertEqual(_frame_text(frames), "Hello world")
        self.assertTrue(completions.stream.closed)
        self.assertEqual(completions.buffered_calls, 0)

    def test_slow_first_chunk_falls_back_to_buffered_drip(self) -> None:
        completions = _FakeCompletions(buffered="Buffered answer text", stall_sec=5.0)
        with self.assertLogs("astro_baba", level="WARNING"):
            frames = asyncio.run(
                _collect(
                    stream_chat_events(
                        _fake_client(completions),
                        messages=MESSAGES,
                        model="gpt-4o-mini",
                        temperature=0.7,
                        request_id="req-f",
                        fallback_sec=0.05,
                        drip_chars=4,
                        drip_delay_sec=0,
                    )
                )
            )
        self.assertEqual(frames[0], ":\n\n")
        self.assertEqual(frames[-1], SSE_DONE)
        self.assertEqual(_frame_text(frames), "Buffered answer text")
        self.assertEqual(completions.buffered_calls, 1)

    def test_upstream_error_becomes_error_event(self) -> None:
        client = _mock_client(500, {"error": {"message": "boom"}})
        with self.assertLogs("astro_baba", level="WARNING"):
            frames = asyncio.run(
                _collect(
                    stream_chat_events(
                        client,
                        messages=MESSAGES,
                        model="gpt-4o-mini",
                        temperature=0.7,
                        request_id="req-e",
                        fallback_sec=1.0,
                    )
                )
            )
        self.assertEqual(frames[0], ":\n\n")
        self.assertTrue(frames[-1].startswith("event: error\n"))
        payload = json.loads(frames[-1].split("data: ", 1)[1])
        self.assertEqual(payload["status"], 500)
        self.assertIn("boom", payload["message"])


class TestChatCompletion(unittest.TestCase):
    def test_upstream_status_is_preserved(self) -> None:
        client = _mock_client(429, {"error": {"message": "slow down"}})
        with self.assertLogs("astro_baba", level="WARNING"):
            with self.assertRaises(UpstreamError) as ctx:
                asyncio.run(
                    chat_completion(client, messages=MESSAGES, model="gpt-4o-mini", temperature=0.7, request_id="r")
                )
        self.assertEqual(ctx.exception.status_code, 429)
        self.assertIn("slow down", ctx.exception.message)

    def test_success_returns_text(self) -> None:
        completions = _FakeCompletions(buffered="All good")
        text = asyncio.run(
            chat_completion(
                _fake_client(completions), messages=MESSAGES, model="gpt-4o-mini", temperature=None, request_id="r"
            )
        )
        self.assertEqual(text, "All good")

    def test_chat_timeout_is_configured(self) -> None:
        self.assertGreaterEqual(llm_service.CHAT_TIMEOUT_SEC, 1.0)


if __name__ == "__main__":
    unittest.main()
