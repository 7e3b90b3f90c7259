"""OpenAI chat-completions wiring shared by polish/translate and the /chat bridge."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Awaitable, Callable, Optional
from uuid import uuid4

import httpx
from fastapi import Request
from openai import APIStatusError, AsyncOpenAI, OpenAIError

logger = logging.getLogger("astro_baba")
llm_audit_logger = logging.getLogger("llm_audit")


def _env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def sanitize_api_key(raw: Optional[str]) -> str:
    return re.sub(r"[<>]", "", (raw or "").strip())


def mask_key(key: Optional[str]) -> str:
    return f"{key[:10]}...{key[-4:]}" if key else "(missing)"


OPENAI_API_KEY = sanitize_api_key(os.getenv("OPENAI_API_KEY", ""))
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TIMEOUT_SEC = _env_float("LLM_TIMEOUT_SEC", 8.0, 0.5)
STREAM_FALLBACK_SEC = _env_float("STREAM_FALLBACK_SEC", 4.0, 0.1)
CHAT_TIMEOUT_SEC = _env_float("CHAT_TIMEOUT_SEC", 60.0, 1.0)
DRIP_CHARS = 18
DRIP_DELAY_SEC = 0.025
SSE_DONE = "data: [DONE]\n\n"


class UpstreamError(Exception):
    """Non-2xx (or unreachable) answer from the completion service."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def utc_iso_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def canonical_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def sha256_hex(value: Any) -> str:
    return hashlib.sha256(canonical_json(value).encode("utf-8")).hexdigest()


def resolve_request_id(request: Optional[Request], explicit_request_id: Optional[str] = None) -> str:
    explicit = explicit_request_id.strip() if isinstance(explicit_request_id, str) else ""
    if explicit:
        return explicit
    if request is not None:
        for header in ("x-request-id", "x-correlation-id"):
            value = (request.headers.get(header) or "").strip()
            if value:
                return value
    return str(uuid4())


def emit_llm_audit_event(
    *,
    request_id: str,
    input_hash: str,
    model_used: str,
    endpoint: str,
    outcome: str,
) -> dict[str, str]:
    """Log one canonical-JSON line per completion; never includes prompt or output text."""
    event = {
        "request_id": request_id,
        "input_hash": input_hash,
        "timestamp_utc": utc_iso_now(),
        "model_used": model_used,
        "endpoint": endpoint,
        "outcome": outcome,
    }
    llm_audit_logger.info(canonical_json(event))
    return event


# ------------------------------------------------------------------------------
# Client construction
# ------------------------------------------------------------------------------
def _first_nonempty_env(*keys: str) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _resolve_openai_base_url() -> Optional[str]:
    configured = _first_nonempty_env("OPENAI_BASE_URL", "OPENAI_API_BASE")
    if not configured:
        return None
    lowered = configured.lower()
    if "localhost" in lowered or "127.0.0.1" in lowered:
        logger.error("Invalid OPENAI base URL '%s' detected; falling back to default OpenAI endpoint", configured)
        return None
    return configured


def build_openai_client(api_key: Optional[str] = None) -> tuple[Optional[AsyncOpenAI], Optional[httpx.AsyncClient]]:
    key = sanitize_api_key(api_key if api_key is not None else OPENAI_API_KEY)
    if not key:
        return None, None

    base_url = _resolve_openai_base_url()
    proxy_url = _first_nonempty_env("OPENAI_PROXY_URL", "HTTPS_PROXY", "https_proxy", "ALL_PROXY", "all_proxy")
    timeout = httpx.Timeout(connect=5.0, read=CHAT_TIMEOUT_SEC, write=30.0, pool=30.0)

    try:
        if proxy_url:
            http_client = httpx.AsyncClient(timeout=timeout, trust_env=True, proxy=proxy_url)
        else:
            http_client = httpx.AsyncClient(timeout=timeout, trust_env=True)
        logger.info("OpenAI transport configured: proxy=%s", proxy_url if proxy_url else "NONE")
        client_kwargs: dict[str, Any] = {"api_key": key, "http_client": http_client}
        if base_url:
            client_kwargs["base_url"] = base_url
        client = AsyncOpenAI(**client_kwargs)
        logger.info("OpenAI client initialized base_url=%s key=%s", str(client.base_url), mask_key(key))
        return client, http_client
    except Exception as e:
        logger.warning("OpenAI client initialization failed: %s", e)
        return None, None


def candidate_openai_models(primary_model: Optional[str]) -> list[str]:
    """Return de-duplicated model fallback order for chat completions."""
    candidates = [primary_model or "", OPENAI_MODEL, "gpt-4o-mini"]
    out: list[str] = []
    for model in candidates:
        normalized = (model or "").strip()
        if normalized and normalized not in out:
            out.append(normalized)
    return out


def build_openai_payload(
    *,
    model: str,
    messages: list[dict[str, str]],
    temperature: Optional[float] = None,
    max_completion_tokens: Optional[int] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"model": model, "messages": messages}
    if temperature is not None:
        payload["temperature"] = float(temperature)
    if max_completion_tokens:
        payload["max_completion_tokens"] = int(max_completion_tokens)
    return payload


def _message_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    content = getattr(choices[0].message, "content", "")
    return content if isinstance(content, str) else ""


# ------------------------------------------------------------------------------
# Completions
# ------------------------------------------------------------------------------
async def complete_text(
    client: Optional[AsyncOpenAI],
    *,
    system_message: str,
    user_message: str,
    request_id: str,
    endpoint: str,
    model: Optional[str] = None,
    temperature: Optional[float] = 0.4,
    max_completion_tokens: int = 1500,
) -> str:
    """Single system+user completion, walking the model fallback order.

    Raises when every candidate model fails or returns empty text; callers
    that have a deterministic fallback wrap this in a provider chain.
    """
    if client is None:
        raise RuntimeError("OpenAI client not initialized")

    messages = [
        {"role": "system", "content": system_message},
        {"role": "user", "content": user_message},
    ]
    input_hash = sha256_hex(messages)
    candidate_models = candidate_openai_models(model)
    last_error: Optional[Exception] = None

    for candidate_model in candidate_models:
        payload = build_openai_payload(
            model=candidate_model,
            messages=messages,
            temperature=temperature,
            max_completion_tokens=max_completion_tokens,
        )
        try:
            logger.info("LLM API call started request_id=%s model=%s endpoint=%s", request_id, candidate_model, endpoint)
            response = await client.chat.completions.create(**payload)
            text = _message_text(response)
            if not text.strip():
                raise RuntimeError(f"LLM returned empty completion. Model: {candidate_model}")
            emit_llm_audit_event(
                request_id=request_id,
                input_hash=input_hash,
                model_used=f"openai/{candidate_model}",
                endpoint=endpoint,
                outcome="ok",
            )
            return text.strip()
        except Exception as e:
            last_error = e
            logger.warning(
                "LLM model attempt failed request_id=%s model=%s error_type=%s error=%s",
                request_id,
                candidate_model,
                type(e).__name__,
                str(e),
            )

    emit_llm_audit_event(
        request_id=request_id,
        input_hash=input_hash,
        model_used="none",
        endpoint=endpoint,
        outcome="failed",
    )
    raise RuntimeError(
        f"LLM completion failed for all candidate models {candidate_models}. "
        f"last_error={type(last_error).__name__ if last_error else 'N/A'}: {last_error}"
    ) from last_error


def _upstream_message(error: APIStatusError) -> str:
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        detail = body.get("error", body)
        if isinstance(detail, dict) and detail.get("message"):
            return str(detail["message"])
        return canonical_json(detail)
    try:
        return error.response.text or str(error)
    except (AttributeError, httpx.ResponseNotRead):
        return str(error)


async def chat_completion(
    client: AsyncOpenAI,
    *,
    messages: list[dict[str, str]],
    model: str,
    temperature: Optional[float],
    request_id: str,
    endpoint: str = "/chat",
) -> str:
    """Buffered pass-through completion; upstream failures become ``UpstreamError``."""
    payload = build_openai_payload(model=model, messages=messages, temperature=temperature)
    input_hash = sha256_hex(messages)
    try:
        response = await asyncio.wait_for(client.chat.completions.create(**payload), timeout=CHAT_TIMEOUT_SEC)
    except APIStatusError as e:
        logger.warning("Upstream completion error request_id=%s status=%s", request_id, e.status_code)
        raise UpstreamError(e.status_code, _upstream_message(e)) from e
    except (OpenAIError, httpx.HTTPError, asyncio.TimeoutError) as e:
        logger.warning("Upstream completion unreachable request_id=%s error=%s", request_id, e)
        raise UpstreamError(502, str(e) or type(e).__name__) from e
    emit_llm_audit_event(
        request_id=request_id,
        input_hash=input_hash,
        model_used=f"openai/{model}",
        endpoint=endpoint,
        outcome="ok",
    )
    return _message_text(response)


# ------------------------------------------------------------------------------
# Server-sent events
# ------------------------------------------------------------------------------
def chunk_frame(piece: str, chunk_id: str = "local") -> str:
    chunk = {
        "id": chunk_id,
        "object": "chat.completion.chunk",
        "choices": [{"index": 0, "delta": {"content": piece}, "finish_reason": None}],
    }
    return f"data: {json.dumps(chunk, ensure_ascii=False)}\n\n"


def error_frame(message: str, status: Optional[int] = None) -> str:
    payload: dict[str, Any] = {"message": message}
    if status is not None:
        payload["status"] = status
    return f"event: error\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _delta_text(chunk: Any) -> str:
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return ""
    delta = getattr(choices[0], "delta", None)
    content = getattr(delta, "content", None)
    return content if isinstance(content, str) else ""


async def _close_stream(stream: Any) -> None:
    if stream is None:
        return
    try:
        await stream.close()
    except (OpenAIError, httpx.HTTPError, RuntimeError) as e:
        logger.debug("Upstream stream close failed: %s", e)


async def _never_disconnected() -> bool:
    return False


async def drip_text(
    text: str,
    *,
    is_disconnected: Callable[[], Awaitable[bool]] = _never_disconnected,
    chars: int = DRIP_CHARS,
    delay_sec: float = DRIP_DELAY_SEC,
) -> AsyncIterator[str]:
    """Re-chunk buffered text into SSE frames to keep a streaming feel."""
    body = text or "(no content)"
    for start in range(0, len(body), chars):
        if await is_disconnected():
            return
        yield chunk_frame(body[start:start + chars])
        await asyncio.sleep(delay_sec)
    yield SSE_DONE


async def stream_chat_events(
    client: AsyncOpenAI,
    *,
    messages: list[dict[str, str]],
    model: str,
    temperature: Optional[float],
    request_id: str,
    is_disconnected: Callable[[], Awaitable[bool]] = _never_disconnected,
    fallback_sec: float = STREAM_FALLBACK_SEC,
    drip_chars: int = DRIP_CHARS,
    drip_delay_sec: float = DRIP_DELAY_SEC,
) -> AsyncIterator[str]:
    """Upstream streaming with a first-chunk deadline and a buffered fallback.

    Frames follow the upstream order. If the first chunk does not arrive
    within ``fallback_sec`` the upstream stream is closed, a buffered
    completion is requested and its text is dripped locally.
    """
    yield ":\n\n"
    payload = build_openai_payload(model=model, messages=messages, temperature=temperature)
    opened: dict[str, Any] = {}

    async def _open_and_read_first() -> Any:
        stream = await client.chat.completions.create(**payload, stream=True)
        opened["stream"] = stream
        opened["iterator"] = stream.__aiter__()
        return await anext(opened["iterator"], None)

    first: Any = None
    try:
        first = await asyncio.wait_for(_open_and_read_first(), timeout=fallback_sec)
    except asyncio.TimeoutError:
        logger.warning(
            "No upstream chunk within %.1fs request_id=%s; falling back to buffered completion",
            fallback_sec,
            request_id,
        )
    except (OpenAIError, httpx.HTTPError) as e:
        logger.warning("Upstream stream failed to open request_id=%s error=%s", request_id, e)

    if first is None:
        await _close_stream(opened.get("stream"))
        try:
            text = await chat_completion(
                client,
                messages=messages,
                model=model,
                temperature=temperature,
                request_id=request_id,
                endpoint="/chat/stream",
            )
        except UpstreamError as e:
            yield error_frame(e.message, e.status_code)
            return
        async for frame in drip_text(
            text, is_disconnected=is_disconnected, chars=drip_chars, delay_sec=drip_delay_sec
        ):
            yield frame
        return

    stream = opened["stream"]
    chunk_id = str(getattr(first, "id", "") or "local")
    try:
        piece = _delta_text(first)
        if piece:
            yield chunk_frame(piece, chunk_id)
        async for chunk in opened["iterator"]:
            if await is_disconnected():
                logger.info("Client disconnected mid-stream request_id=%s", request_id)
                return
            piece = _delta_text(chunk)
            if piece:
                yield chunk_frame(piece, chunk_id)
        emit_llm_audit_event(
            request_id=request_id,
            input_hash=sha256_hex(messages),
            model_used=f"openai/{model}",
            endpoint="/chat/stream",
            outcome="ok",
        )
        yield SSE_DONE
    except (OpenAIError, httpx.HTTPError) as e:
        logger.warning("Upstream stream interrupted request_id=%s error=%s", request_id, e)
        yield error_frame("Upstream stream interrupted")
    finally:
        await _close_stream(stream)
