#!/usr/bin/env python3
"""Astro-Baba backend (FastAPI).

- Daily/weekly horoscopes: seeded templates, IST calendar cache
- Optional polish/translation and chat bridge: OpenAI
- PDF reports: ReportLab
"""

import os
from pathlib import Path

from dotenv import load_dotenv

MODULE_DIR = Path(__file__).resolve().parent
REPO_ROOT = MODULE_DIR.parent

# Package .env wins over blank terminal variables; repo .env only fills gaps.
load_dotenv(dotenv_path=MODULE_DIR / ".env", override=True)
load_dotenv(dotenv_path=REPO_ROOT / ".env", override=False)

import asyncio
import hmac
import logging
import platform
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any, Optional

import fastapi
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from openai import AsyncOpenAI
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from astro_baba import llm_service, pdf_service, polish
from astro_baba.cache_manager import CacheEntry, DailyCache, cache as polish_cache
from astro_baba.composer import (
    DailyContent,
    UserProfile,
    compose_daily,
    insert_birthday_line,
    overlay_user,
    render_daily_text,
    vedic_windows_json,
)
from astro_baba.ist_time import add_days_ist, to_ist_parts, utc_iso_now
from astro_baba.locale_resources import SUPPORTED_LANGS
from astro_baba.persona import normalize_persona
from astro_baba.reports import (
    REPORT_PACKAGES,
    BrandConfig,
    ReportDocument,
    build_daily_document,
    build_family_document,
    build_gemstone_document,
    build_mantra_document,
    build_persona_document,
    build_weekly_document,
    build_yearly_document,
)
from astro_baba.seeded import SIGNS, is_valid_sign
from astro_baba.yearly_roadmap import build_family_sections, build_yearly_roadmap

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s - %(message)s",
)

logger = logging.getLogger("astro_baba")

# ------------------------------------------------------------------------------
APP_VERSION = "1.4.0"
SERVICE_NAME = "Astro-Baba Chat API"
DATA_DIR = Path(os.getenv("ASTRO_DATA_DIR", str(REPO_ROOT / "data")))
POLISH_DAILY = os.getenv("ASTRO_POLISH_DAILY", "0").strip().lower() in {"1", "true", "yes", "on"}
CHAT_DEFAULT_TEMPERATURE = 0.7
WEEK_DAYS = 7
MAX_FAMILY_MEMBERS = 12
OPEN_PATHS = {"/", "/health"}

INVALID_SIGN_MESSAGE = "Invalid sign. Use: " + ", ".join(SIGNS)
INVALID_LANG_MESSAGE = "Invalid lang. Use: " + ", ".join(SUPPORTED_LANGS)
INVALID_PACKAGE_MESSAGE = "Invalid package. Use: " + ", ".join(REPORT_PACKAGES)

pdf_service.init_fonts()

# ------------------------------------------------------------------------------
# OpenAI client initialization
# ------------------------------------------------------------------------------
async_client, OPENAI_HTTP_CLIENT = llm_service.build_openai_client()
if async_client is None:
    logger.info("OPENAI_API_KEY missing; deterministic fallback mode everywhere.")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    if OPENAI_HTTP_CLIENT is not None:
        await OPENAI_HTTP_CLIENT.aclose()


app = FastAPI(title="Astro-Baba Backend", version=APP_VERSION, lifespan=lifespan)

allowed_origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials="*" not in allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def shared_secret_gate(request: Request, call_next):
    secret = os.getenv("ASTRO_SHARED_SECRET", "").strip()
    if secret and request.method != "OPTIONS" and request.url.path not in OPEN_PATHS:
        supplied = request.headers.get("x-api-key", "")
        if not hmac.compare_digest(supplied.encode("utf-8"), secret.encode("utf-8")):
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    return await call_next(request)


# ------------------------------------------------------------------------------
# Error mapping: every failure is {"error": "..."}
# ------------------------------------------------------------------------------
def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg") or "Invalid request")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error path=%s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# ------------------------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_daily_cache() -> DailyCache:
    return DailyCache(DATA_DIR / "cache" / "daily")


def get_llm_client() -> Optional[AsyncOpenAI]:
    return async_client


def get_now() -> datetime:
    return datetime.now(timezone.utc)


# ------------------------------------------------------------------------------
# Request schemas
# ------------------------------------------------------------------------------
def normalize_sign(value: Any) -> str:
    sign = str(value or "").strip().lower()
    if not is_valid_sign(sign):
        raise ValueError(INVALID_SIGN_MESSAGE)
    return sign


def normalize_lang_strict(value: Any) -> str:
    lang = str(value or "en").strip().lower()
    if lang not in SUPPORTED_LANGS:
        raise ValueError(INVALID_LANG_MESSAGE)
    return lang


SignField = Annotated[str, BeforeValidator(normalize_sign)]
LangField = Annotated[str, BeforeValidator(normalize_lang_strict)]


def _query_or_400(normalizer, value: Any) -> str:
    try:
        return normalizer(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DailyRequest(_RequestModel):
    sign: SignField
    lang: LangField = "en"
    user: Optional[UserProfile] = None


class ReportRequest(DailyRequest):
    sign: SignField = "aries"
    brand: Optional[BrandConfig] = None


class YearlyReportRequest(ReportRequest):
    persona: Optional[str] = None


class GenerateReportRequest(YearlyReportRequest):
    package: str = "daily"

    @field_validator("package", mode="before")
    @classmethod
    def _check_package(cls, value: Any) -> str:
        package = str(value or "daily").strip().lower()
        if package not in REPORT_PACKAGES:
            raise ValueError(INVALID_PACKAGE_MESSAGE)
        return package


class FamilyMemberRequest(_RequestModel):
    name: str = ""
    sign: SignField
    persona: Optional[str] = None
    occupation: Optional[str] = None


class FamilyReportRequest(_RequestModel):
    members: list[FamilyMemberRequest] = Field(min_length=1, max_length=MAX_FAMILY_MEMBERS)
    lang: LangField = "en"
    user: Optional[UserProfile] = None
    brand: Optional[BrandConfig] = None


class ChatMessage(_RequestModel):
    role: str
    content: str


class ChatRequest(_RequestModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    system: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = CHAT_DEFAULT_TEMPERATURE

    def upstream_messages(self) -> list[dict[str, str]]:
        head = [{"role": "system", "content": self.system}] if self.system else []
        return head + [m.model_dump() for m in self.messages]


# ------------------------------------------------------------------------------
# Daily pipeline: IST date -> cache -> compose -> (polish) -> cache
# ------------------------------------------------------------------------------
async def ensure_daily(
    daily_cache: DailyCache,
    sign: str,
    lang: str,
    instant: datetime,
    client: Optional[AsyncOpenAI] = None,
    request_id: Optional[str] = None,
) -> tuple[CacheEntry, DailyContent]:
    date_key = to_ist_parts(instant).date_key
    entry = daily_cache.get(date_key, sign, lang)
    if entry is not None:
        try:
            return entry, DailyContent.model_validate(entry.rich)
        except ValidationError as e:
            logger.warning("Cached daily record unusable; recomposing date=%s sign=%s lang=%s: %s", date_key, sign, lang, e)

    content = compose_daily(sign, lang, instant)
    text = render_daily_text(content)
    if POLISH_DAILY and client is not None:
        text = await polish.polish(text, client, lang=lang, request_id=request_id)
    entry = CacheEntry(
        date=date_key,
        sign=sign,
        lang=lang,
        text=text,
        generated_at=utc_iso_now(),
        rich=content.to_json(),
    )
    daily_cache.put(date_key, sign, lang, entry)
    logger.info("Daily composed date=%s sign=%s lang=%s", date_key, sign, lang)
    return entry, content


async def personalised_daily(
    daily_cache: DailyCache,
    sign: str,
    lang: str,
    instant: datetime,
    user: Optional[UserProfile],
    client: Optional[AsyncOpenAI],
    request_id: str,
) -> tuple[CacheEntry, DailyContent, str]:
    entry, content = await ensure_daily(daily_cache, sign, lang, instant, client, request_id)
    content = overlay_user(content, user)
    return entry, content, insert_birthday_line(entry.text, content)


def daily_payload(entry: CacheEntry, content: DailyContent, text: str) -> dict[str, Any]:
    return {
        "date": entry.date,
        "sign": entry.sign,
        "lang": entry.lang,
        "text": text,
        "vedic": vedic_windows_json(content),
        "generatedAt": entry.generated_at,
        "rich": content.to_json(),
    }


async def week_of_dailies(
    daily_cache: DailyCache,
    sign: str,
    lang: str,
    instant: datetime,
    user: Optional[UserProfile],
    client: Optional[AsyncOpenAI],
    request_id: str,
) -> list[tuple[CacheEntry, DailyContent, str]]:
    return [
        await personalised_daily(daily_cache, sign, lang, add_days_ist(offset, instant), user, client, request_id)
        for offset in range(WEEK_DAYS)
    ]


async def pdf_response(document: ReportDocument, instant: datetime) -> Response:
    if not pdf_service.PDF_FEATURE_AVAILABLE:
        raise HTTPException(status_code=503, detail=f"PDF generation unavailable: {pdf_service.PDF_FEATURE_ERROR}")
    logo = await pdf_service.load_logo_bytes(document.brand)
    pdf_bytes = await asyncio.to_thread(pdf_service.render_report_pdf, document, logo)
    filename = pdf_service.pdf_filename(
        document.brand.display_name, document.kind, document.sign, int(instant.timestamp() * 1000)
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


# ------------------------------------------------------------------------------
# API endpoints: liveness / health
# ------------------------------------------------------------------------------
@app.get("/")
def root():
    return {"ok": True, "service": SERVICE_NAME}


@app.get("/health")
def health(daily_cache: DailyCache = Depends(get_daily_cache), client=Depends(get_llm_client)):
    return {
        "status": "ok",
        "openai_configured": bool(client),
        "model": llm_service.OPENAI_MODEL,
        "polish_daily": POLISH_DAILY,
        "polish_cache": polish_cache.stats(),
        "daily_cache_dir": str(daily_cache.root),
        "daily_cache_memory_items": daily_cache.memory_size(),
        "devanagari_font": pdf_service.DEVANAGARI_FONT_AVAILABLE,
        "pdf_feature_available": pdf_service.PDF_FEATURE_AVAILABLE,
        "pdf_feature_error": pdf_service.PDF_FEATURE_ERROR,
    }


# ------------------------------------------------------------------------------
# API endpoints: JSON content
# ------------------------------------------------------------------------------
@app.get("/daily")
async def get_daily(
    request: Request,
    sign: str = Query(""),
    lang: str = Query("en"),
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    sign_key = _query_or_400(normalize_sign, sign)
    lang_key = _query_or_400(normalize_lang_strict, lang)
    request_id = llm_service.resolve_request_id(request)
    entry, content, text = await personalised_daily(daily_cache, sign_key, lang_key, now, None, client, request_id)
    return daily_payload(entry, content, text)


@app.post("/daily")
async def post_daily(
    request: Request,
    body: DailyRequest,
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    request_id = llm_service.resolve_request_id(request)
    entry, content, text = await personalised_daily(daily_cache, body.sign, body.lang, now, body.user, client, request_id)
    return daily_payload(entry, content, text)


@app.get("/weekly")
async def get_weekly(
    request: Request,
    sign: str = Query(""),
    lang: str = Query("en"),
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    sign_key = _query_or_400(normalize_sign, sign)
    lang_key = _query_or_400(normalize_lang_strict, lang)
    request_id = llm_service.resolve_request_id(request)
    days = await week_of_dailies(daily_cache, sign_key, lang_key, now, None, client, request_id)
    return {
        "sign": sign_key,
        "lang": lang_key,
        "days": [{"date": entry.date, "text": text, "vedic": vedic_windows_json(content)} for entry, content, text in days],
    }


@app.get("/yearly")
def get_yearly(
    sign: str = Query(""),
    lang: str = Query("en"),
    persona: Optional[str] = Query(None),
    now: datetime = Depends(get_now),
):
    sign_key = _query_or_400(normalize_sign, sign)
    lang_key = _query_or_400(normalize_lang_strict, lang)
    return build_yearly_roadmap(sign_key, lang_key, persona, now).to_json()


# ------------------------------------------------------------------------------
# API endpoints: PDF reports
# ------------------------------------------------------------------------------
@app.post("/report/from-daily")
async def report_from_daily(
    request: Request,
    body: ReportRequest,
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    request_id = llm_service.resolve_request_id(request)
    _entry, content, text = await personalised_daily(daily_cache, body.sign, body.lang, now, body.user, client, request_id)
    return await pdf_response(build_daily_document(content, text, body.user, body.brand, now), now)


@app.post("/report/weekly")
async def report_weekly(
    request: Request,
    body: ReportRequest,
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    request_id = llm_service.resolve_request_id(request)
    days = await week_of_dailies(daily_cache, body.sign, body.lang, now, body.user, client, request_id)
    document = build_weekly_document([(content, text) for _entry, content, text in days], body.user, body.brand, now)
    return await pdf_response(document, now)


@app.post("/report/gemstone")
async def report_gemstone(body: ReportRequest, now: datetime = Depends(get_now)):
    return await pdf_response(build_gemstone_document(body.sign, body.lang, body.user, body.brand, now), now)


@app.post("/report/mantra")
async def report_mantra(body: ReportRequest, now: datetime = Depends(get_now)):
    return await pdf_response(build_mantra_document(body.sign, body.lang, body.user, body.brand, now), now)


@app.post("/report/yearly")
async def report_yearly(body: YearlyReportRequest, now: datetime = Depends(get_now)):
    persona = body.persona or (body.user.occupation if body.user else None)
    roadmap = build_yearly_roadmap(body.sign, body.lang, persona, now)
    return await pdf_response(build_yearly_document(roadmap, body.user, body.brand, now), now)


@app.post("/report/family")
async def report_family(body: FamilyReportRequest, now: datetime = Depends(get_now)):
    members = build_family_sections([m.model_dump() for m in body.members], body.lang, now)
    return await pdf_response(build_family_document(members, body.lang, body.user, body.brand, now), now)


@app.post("/report/generate")
async def report_generate(
    request: Request,
    body: GenerateReportRequest,
    daily_cache: DailyCache = Depends(get_daily_cache),
    client=Depends(get_llm_client),
    now: datetime = Depends(get_now),
):
    """One entry point for every report package."""
    if body.package == "weekly":
        return await report_weekly(request, body, daily_cache, client, now)
    if body.package == "gemstone":
        return await report_gemstone(body, now)
    if body.package == "mantra":
        return await report_mantra(body, now)
    if body.package == "yearly":
        return await report_yearly(body, now)
    if body.package == "persona":
        request_id = llm_service.resolve_request_id(request)
        _entry, content, text = await personalised_daily(
            daily_cache, body.sign, body.lang, now, body.user, client, request_id
        )
        persona = normalize_persona(body.persona or (body.user.occupation if body.user else None))
        document = await build_persona_document(
            content, text, persona, body.user, body.brand, now, client=client, request_id=request_id
        )
        return await pdf_response(document, now)
    return await report_from_daily(request, body, daily_cache, client, now)


# ------------------------------------------------------------------------------
# API endpoints: chat bridge
# ------------------------------------------------------------------------------
@app.post("/chat")
async def chat(request: Request, body: ChatRequest, client=Depends(get_llm_client)):
    if client is None:
        return JSONResponse(status_code=500, content={"error": "OPENAI_API_KEY not set"})
    try:
        text = await llm_service.chat_completion(
            client,
            messages=body.upstream_messages(),
            model=body.model or llm_service.OPENAI_MODEL,
            temperature=body.temperature,
            request_id=llm_service.resolve_request_id(request),
        )
    except llm_service.UpstreamError as e:
        status = e.status_code if 400 <= e.status_code < 600 else 502
        return JSONResponse(status_code=status, content={"error": e.message})
    return {"text": text}


SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def _single_error_event(message: str):
    yield llm_service.error_frame(message)


@app.post("/chat/stream")
async def chat_stream(request: Request, body: ChatRequest, client=Depends(get_llm_client)):
    if client is None:
        return StreamingResponse(
            _single_error_event("OPENAI_API_KEY not set"),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )
    events = llm_service.stream_chat_events(
        client,
        messages=body.upstream_messages(),
        model=body.model or llm_service.OPENAI_MODEL,
        temperature=body.temperature,
        request_id=llm_service.resolve_request_id(request),
        is_disconnected=request.is_disconnected,
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)


# ------------------------------------------------------------------------------
# API endpoints: debug
# ------------------------------------------------------------------------------
@app.get("/debug/key")
def debug_key():
    key = llm_service.OPENAI_API_KEY
    return {
        "present": bool(key),
        "masked": llm_service.mask_key(key),
        "length": len(key),
        "base_url_override": bool(os.getenv("OPENAI_BASE_URL") or os.getenv("OPENAI_API_BASE")),
    }


@app.get("/debug/fonts")
def debug_fonts():
    return pdf_service.font_status()


@app.get("/debug/version")
def debug_version():
    return {
        "service": SERVICE_NAME,
        "version": APP_VERSION,
        "python": platform.python_version(),
        "fastapi": fastapi.__version__,
        "model": llm_service.OPENAI_MODEL,
        "polish_daily": POLISH_DAILY,
        "timezone": "Asia/Kolkata",
    }


@app.get("/debug/routes")
def debug_routes():
    routes = []
    for route in app.routes:
        methods = sorted(getattr(route, "methods", None) or [])
        routes.append({"path": getattr(route, "path", ""), "methods": methods})
    return {"routes": sorted(routes, key=lambda r: r["path"])}
