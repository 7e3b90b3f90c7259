"""Calendar/clock helpers pinned to India Standard Time."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple, Optional

import pytz

from astro_baba.locale_resources import month_name, normalize_lang, weekday_name

logger = logging.getLogger("astro_baba")

IST_ZONE_NAME = "Asia/Kolkata"
IST_OFFSET = timedelta(hours=5, minutes=30)
IST_FIXED = timezone(IST_OFFSET, "IST")


class IstParts(NamedTuple):
    ist: datetime
    date_key: str
    time_key: str
    weekday_index: int


def _as_utc(instant: Optional[datetime]) -> datetime:
    if instant is None:
        return datetime.now(timezone.utc)
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _localize_with_offset(utc_instant: datetime) -> datetime:
    return (utc_instant + IST_OFFSET).replace(tzinfo=IST_FIXED)


def to_ist(instant: Optional[datetime] = None) -> datetime:
    utc_instant = _as_utc(instant)
    try:
        return utc_instant.astimezone(pytz.timezone(IST_ZONE_NAME))
    except Exception as e:
        # IST has no DST, so the fixed offset gives the same wall clock.
        logger.warning("Timezone database lookup failed, using fixed +05:30 offset: %s", e)
        return _localize_with_offset(utc_instant)


def _weekday_index(day: date) -> int:
    return (day.weekday() + 1) % 7


def to_ist_parts(instant: Optional[datetime] = None) -> IstParts:
    ist = to_ist(instant)
    return IstParts(
        ist=ist,
        date_key=ist.strftime("%Y-%m-%d"),
        time_key=ist.strftime("%H:%M"),
        weekday_index=_weekday_index(ist.date()),
    )


def weekday_index_for_date_key(date_key: str) -> int:
    return _weekday_index(date.fromisoformat(date_key))


def instant_for_date_key(date_key: str) -> datetime:
    """Noon IST on ``date_key`` as an aware UTC instant."""
    day = date.fromisoformat(date_key)
    local_noon = datetime(day.year, day.month, day.day, 12, 0, tzinfo=IST_FIXED)
    return local_noon.astimezone(timezone.utc)


def add_days_ist(days: int, instant: Optional[datetime] = None) -> datetime:
    return _as_utc(instant) + timedelta(days=int(days))


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def day_date_header_upper(lang: str = "en", instant: Optional[datetime] = None) -> str:
    ist = to_ist(instant)
    language = normalize_lang(lang)
    weekday = weekday_name(_weekday_index(ist.date()), language)
    if language == "hi":
        return f"{weekday}, {ist.day:02d} {month_name(ist.month, language)} {ist.year}"
    month_short = month_name(ist.month, language)[:3]
    return f"{weekday}, {ist.day:02d} {month_short} {ist.year}".upper()


def format_short_date(lang: str = "en", instant: Optional[datetime] = None) -> str:
    ist = to_ist(instant)
    language = normalize_lang(lang)
    if language == "hi":
        return f"{ist.day} {month_name(ist.month, language)} {ist.year}"
    return f"{_ordinal(ist.day)} {month_name(ist.month, language)[:3]} {ist.year}"


def now_in_ist_text(lang: str = "en", instant: Optional[datetime] = None) -> str:
    ist = to_ist(instant)
    language = normalize_lang(lang)
    weekday = weekday_name(_weekday_index(ist.date()), language)
    return f"{weekday}, {ist.day} {month_name(ist.month, language)} {ist.year}, {ist.strftime('%H:%M')}"


def month_label(year: int, month: int) -> str:
    """Upper-cased ``"AUG 2025"`` label."""
    return f"{month_name(month, 'en')[:3]} {year}".upper()


def utc_iso_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
