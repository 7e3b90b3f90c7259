"""Daily horoscope composition.

``compose_daily`` is pure: the same ``(date, sign, lang)`` always yields the
same record. User specific parts (the birthday line) are layered on later by
``overlay_user`` so the cached record can be shared between users.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from astro_baba import content_bank
from astro_baba.ist_time import add_days_ist, day_date_header_upper, to_ist_parts
from astro_baba.locale_resources import color_name, normalize_lang, resource, sign_name
from astro_baba.seeded import cap_sign, hash_code, pick, pick_n, sign_index
from astro_baba.vedic_tables import WINDOW_KEYS, day_deity, vedic_times_for_day_index

LEAD_SIGN_STRIDE = 7
OPP_SALT = 101
CAUT_SALT = 211
COLOR_SALT = 17
QUOTE_SALT = 31
AFFIRMATION_SALT = 63
MOOD_SALT = 95


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(_CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None
    tob: Optional[str] = None
    place: Optional[str] = None
    occupation: Optional[str] = None


class VedicTimings(_CamelModel):
    rahu_kaal: str
    yamaganda: str
    gulika_kaal: str
    abhijit_muhurat: str


class DeityLine(_CamelModel):
    name: str
    pair: str
    ritual: str
    sentence: str


class Observance(_CamelModel):
    title: str
    line: str


class SpecialDay(_CamelModel):
    title: str
    birthday: Optional[str] = None
    observance: Optional[Observance] = None


class DailyContent(_CamelModel):
    date: str
    sign: str
    lang: str
    weekday_index: int
    seed: int
    header: str
    greeting: str
    opening_line: str
    deity: DeityLine
    lucky_color: str
    lucky_number: int
    lucky_line: str
    opportunities: list[str] = Field(default_factory=list)
    cautions: list[str] = Field(default_factory=list)
    remedy: str
    vedic_timings: VedicTimings
    vedic_note: str
    special_day: Optional[SpecialDay] = None
    quote: str
    affirmation: str
    mood: str
    water_glasses: int
    policy_disclaimer: str
    thanks: str
    closing: str

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def daily_seed(sign: str, date_key: str) -> int:
    return hash_code(f"{date_key[:7]}|{sign}|{date_key}")


def _dob_month_day(dob: Optional[str]) -> Optional[str]:
    parts = str(dob or "").strip().split("-")
    if len(parts) < 3:
        return None
    return f"{parts[1]}-{parts[2][:2]}"


def _birthday_line(user: Optional[UserProfile], month_day: str, lang: str) -> Optional[str]:
    if user is None or _dob_month_day(user.dob) != month_day:
        return None
    name = (user.name or "").strip()
    name_part = f"{resource(lang, 'birthday_name_sep')}{name}" if name else ""
    return resource(lang, "birthday", name=name_part)


def special_day(date_key: str, lang: str = "en", user: Optional[UserProfile] = None) -> Optional[SpecialDay]:
    """Birthday and/or fixed observance for ``date_key``; ``None`` when neither applies."""
    language = normalize_lang(lang)
    month_day = date_key[5:10]
    birthday = _birthday_line(user, month_day, language)
    fixed = content_bank.FIXED_DAYS.get(month_day)
    observance = None
    if fixed:
        title, line = fixed[language]
        observance = Observance(title=title, line=line)
    if birthday is None and observance is None:
        return None
    return SpecialDay(title=resource(language, "special_day_title"), birthday=birthday, observance=observance)


def compose_daily(
    sign: str,
    lang: str = "en",
    instant: Optional[datetime] = None,
    user: Optional[UserProfile] = None,
) -> DailyContent:
    normalized_sign = str(sign or "").strip().lower()
    language = normalize_lang(lang)
    parts = to_ist_parts(instant)
    date_key = parts.date_key
    seed = daily_seed(normalized_sign, date_key)
    s_index = sign_index(normalized_sign)

    def loc(line: str) -> str:
        return content_bank.localized(line, language)

    lead = pick(content_bank.LEADS, seed + s_index * LEAD_SIGN_STRIDE)
    opportunities = pick_n(content_bank.OPP_POOL, 3, seed + OPP_SALT)
    cautions = pick_n(content_bank.CAUT_POOL, 3, seed + CAUT_SALT)
    remedy = content_bank.REMEDY_MAP.get(parts.weekday_index, content_bank.REMEDY_MAP[0])

    color_en = pick(content_bank.COLORS, seed + COLOR_SALT)
    color = color_name(color_en, language)
    lucky_number = ((parts.ist.day + s_index) % 9) + 1

    deity = day_deity(parts.weekday_index, language)
    deity_sentence = f"{resource(language, 'deity_pre')}{deity['pair']}{resource(language, 'deity_post')}"

    return DailyContent(
        date=date_key,
        sign=normalized_sign,
        lang=language,
        weekday_index=parts.weekday_index,
        seed=seed,
        header=day_date_header_upper(language, parts.ist),
        greeting=resource(language, "greeting"),
        opening_line=loc(lead),
        deity=DeityLine(name=deity["name"], pair=deity["pair"], ritual=deity["ritual"], sentence=deity_sentence),
        lucky_color=color,
        lucky_number=lucky_number,
        lucky_line=resource(language, "lucky_line", color=color, number=lucky_number),
        opportunities=[loc(line) for line in opportunities],
        cautions=[loc(line) for line in cautions],
        remedy=loc(remedy),
        vedic_timings=VedicTimings.model_validate(vedic_times_for_day_index(parts.weekday_index)),
        vedic_note=resource(language, "vedic_note"),
        special_day=special_day(date_key, language, user),
        quote=loc(pick(content_bank.QUOTES, seed + QUOTE_SALT)),
        affirmation=loc(pick(content_bank.AFFIRMATIONS, seed + AFFIRMATION_SALT)),
        mood=loc(pick(content_bank.MOODS, seed + MOOD_SALT)),
        water_glasses=8 + ((seed >> 5) % 5),
        policy_disclaimer=resource(language, "policy_disclaimer"),
        thanks=resource(language, "policy_thanks"),
        closing=resource(language, "closing"),
    )


def compose_week(sign: str, lang: str = "en", instant: Optional[datetime] = None) -> list[DailyContent]:
    """Seven consecutive IST days starting with the day containing ``instant``."""
    start = instant if instant is not None else datetime.now(timezone.utc)
    return [compose_daily(sign, lang, add_days_ist(offset, start)) for offset in range(7)]


def overlay_user(content: DailyContent, user: Optional[UserProfile]) -> DailyContent:
    """Return ``content`` with the request user's birthday applied, if today is one."""
    if user is None:
        return content
    birthday = _birthday_line(user, content.date[5:10], content.lang)
    if birthday is None:
        return content
    current = content.special_day
    merged = SpecialDay(
        title=resource(content.lang, "special_day_title"),
        birthday=birthday,
        observance=current.observance if current else None,
    )
    return content.model_copy(update={"special_day": merged})


def insert_birthday_line(text: str, content: DailyContent) -> str:
    """Splice the birthday paragraph into already rendered (maybe polished) text."""
    birthday = content.special_day.birthday if content.special_day else None
    if not birthday or birthday in text:
        return text
    first, sep, rest = text.partition("\n\n")
    if not sep:
        return f"{text}\n\n{birthday}"
    return f"{first}\n\n{birthday}\n\n{rest.lstrip()}"


def vedic_windows_json(content: DailyContent) -> dict[str, str]:
    dumped = content.vedic_timings.model_dump(by_alias=True)
    return {key: dumped[key] for key in WINDOW_KEYS}


def render_daily_text(content: DailyContent) -> str:
    """Flatten a daily record into the legacy markdown-ish text body.

    Paragraphs are separated by blank lines; the PDF layer splits on them.
    """
    lang = content.lang
    bullet = "• "
    windows = vedic_windows_json(content)
    paragraphs: list[str] = [
        f"**{cap_sign(content.sign)} • {content.date}**\n{content.header}",
        content.greeting,
        f"{resource(lang, 'deity_pre')}**{content.deity.pair}**{resource(lang, 'deity_post')} {content.deity.ritual}",
        content.opening_line,
    ]

    special = content.special_day
    if special is not None:
        lines = [f"**{special.title}**"]
        if special.birthday:
            lines.append(special.birthday)
        if special.observance:
            lines.append(f"{special.observance.title}: {special.observance.line}")
        paragraphs.append("\n".join(lines))

    paragraphs.append(
        f"**{resource(lang, 'heading_opportunities')}**\n"
        + "\n".join(f"{bullet}{line}" for line in content.opportunities)
    )
    paragraphs.append(
        f"**{resource(lang, 'heading_cautions')}**\n"
        + "\n".join(f"{bullet}{line}" for line in content.cautions)
    )
    paragraphs.append(f"**{resource(lang, 'heading_remedy')}:** {content.remedy}")
    paragraphs.append(content.lucky_line)
    paragraphs.append(
        f"**{resource(lang, 'heading_vedic')}**\n"
        + "\n".join(f"{bullet}{resource(lang, 'window_' + key)}: {windows[key]}" for key in WINDOW_KEYS)
        + f"\n{content.vedic_note}"
    )
    paragraphs.append(
        f"**{resource(lang, 'heading_quote')}:** {content.quote}\n"
        f"**{resource(lang, 'heading_affirmation')}:** {content.affirmation}\n"
        f"**{resource(lang, 'heading_mood')}:** {content.mood}\n"
        f"{resource(lang, 'water_line', count=content.water_glasses)}"
    )
    paragraphs.append(f"{content.policy_disclaimer}\n{content.thanks}")
    paragraphs.append(content.closing)
    return "\n\n".join(p.strip() for p in paragraphs if p and p.strip())


def daily_title(content: DailyContent) -> str:
    return resource(content.lang, "report_daily", sign=sign_name(content.sign, content.lang))
