"""Report documents: ordered (heading, paragraphs, bullets) sections for the PDF layer.

Builders here only assemble text; ``pdf_service.render_report_pdf`` lays it
out. All labels come from ``locale_resources``.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from astro_baba.composer import DailyContent, UserProfile, daily_title, vedic_windows_json
from astro_baba.ist_time import now_in_ist_text
from astro_baba.locale_resources import normalize_lang, resource, sign_name
from astro_baba.persona import persona_lines, remedy_addon_line
from astro_baba.polish import hindi_template_lines, translate_many
from astro_baba.vedic_tables import WINDOW_KEYS, gemstone_for_sign, mantra_for_sign
from astro_baba.yearly_roadmap import FamilyMember, MonthBlock, YearlyRoadmap

DEFAULT_APP_NAME = "Astro-Baba"
PARAGRAPH_SPLIT_RE = re.compile(r"\n{2,}")

REPORT_PACKAGES = ("daily", "weekly", "gemstone", "mantra", "yearly", "persona")

_MONTH_FIELDS = ("outlook", "career", "money", "relationships", "health", "learning", "travel", "opportunity")
_YEARLY_LISTS = (
    "good", "caution", "fun", "gains", "letgo", "health", "relationships", "opportunities", "remedies",
)


class BrandConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    app_name: str = DEFAULT_APP_NAME
    logo_base64: Optional[str] = None
    logo_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return (self.app_name or "").strip() or DEFAULT_APP_NAME


class ReportSection(BaseModel):
    heading: Optional[str] = None
    # 1 = chapter heading, 2 = sub heading
    level: int = 1
    paragraphs: list[str] = Field(default_factory=list)
    bullets: list[str] = Field(default_factory=list)
    rule_after: bool = False


class ReportDocument(BaseModel):
    kind: str
    title: str
    lang: str = "en"
    sign: Optional[str] = None
    meta_lines: list[str] = Field(default_factory=list)
    sections: list[ReportSection] = Field(default_factory=list)
    footer: str = ""
    brand: BrandConfig = Field(default_factory=BrandConfig)


def split_paragraphs(text: str) -> list[str]:
    return [p.strip() for p in PARAGRAPH_SPLIT_RE.split(text or "") if p.strip()]


def user_display_name(user: Optional[UserProfile], lang: str) -> str:
    name = (user.name or "").strip() if user else ""
    return name or resource(lang, "default_user")


def meta_lines(title: str, user: Optional[UserProfile], lang: str, instant: Optional[datetime] = None) -> list[str]:
    name = user_display_name(user, lang)
    phone = (user.phone or "").strip() if user else ""
    user_line = resource(lang, "meta_user", name=name)
    if phone:
        user_line = f"{user_line}  •  {phone}"
    return [
        resource(lang, "meta_report", title=title),
        user_line,
        resource(lang, "meta_generated", when=now_in_ist_text(lang, instant)),
    ]


def vedic_bullets(windows: dict[str, str], lang: str) -> list[str]:
    return [f"{resource(lang, 'window_' + key)}: {windows[key]}" for key in WINDOW_KEYS]


def _document(
    kind: str,
    title: str,
    lang: str,
    sections: list[ReportSection],
    footer_key: str,
    user: Optional[UserProfile],
    brand: Optional[BrandConfig],
    instant: Optional[datetime],
    sign: Optional[str] = None,
) -> ReportDocument:
    brand = brand or BrandConfig()
    return ReportDocument(
        kind=kind,
        title=title,
        lang=lang,
        sign=sign,
        meta_lines=meta_lines(title, user, lang, instant),
        sections=sections,
        footer=resource(lang, footer_key, app=brand.display_name, name=user_display_name(user, lang)),
        brand=brand,
    )


def _policy_section(lang: str) -> ReportSection:
    return ReportSection(
        heading=resource(lang, "heading_policy"),
        level=2,
        paragraphs=[f"{resource(lang, 'policy_disclaimer')}\n{resource(lang, 'policy_thanks')}"],
    )


# ------------------------------------------------------------------------------
# Daily / weekly
# ------------------------------------------------------------------------------
def build_daily_document(
    content: DailyContent,
    text: str,
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    lang = content.lang
    sections = [
        ReportSection(
            heading=resource(lang, "heading_vedic"),
            level=2,
            bullets=vedic_bullets(vedic_windows_json(content), lang),
            rule_after=True,
        ),
        ReportSection(
            heading=resource(lang, "heading_guidance", sign=sign_name(content.sign, lang)),
            paragraphs=split_paragraphs(text),
        ),
    ]
    return _document("daily", daily_title(content), lang, sections, "footer_daily", user, brand, instant, content.sign)


def build_weekly_document(
    days: list[tuple[DailyContent, str]],
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    """``days`` are ``(record, rendered_text)`` pairs, today first."""
    if not days:
        raise ValueError("weekly report needs at least one day")
    first = days[0][0]
    lang = first.lang
    sections = []
    for n, (content, text) in enumerate(days, start=1):
        heading = (
            resource(lang, "day_label_today", date=content.date)
            if n == 1
            else resource(lang, "day_label", n=n, date=content.date)
        )
        sections.append(
            ReportSection(
                heading=heading,
                bullets=vedic_bullets(vedic_windows_json(content), lang),
                paragraphs=split_paragraphs(text),
                rule_after=True,
            )
        )
    title = resource(lang, "report_weekly", sign=sign_name(first.sign, lang))
    return _document("weekly", title, lang, sections, "footer_weekly", user, brand, instant, first.sign)


# ------------------------------------------------------------------------------
# Gemstone / mantra
# ------------------------------------------------------------------------------
def build_gemstone_document(
    sign: str,
    lang: str = "en",
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    language = normalize_lang(lang)
    rec = gemstone_for_sign(sign, language)
    sign_label = sign_name(sign, language)
    bullets = [
        resource(language, "gemstone_primary", stone=rec["primary"]),
        resource(language, "gemstone_alternate", stone=rec["alternate"]),
        resource(language, "gemstone_wearing", day=rec["day"], metal=rec["metal"], finger=rec["finger"]),
    ]
    if rec["caveat"]:
        bullets.append(resource(language, "gemstone_caveat", text=rec["caveat"]))
    sections = [
        ReportSection(
            heading=resource(language, "heading_planet"),
            level=2,
            paragraphs=[resource(language, "planet_line", sign=sign_label, planet=rec["planetName"])],
        ),
        ReportSection(heading=resource(language, "heading_gemstone"), bullets=bullets, rule_after=True),
        _policy_section(language),
    ]
    title = resource(language, "report_gemstone", sign=sign_label)
    return _document("gemstone", title, language, sections, "footer_generic", user, brand, instant, rec["sign"])


def build_mantra_document(
    sign: str,
    lang: str = "en",
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    language = normalize_lang(lang)
    rec = mantra_for_sign(sign, language)
    sign_label = sign_name(sign, language)
    sections = [
        ReportSection(
            heading=resource(language, "heading_planet"),
            level=2,
            paragraphs=[resource(language, "planet_line", sign=sign_label, planet=rec["planetName"])],
        ),
        ReportSection(
            heading=resource(language, "heading_mantra"),
            bullets=[
                resource(language, "mantra_line", mantra=rec["mantra"]),
                resource(language, "mantra_count", count=rec["count"]),
                resource(language, "mantra_day", day=rec["day"]),
            ],
            rule_after=True,
        ),
        _policy_section(language),
    ]
    title = resource(language, "report_mantra", sign=sign_label)
    return _document("mantra", title, language, sections, "footer_generic", user, brand, instant, rec["sign"])


# ------------------------------------------------------------------------------
# Yearly / family
# ------------------------------------------------------------------------------
def _month_section(block: MonthBlock, lang: str) -> ReportSection:
    bullets = [f"{resource(lang, 'month_' + field)}: {getattr(block, field)}" for field in _MONTH_FIELDS]
    bullets.append(resource(lang, "month_protection", text=block.protection))
    bullets.append(resource(lang, "month_checkpoint", text=block.checkpoint))
    return ReportSection(
        heading=resource(lang, "month_heading", label=block.label, title=block.title),
        level=2,
        bullets=bullets,
    )


def roadmap_sections(roadmap: YearlyRoadmap) -> list[ReportSection]:
    lang = roadmap.lang
    overview = roadmap.overview
    sections = [
        ReportSection(
            heading=overview.header,
            paragraphs=[overview.zodiac, overview.vedic, overview.numerology, overview.summary],
        )
    ]
    for name in _YEARLY_LISTS:
        items = getattr(overview, name)
        if items:
            sections.append(ReportSection(heading=resource(lang, "yearly_" + name), level=2, bullets=list(items)))
    sections[-1].rule_after = True
    sections.append(ReportSection(heading=resource(lang, "heading_month_plan")))
    sections.extend(_month_section(block, lang) for block in roadmap.months)
    sections[-1].rule_after = True
    sections.append(
        ReportSection(
            heading=resource(lang, "heading_notes"),
            level=2,
            paragraphs=[roadmap.notes.vedic_note, roadmap.notes.closing],
        )
    )
    return sections


def build_yearly_document(
    roadmap: YearlyRoadmap,
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    title = resource(roadmap.lang, "report_yearly", sign=sign_name(roadmap.sign, roadmap.lang))
    return _document(
        "yearly", title, roadmap.lang, roadmap_sections(roadmap), "footer_generic", user, brand, instant, roadmap.sign
    )


def build_family_document(
    members: list[FamilyMember],
    lang: str = "en",
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
) -> ReportDocument:
    language = normalize_lang(lang)
    sections: list[ReportSection] = []
    for member in members:
        roadmap = member.roadmap
        overview = roadmap.overview
        sections.append(
            ReportSection(
                heading=resource(language, "member_heading", name=member.name, sign=sign_name(member.sign, language)),
                paragraphs=[overview.zodiac, overview.summary],
            )
        )
        sections.append(
            ReportSection(heading=resource(language, "yearly_good"), level=2, bullets=list(overview.good))
        )
        sections.append(
            ReportSection(heading=resource(language, "yearly_caution"), level=2, bullets=list(overview.caution))
        )
        sections.extend(_month_section(block, language) for block in roadmap.months)
        sections[-1].rule_after = True
    sections.append(_policy_section(language))
    title = resource(language, "report_family")
    return _document("family", title, language, sections, "footer_generic", user, brand, instant)


# ------------------------------------------------------------------------------
# Persona package
# ------------------------------------------------------------------------------
async def build_persona_document(
    content: DailyContent,
    text: str,
    persona: Any,
    user: Optional[UserProfile] = None,
    brand: Optional[BrandConfig] = None,
    instant: Optional[datetime] = None,
    client: Optional[AsyncOpenAI] = None,
    request_id: Optional[str] = None,
) -> ReportDocument:
    """Daily reading plus persona-specific focus lines.

    The persona pools are English only; Hindi requests translate them in one
    batch through the polish adapter, falling back to the Hindi phrase templates.
    """
    lang = content.lang
    picks = persona_lines(persona, content.sign, seed_key=f"{content.date}|{content.sign}")
    opportunities = list(picks["opportunities"])
    cautions = list(picks["cautions"])
    addons = [remedy_addon_line(addon, "en") for addon in picks["remedy_addons"]]
    if lang == "hi":
        english = opportunities + cautions
        translated = await translate_many(english, "hi", client, request_id=request_id)
        if translated == english:
            translated = hindi_template_lines(english)
        opportunities, cautions = translated[: len(opportunities)], translated[len(opportunities):]
        addons = [remedy_addon_line(addon, "hi") for addon in picks["remedy_addons"]]

    sign_label = sign_name(content.sign, lang)
    sections = [
        ReportSection(
            heading=resource(lang, "heading_vedic"),
            level=2,
            bullets=vedic_bullets(vedic_windows_json(content), lang),
            rule_after=True,
        ),
        ReportSection(heading=resource(lang, "heading_persona")),
        ReportSection(heading=resource(lang, "heading_opportunities"), level=2, bullets=opportunities),
        ReportSection(heading=resource(lang, "heading_cautions"), level=2, bullets=cautions),
        ReportSection(heading=resource(lang, "heading_remedy"), level=2, bullets=addons, rule_after=True),
        ReportSection(
            heading=resource(lang, "heading_guidance", sign=sign_label),
            paragraphs=split_paragraphs(text),
        ),
    ]
    title = resource(lang, "report_persona", sign=sign_label)
    return _document("persona", title, lang, sections, "footer_generic", user, brand, instant, content.sign)
