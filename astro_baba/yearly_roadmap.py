"""Thirteen-month roadmap (phase overview + month blocks) and the family bundle."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from astro_baba.ist_time import month_label, to_ist
from astro_baba.locale_resources import month_name, normalize_lang, resource, sign_name
from astro_baba.persona import normalize_persona
from astro_baba.seeded import hash_code
from astro_baba.vedic_tables import PLANETS, ruling_planet

MONTH_COUNT = 13

PROTECTION = {
    "ganesha": "Om Gam Ganapataye Namah",
    "shiva": "Om Namah Shivaya",
    "lakshmi": "Om Shreem Mahalakshmiyei Namah",
    "narayan": "Om Namo Narayanaya",
    "saraswati": "Om Aim Saraswatyai Namah",
}

TONES = [
    "Clean Start, Gentle Pace",
    "Momentum with Clarity",
    "Health & Discipline Reset",
    "Change & Movement",
    "Home & Harmony",
    "Refine & Rebuild Routines",
    "Open Doors & Outreach",
    "Care & Maintenance",
    "Study & Depth",
    "Negotiation & Resources",
    "Wrap & Release",
    "Fresh Seeds",
]

TONES_HI = {
    "Clean Start, Gentle Pace": "स्वच्छ आरंभ, सौम्य गति",
    "Momentum with Clarity": "स्पष्टता के साथ गति",
    "Health & Discipline Reset": "स्वास्थ्य और अनुशासन का पुनर्संयोजन",
    "Change & Movement": "परिवर्तन और गतिशीलता",
    "Home & Harmony": "घर और सामंजस्य",
    "Refine & Rebuild Routines": "दिनचर्या को निखारें और फिर से गढ़ें",
    "Open Doors & Outreach": "खुले द्वार और संपर्क",
    "Care & Maintenance": "देखभाल और रख-रखाव",
    "Study & Depth": "अध्ययन और गहराई",
    "Negotiation & Resources": "वार्ता और संसाधन",
    "Wrap & Release": "समेटें और छोड़ें",
    "Fresh Seeds": "नए बीज",
}

# Later rules override earlier ones.
_PROTECTION_RULES = [
    (re.compile(r"Change|Open Doors|Movement", re.I), "ganesha"),
    (re.compile(r"Harmony|Resources", re.I), "lakshmi"),
    (re.compile(r"Study|Clarity", re.I), "saraswati"),
    (re.compile(r"Depth|Narayan", re.I), "narayan"),
]

_HEALTH_RULES = [
    (re.compile(r"Health|Discipline|Refine|Reset", re.I), "discipline"),
    (re.compile(r"Change|Movement|Open Doors", re.I), "movement"),
    (re.compile(r"Home|Harmony|Care", re.I), "home"),
]

HEALTH_TEXT = {
    "en": {
        "discipline": (
            "Watch sleep and neck/eye strain; prefer warm water, soups/khichdi; "
            "add greens/lentils; limit late caffeine."
        ),
        "movement": (
            "Travel/stress can tighten shoulders; hydrate; avoid heavy roadside food; carry nuts/fruit."
        ),
        "home": "Festival/comfort foods: keep portions moderate; evening walk; warm water after meals.",
        "default": "Keep a steady sleep window; 20-minute walk; prefer home-cooked over deep fried.",
    },
    "hi": {
        "discipline": (
            "नींद और गर्दन/आँखों के तनाव पर ध्यान दें; गुनगुना पानी, सूप/खिचड़ी लें; "
            "हरी सब्ज़ियाँ/दालें जोड़ें; देर शाम कैफ़ीन सीमित रखें।"
        ),
        "movement": (
            "यात्रा/तनाव से कंधे जकड़ सकते हैं; पानी पीते रहें; भारी सड़क-किनारे भोजन से बचें; मेवे/फल साथ रखें।"
        ),
        "home": "त्योहार/आराम के व्यंजन: मात्रा संतुलित रखें; शाम को टहलें; भोजन के बाद गुनगुना पानी।",
        "default": "नींद का नियमित समय रखें; 20 मिनट टहलें; तले भोजन की जगह घर का बना भोजन चुनें।",
    },
}

PERSONA_HINTS = {
    "en": {
        "studies": {
            "student": "Focus hours earlier in the day work best.",
            "homemaker": "Learn in short, consistent sessions amid home flow.",
            "self_employed": "Micro-learning that ties directly to revenue.",
            "job_working": "Skill-up aligned to current role.",
            "not_working": "Gentle, curiosity-led learning.",
        },
        "money": {
            "student": "Budget tools, course fees, and small subscriptions.",
            "homemaker": "Household budgeting and mindful shopping.",
            "self_employed": "Cashflow buffers, invoicing clarity.",
            "job_working": "Salary add-ons, subscriptions, certifications.",
            "not_working": "Keep it simple; tiny buffer helps.",
        },
        "travel": {
            "student": "Keep documents handy and rest well.",
            "homemaker": "Plan around family routines.",
            "self_employed": "Combine errands to save time/money.",
            "job_working": "Purposeful trips with buffers.",
            "not_working": "Short, refreshing visits are enough.",
        },
    },
    "hi": {
        "studies": {
            "student": "दिन के शुरुआती घंटों में पढ़ाई सबसे अच्छी रहती है।",
            "homemaker": "घर की दिनचर्या के बीच छोटे, नियमित सत्रों में सीखें।",
            "self_employed": "ऐसा सूक्ष्म अध्ययन जो सीधे आय से जुड़ा हो।",
            "job_working": "वर्तमान भूमिका के अनुरूप कौशल बढ़ाएँ।",
            "not_working": "सौम्य, जिज्ञासा से प्रेरित अध्ययन।",
        },
        "money": {
            "student": "बजट टूल, कोर्स फ़ीस और छोटी सदस्यताएँ।",
            "homemaker": "घरेलू बजट और सोच-समझकर ख़रीदारी।",
            "self_employed": "नकदी का सुरक्षित भंडार, बिलिंग में स्पष्टता।",
            "job_working": "वेतन के अतिरिक्त लाभ, सदस्यताएँ, प्रमाणपत्र।",
            "not_working": "सरल रखें; छोटा सा बचत-भंडार मदद करता है।",
        },
        "travel": {
            "student": "दस्तावेज़ साथ रखें और भरपूर आराम करें।",
            "homemaker": "परिवार की दिनचर्या के अनुसार योजना बनाएँ।",
            "self_employed": "समय/धन बचाने के लिए काम एक साथ निपटाएँ।",
            "job_working": "उद्देश्यपूर्ण यात्राएँ, थोड़े अतिरिक्त समय के साथ।",
            "not_working": "छोटी, ताज़गी भरी यात्राएँ पर्याप्त हैं।",
        },
    },
}

MONTH_TEXT = {
    "en": {
        "outlook": "Cooperate, simplify, and begin each day with one meaningful task.",
        "career": "Present clean drafts; ask for clarity; polish systems before expanding.",
        "money": "Keep budgets simple; avoid impulse tools. {hint}",
        "relationships": "Short, honest, kind check-ins; gentle tone in messages.",
        "learning": "Pick one micro-module and repeat. {hint}",
        "travel": "Short/local is fine; keep buffers; documents ready. {hint}",
        "opportunity": "A small collaboration or helpful contact may appear.",
        "checkpoint": "What tiny action proves progress this week?",
    },
    "hi": {
        "outlook": "सहयोग करें, चीज़ें सरल रखें और हर दिन की शुरुआत एक सार्थक कार्य से करें।",
        "career": "साफ़ मसौदे प्रस्तुत करें; स्पष्टता माँगें; विस्तार से पहले व्यवस्थाएँ निखारें।",
        "money": "बजट सरल रखें; आवेग में उपकरण न ख़रीदें। {hint}",
        "relationships": "छोटी, ईमानदार, दयालु बातचीत; संदेशों में सौम्य स्वर।",
        "learning": "एक छोटा मॉड्यूल चुनें और दोहराएँ। {hint}",
        "travel": "छोटी/स्थानीय यात्रा ठीक है; अतिरिक्त समय रखें; दस्तावेज़ तैयार रखें। {hint}",
        "opportunity": "कोई छोटा सहयोग या मददगार संपर्क सामने आ सकता है।",
        "checkpoint": "इस सप्ताह कौन-सा छोटा कदम प्रगति साबित करता है?",
    },
}

PERSONA_FOCUS = {
    "en": {
        "self_employed": "independent work and steady systems",
        "job_working": "responsibilities and quiet, compounding wins",
        "homemaker": "care, coordination, and peaceful spaces",
        "student": "study rhythm and simple presentations",
        "not_working": "gentle resets and hopeful steps",
    },
    "hi": {
        "self_employed": "स्वतंत्र कार्य और स्थिर व्यवस्थाओं",
        "job_working": "ज़िम्मेदारियों और शांत, बढ़ती सफलताओं",
        "homemaker": "देखभाल, तालमेल और शांत वातावरण",
        "student": "अध्ययन की लय और सरल प्रस्तुतियों",
        "not_working": "सौम्य नई शुरुआत और आशा भरे कदमों",
    },
}

SIGN_TRAITS = {
    "en": {
        "aries": "pioneering, energetic, direct; learns fast when action is paired with structure",
        "taurus": "steady, sensual, loyal; thrives when comfort is balanced with fresh goals",
        "gemini": "curious, quick, social; shines when ideas are anchored to one channel",
        "cancer": "caring, intuitive, protective; grows when feelings meet clear boundaries",
        "leo": "warm, expressive, generous; leads best when pride is paired with listening",
        "virgo": "precise, helpful, practical; flourishes when detail serves a bigger picture",
        "libra": "fair, graceful, diplomatic; progresses when decisions get a deadline",
        "scorpio": "intense, loyal, strategic; transforms when depth is paired with openness",
        "sagittarius": "optimistic, free, philosophical; advances when vision meets follow-through",
        "capricorn": "disciplined, ambitious, patient; rises when rest is scheduled like work",
        "aquarius": "original, humane, independent; innovates when ideas find a community",
        "pisces": "imaginative, compassionate, fluid; steadies when dreams get a daily routine",
    },
    "hi": {
        "aries": "अग्रणी, ऊर्जावान, स्पष्टवादी; जब कर्म के साथ ढांचा जुड़ता है तो तेज़ी से सीखते हैं",
        "taurus": "स्थिर, सौंदर्यप्रिय, निष्ठावान; आराम और नए लक्ष्यों के संतुलन से फलते-फूलते हैं",
        "gemini": "जिज्ञासु, फुर्तीले, मिलनसार; विचारों को एक दिशा मिलने पर चमकते हैं",
        "cancer": "संवेदनशील, अंतर्ज्ञानी, संरक्षक; भावनाओं को स्पष्ट सीमाएँ मिलने पर बढ़ते हैं",
        "leo": "स्नेही, अभिव्यक्तिशील, उदार; सुनने की आदत के साथ सबसे अच्छा नेतृत्व करते हैं",
        "virgo": "सटीक, सहायक, व्यावहारिक; जब बारीकियाँ बड़े लक्ष्य की सेवा करती हैं तब खिलते हैं",
        "libra": "न्यायप्रिय, सौम्य, कूटनीतिक; निर्णयों को समयसीमा मिलने पर आगे बढ़ते हैं",
        "scorpio": "गहन, निष्ठावान, रणनीतिक; गहराई के साथ खुलापन आने पर रूपांतरित होते हैं",
        "sagittarius": "आशावादी, स्वतंत्र, दार्शनिक; दृष्टि को अमल मिलने पर आगे बढ़ते हैं",
        "capricorn": "अनुशासित, महत्वाकांक्षी, धैर्यवान; विश्राम को भी काम की तरह तय करने पर उठते हैं",
        "aquarius": "मौलिक, मानवीय, स्वतंत्र; विचारों को समुदाय मिलने पर नवाचार करते हैं",
        "pisces": "कल्पनाशील, करुणामय, सहज; सपनों को दैनिक दिनचर्या मिलने पर स्थिर होते हैं",
    },
}

PLANET_FOCUS = {
    "en": {
        "sun": "visibility and confidence",
        "moon": "emotional steadiness",
        "mars": "initiative",
        "mercury": "communication and quick learning",
        "jupiter": "learning and wise counsel",
        "venus": "harmony and creative comfort",
        "saturn": "discipline and long-range patience",
    },
    "hi": {
        "sun": "प्रतिष्ठा और आत्मविश्वास",
        "moon": "भावनात्मक स्थिरता",
        "mars": "पहल",
        "mercury": "संवाद और त्वरित सीख",
        "jupiter": "ज्ञान और सत्परामर्श",
        "venus": "सामंजस्य और रचनात्मक सुख",
        "saturn": "अनुशासन और दीर्घकालिक धैर्य",
    },
}

# Month references below are offsets from the first roadmap month.
OVERVIEW_TEXT = {
    "en": {
        "zodiac": "{sign}: {traits}.",
        "vedic": "{planet} supports {focus}; periodic “slow-and-review” phases ask for patience and tidy routines.",
        "numerology": "A communicative, creative arc that favors consistent practice and clear presentations.",
        "summary": (
            "A communicative, creative year with periodic structure sprints and two change waves in the "
            "middle and late winter. Family/friends warmth peaks around year end and early spring. Money "
            "matters respond to calm planning mid-year, tailored for {persona}."
        ),
        "good": [
            "{m1}, {m11}: new starts feel smooth; small launches shine.",
            "{m9}: resources window — good for applications, budgets, or negotiations.",
            "{m4}, {m7}: harmony at home; supportive environment.",
        ],
        "caution": [
            "{m3}, {m6}: movement & change — verify forms/travel; avoid over-commitment.",
            "{m8}: deep work beats expansion; keep focus narrow.",
            "{m10}: finish and let go before fresh starts.",
        ],
        "fun": ["{m3}, {m6}: short trips and meets — keep plans flexible."],
        "gains": [
            "{m9}: present calmly; clear schedules and numbers.",
            "{m1}, {m6}: quick follow-ups and small collaborations click.",
        ],
        "letgo": ["{m10}: declutter notes/devices; donate old material; archive neatly."],
        "health": ["{m2}, {m5}: sleep rhythm, hydration, gentle strength/walks; avoid extremes."],
        "relationships": ["{m4}, {m7}: short, honest check-ins; small gestures matter."],
        "opportunities": ["Mentor guidance/creative collabs in {m1}; resource clarity in {m9}."],
        "remedies": [
            "Launch: start in a favorable midday window; avoid inauspicious periods.",
            "Change months: morning Protection — “{ganesha}”.",
            "Closure: dusk calm — “{shiva}” + one-line gratitude.",
        ],
    },
    "hi": {
        "zodiac": "{sign}: {traits}।",
        "vedic": "{planet} {focus} को बल देते हैं; समय-समय पर “धीमे चलें और समीक्षा करें” वाले चरण धैर्य और व्यवस्थित दिनचर्या माँगते हैं।",
        "numerology": "संवादपूर्ण, रचनात्मक प्रवाह जो नियमित अभ्यास और स्पष्ट प्रस्तुति को बढ़ावा देता है।",
        "summary": (
            "संवाद और रचनात्मकता से भरा वर्ष, जिसमें समय-समय पर व्यवस्था के दौर और मध्य तथा देर सर्दियों में "
            "परिवर्तन की दो लहरें आएँगी। परिवार/मित्रों की आत्मीयता वर्षांत और वसंत की शुरुआत में चरम पर रहेगी। "
            "वर्ष के मध्य में शांत योजना से धन संबंधी मामले सुधरेंगे, {persona} पर विशेष ध्यान के साथ।"
        ),
        "good": [
            "{m1}, {m11}: नई शुरुआत सहज लगेगी; छोटे आरंभ चमकेंगे।",
            "{m9}: संसाधनों का समय — आवेदन, बजट या वार्ता के लिए अच्छा।",
            "{m4}, {m7}: घर में सामंजस्य; सहयोगी वातावरण।",
        ],
        "caution": [
            "{m3}, {m6}: गतिशीलता और परिवर्तन — फ़ॉर्म/यात्रा जाँचें; अति-प्रतिबद्धता से बचें।",
            "{m8}: विस्तार से बेहतर गहन कार्य; फोकस सीमित रखें।",
            "{m10}: नई शुरुआत से पहले पुराना पूरा करें और छोड़ें।",
        ],
        "fun": ["{m3}, {m6}: छोटी यात्राएँ और मुलाक़ातें — योजनाएँ लचीली रखें।"],
        "gains": [
            "{m9}: शांत भाव से प्रस्तुत करें; समय-सारिणी और आँकड़े स्पष्ट रखें।",
            "{m1}, {m6}: त्वरित फ़ॉलो-अप और छोटे सहयोग सफल होंगे।",
        ],
        "letgo": ["{m10}: नोट्स/उपकरण व्यवस्थित करें; पुरानी सामग्री दान करें; सलीके से संग्रहित करें।"],
        "health": ["{m2}, {m5}: नींद की लय, पानी, हल्का व्यायाम/टहलना; अति से बचें।"],
        "relationships": ["{m4}, {m7}: छोटी, ईमानदार बातचीत; छोटे स्नेह-संकेत मायने रखते हैं।"],
        "opportunities": ["{m1} में मार्गदर्शक का साथ/रचनात्मक सहयोग; {m9} में संसाधनों की स्पष्टता।"],
        "remedies": [
            "आरंभ: दोपहर के शुभ समय में शुरुआत करें; अशुभ काल से बचें।",
            "परिवर्तन वाले महीने: सुबह रक्षा मंत्र — “{ganesha}”।",
            "समापन: संध्या में शांति — “{shiva}” + एक पंक्ति का आभार।",
        ],
    },
}

_OVERVIEW_LISTS = (
    "good", "caution", "fun", "gains", "letgo", "health", "relationships", "opportunities", "remedies",
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class YearlyOverview(_CamelModel):
    header: str
    zodiac: str
    vedic: str
    numerology: str
    summary: str
    good: list[str] = Field(default_factory=list)
    caution: list[str] = Field(default_factory=list)
    fun: list[str] = Field(default_factory=list)
    gains: list[str] = Field(default_factory=list)
    letgo: list[str] = Field(default_factory=list)
    health: list[str] = Field(default_factory=list)
    relationships: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    remedies: list[str] = Field(default_factory=list)


class MonthBlock(_CamelModel):
    key: str
    label: str
    title: str
    outlook: str
    career: str
    money: str
    relationships: str
    health: str
    learning: str
    travel: str
    opportunity: str
    protection: str
    checkpoint: str


class YearlyNotes(_CamelModel):
    closing: str
    vedic_note: str


class YearlyRoadmap(_CamelModel):
    sign: str
    lang: str
    persona: str
    start: str
    overview: YearlyOverview
    months: list[MonthBlock]
    notes: YearlyNotes

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class FamilyMember(_CamelModel):
    name: str
    sign: str
    persona: str
    roadmap: YearlyRoadmap


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    total = year * 12 + (month - 1) + offset
    return total // 12, total % 12 + 1


def _short_month(year: int, month: int, lang: str) -> str:
    name = month_name(month, lang)
    return f"{name[:3] if lang == 'en' else name} {year}"


def _display_label(year: int, month: int, lang: str) -> str:
    if lang == "en":
        return month_label(year, month)
    return f"{month_name(month, lang)} {year}"


def protection_for_tone(tone: str) -> str:
    chosen = "shiva"
    for pattern, deity in _PROTECTION_RULES:
        if pattern.search(tone):
            chosen = deity
    return PROTECTION[chosen]


def health_for_tone(tone: str, lang: str = "en") -> str:
    texts = HEALTH_TEXT[normalize_lang(lang)]
    for pattern, bucket in _HEALTH_RULES:
        if pattern.search(tone):
            return texts[bucket]
    return texts["default"]


def persona_hint(persona: str, bucket: str, lang: str = "en") -> str:
    hints = PERSONA_HINTS[normalize_lang(lang)].get(bucket, {})
    return hints.get(persona or "not_working", "")


def tone_for_month(sign: str, persona: str, label: str) -> str:
    return TONES[hash_code(f"{sign}|{persona}|{label}") % len(TONES)]


def build_month(sign: str, persona: str, year: int, month: int, lang: str = "en") -> MonthBlock:
    language = normalize_lang(lang)
    key = month_label(year, month)
    tone = tone_for_month(sign, persona, key)
    text = MONTH_TEXT[language]

    def with_hint(field: str, bucket: str) -> str:
        return text[field].format(hint=persona_hint(persona, bucket, language)).strip()

    return MonthBlock(
        key=key,
        label=_display_label(year, month, language),
        title=TONES_HI.get(tone, tone) if language == "hi" else tone,
        outlook=text["outlook"],
        career=text["career"],
        money=with_hint("money", "money"),
        relationships=text["relationships"],
        health=health_for_tone(tone, language),
        learning=with_hint("learning", "studies"),
        travel=with_hint("travel", "travel"),
        opportunity=text["opportunity"],
        protection=protection_for_tone(tone),
        checkpoint=text["checkpoint"],
    )


def build_overview(sign: str, persona: str, year: int, month: int, lang: str = "en") -> YearlyOverview:
    language = normalize_lang(lang)
    text = OVERVIEW_TEXT[language]
    planet = ruling_planet(sign)
    fmt = {
        f"m{offset}": _short_month(*_shift_month(year, month, offset), language)
        for offset in range(MONTH_COUNT)
    }
    fmt.update(PROTECTION)
    lists = {name: [line.format(**fmt) for line in text[name]] for name in _OVERVIEW_LISTS}
    return YearlyOverview(
        header=resource(language, "heading_overview"),
        zodiac=text["zodiac"].format(
            sign=sign_name(sign, language),
            traits=SIGN_TRAITS[language].get(sign, SIGN_TRAITS[language]["aries"]),
        ),
        vedic=text["vedic"].format(
            planet=PLANETS[planet][language]["name"],
            focus=PLANET_FOCUS[language][planet],
        ),
        numerology=text["numerology"],
        summary=text["summary"].format(persona=PERSONA_FOCUS[language][persona]),
        **lists,
    )


def build_yearly_roadmap(
    sign: str = "aries",
    lang: str = "en",
    persona: Any = None,
    start: Optional[datetime] = None,
) -> YearlyRoadmap:
    """Overview plus thirteen month blocks from the 1st of the current IST month.

    Tone, protection mantra and health line of each month are fixed by
    ``(sign, persona, "MON YYYY")``, so the roadmap is reproducible.
    """
    normalized_sign = str(sign or "aries").strip().lower()
    language = normalize_lang(lang)
    bucket = normalize_persona(persona)
    ist = to_ist(start)
    year, month = ist.year, ist.month

    months = [
        build_month(normalized_sign, bucket, *_shift_month(year, month, offset), language)
        for offset in range(MONTH_COUNT)
    ]
    return YearlyRoadmap(
        sign=normalized_sign,
        lang=language,
        persona=bucket,
        start=f"{year:04d}-{month:02d}-01",
        overview=build_overview(normalized_sign, bucket, year, month, language),
        months=months,
        notes=YearlyNotes(
            closing=resource(language, "closing"),
            vedic_note=resource(language, "vedic_note"),
        ),
    )


def build_family_sections(
    members: list[dict[str, Any]],
    lang: str = "en",
    start: Optional[datetime] = None,
) -> list[FamilyMember]:
    """One roadmap per household member (``{name, sign, persona|occupation}``)."""
    sections = []
    for member in members:
        sign = str(member.get("sign") or "aries").strip().lower()
        roadmap = build_yearly_roadmap(sign, lang, member.get("persona") or member.get("occupation"), start)
        sections.append(
            FamilyMember(
                name=str(member.get("name") or resource(lang, "default_user")).strip(),
                sign=sign,
                persona=roadmap.persona,
                roadmap=roadmap,
            )
        )
    return sections
