"""User-facing strings keyed by language.

Every label the composer, the roadmap builder and the PDF layer print comes
from ``RESOURCES[lang][key]``. Adding a language means adding one block here.
"""

from __future__ import annotations

from typing import Any

DEFAULT_LANG = "en"
SUPPORTED_LANGS = ("en", "hi")

RESOURCES: dict[str, dict[str, Any]] = {
    "en": {
        "greeting": "Namaste ji,",
        "deity_pre": "Today being ",
        "deity_post": " day.",
        "lucky_line": (
            "Lucky color: {color}   Lucky number: {number}. "
            "Use Abhijit Muhurat for key actions; avoid Rahu Kaal for fresh launches."
        ),
        "closing": (
            "Have a blessed day!! We wish you a very cheerful, prosperous and wonderful "
            "day ahead with lots of blessings..."
        ),
        "vedic_note": (
            "Note: Vedic windows use a 6:00 AM sunrise and 12-hour day approximation "
            "— actual times vary by location/season."
        ),
        "policy_disclaimer": (
            "Your report offers reflective astrological insights and beliefs. "
            "Treat it as supportive guidance, not an absolute prediction."
        ),
        "policy_thanks": "Thank you — Team Astro-Baba.com",
        "footer_brand": "Astro-Baba.com",
        "birthday": "Birthday blessings{name}! Wishing you health, prosperity, and grace.",
        "birthday_name_sep": ", ",
        "special_day_title": "Special Day",
        "water_line": "Hydration goal: {count} glasses of water.",
        "heading_opportunities": "Opportunities",
        "heading_cautions": "Cautions",
        "heading_remedy": "Remedy",
        "heading_lucky": "Lucky Color & Number",
        "heading_vedic": "Vedic Timings (IST)",
        "heading_deity": "Day Deity",
        "heading_special": "Special Day",
        "heading_quote": "Thought for the Day",
        "heading_affirmation": "Affirmation",
        "heading_mood": "Mood",
        "heading_guidance": "Today’s Guidance for {sign}",
        "heading_policy": "Please Note",
        "heading_gemstone": "Gemstone Guidance",
        "heading_mantra": "Mantra Practice",
        "heading_planet": "Ruling Planet",
        "heading_overview": "Holistic Overview",
        "heading_month_plan": "Month-by-Month Roadmap",
        "heading_notes": "Notes",
        "heading_persona": "Focus for You",
        "heading_narrative": "Detailed Reading",
        "window_rahuKaal": "Rahu Kaal",
        "window_yamaganda": "Yamaganda",
        "window_gulikaKaal": "Gulika Kaal",
        "window_abhijitMuhurat": "Abhijit Muhurat",
        "report_daily": "Daily Horoscope ({sign})",
        "report_weekly": "Weekly Horoscope ({sign})",
        "report_gemstone": "Gemstone Report ({sign})",
        "report_mantra": "Mantra Report ({sign})",
        "report_yearly": "Yearly Roadmap ({sign})",
        "report_family": "Family Yearly Roadmap",
        "report_persona": "Personal Focus Report ({sign})",
        "meta_report": "Report: {title}",
        "meta_user": "User: {name}",
        "meta_generated": "Generated: {when} (IST)",
        "default_user": "Friend",
        "footer_daily": "{app} • Daily guidance for {name}",
        "footer_weekly": "{app} • Weekly guidance for {name}",
        "footer_generic": "{app} • Guidance for {name}",
        "day_label_today": "Day 1 (Today): {date}",
        "day_label": "Day {n}: {date}",
        "gemstone_primary": "Primary gemstone: {stone}",
        "gemstone_alternate": "Alternate: {stone}",
        "gemstone_wearing": "Wear on {day} morning after a short prayer; metal: {metal}; finger: {finger}.",
        "mantra_line": "Seed mantra: {mantra}",
        "mantra_count": "Recite {count}× daily, ideally at sunrise, for 40 days.",
        "planet_line": "{sign} is ruled by {planet}.",
        "month_protection": "Protection: {text}",
        "month_checkpoint": "Checkpoint: {text}",
        "yearly_good": "Favourable Windows",
        "yearly_caution": "Handle with Care",
        "yearly_fun": "Fun & Travel",
        "yearly_gains": "Gains",
        "yearly_letgo": "Let Go",
        "yearly_health": "Health",
        "yearly_relationships": "Relationships",
        "yearly_opportunities": "Opportunities",
        "yearly_remedies": "Remedies",
        "month_outlook": "Outlook",
        "month_career": "Career",
        "month_money": "Money",
        "month_relationships": "Relationships",
        "month_health": "Health & Diet",
        "month_learning": "Learning",
        "month_travel": "Travel",
        "month_opportunity": "Opportunity",
        "month_heading": "{label}: {title}",
        "gemstone_caveat": "Caution: {text}",
        "mantra_day": "Best begun on a {day}.",
        "member_heading": "{name} ({sign})",
    },
    "hi": {
        "greeting": "नमस्ते जी,",
        "deity_pre": "आज ",
        "deity_post": " दिवस है।",
        "lucky_line": (
            "भाग्यशाली रंग: {color}   भाग्यशाली अंक: {number}. "
            "महत्वपूर्ण कार्यों हेतु अभिजीत मुहूर्त का उपयोग करें; नई शुरुआत के लिए राहु काल से बचें।"
        ),
        "closing": (
            "आपका दिन मंगलमय हो!! हम आपको एक बहुत ही प्रसन्न, समृद्ध और शानदार दिन की "
            "शुभकामनाएं देते हैं, ढेर सारी कृपाओं के साथ…"
        ),
        "vedic_note": (
            "सूचना: वैदिक समय 6:00 AM सूर्योदय और 12-घंटे के दिन के अनुमान पर आधारित हैं "
            "— वास्तविक समय स्थान/ऋतु के अनुसार बदलता है।"
        ),
        "policy_disclaimer": (
            "यह रिपोर्ट चिंतनशील ज्योतिषीय अंतर्दृष्टि और मान्यताएँ प्रस्तुत करती है। "
            "इसे सहायक मार्गदर्शन समझें, अंतिम भविष्यवाणी नहीं।"
        ),
        "policy_thanks": "धन्यवाद — टीम Astro-Baba.com",
        "footer_brand": "Astro-Baba.com",
        "birthday": "जन्मदिन की हार्दिक शुभकामनाएँ{name}! ईश्वर आपको स्वास्थ्य, समृद्धि और सौभाग्य दे।",
        "birthday_name_sep": " ",
        "special_day_title": "विशेष दिवस",
        "water_line": "जल लक्ष्य: {count} गिलास पानी।",
        "heading_opportunities": "अवसर",
        "heading_cautions": "सावधानियाँ",
        "heading_remedy": "उपाय",
        "heading_lucky": "भाग्यशाली रंग और अंक",
        "heading_vedic": "वैदिक समय (IST)",
        "heading_deity": "दिवस देवता",
        "heading_special": "विशेष दिवस",
        "heading_quote": "आज का विचार",
        "heading_affirmation": "संकल्प वाक्य",
        "heading_mood": "मनोदशा",
        "heading_guidance": "{sign} के लिए आज का मार्गदर्शन",
        "heading_policy": "कृपया ध्यान दें",
        "heading_gemstone": "रत्न मार्गदर्शन",
        "heading_mantra": "मंत्र साधना",
        "heading_planet": "स्वामी ग्रह",
        "heading_overview": "समग्र अवलोकन",
        "heading_month_plan": "मासिक रूपरेखा",
        "heading_notes": "टिप्पणियाँ",
        "heading_persona": "आपके लिए फोकस",
        "heading_narrative": "विस्तृत विवेचन",
        "window_rahuKaal": "राहु काल",
        "window_yamaganda": "यमगंड",
        "window_gulikaKaal": "गुलिक काल",
        "window_abhijitMuhurat": "अभिजीत मुहूर्त",
        "report_daily": "दैनिक राशिफल ({sign})",
        "report_weekly": "साप्ताहिक राशिफल ({sign})",
        "report_gemstone": "रत्न रिपोर्ट ({sign})",
        "report_mantra": "मंत्र रिपोर्ट ({sign})",
        "report_yearly": "वार्षिक रूपरेखा ({sign})",
        "report_family": "पारिवारिक वार्षिक रूपरेखा",
        "report_persona": "व्यक्तिगत फोकस रिपोर्ट ({sign})",
        "meta_report": "रिपोर्ट: {title}",
        "meta_user": "उपयोगकर्ता: {name}",
        "meta_generated": "निर्मित: {when} (IST)",
        "default_user": "मित्र",
        "footer_daily": "{app} • {name} के लिए दैनिक मार्गदर्शन",
        "footer_weekly": "{app} • {name} के लिए साप्ताहिक मार्गदर्शन",
        "footer_generic": "{app} • {name} के लिए मार्गदर्शन",
        "day_label_today": "दिन 1 (आज): {date}",
        "day_label": "दिन {n}: {date}",
        "gemstone_primary": "मुख्य रत्न: {stone}",
        "gemstone_alternate": "वैकल्पिक: {stone}",
        "gemstone_wearing": "{day} की सुबह छोटी प्रार्थना के बाद धारण करें; धातु: {metal}; उंगली: {finger}।",
        "mantra_line": "बीज मंत्र: {mantra}",
        "mantra_count": "प्रतिदिन {count} बार, संभव हो तो सूर्योदय पर, 40 दिनों तक जप करें।",
        "planet_line": "{sign} राशि के स्वामी {planet} हैं।",
        "month_protection": "रक्षा: {text}",
        "month_checkpoint": "जाँच-बिंदु: {text}",
        "yearly_good": "अनुकूल समय",
        "yearly_caution": "सावधानी से",
        "yearly_fun": "मनोरंजन और यात्रा",
        "yearly_gains": "लाभ",
        "yearly_letgo": "छोड़ें",
        "yearly_health": "स्वास्थ्य",
        "yearly_relationships": "संबंध",
        "yearly_opportunities": "अवसर",
        "yearly_remedies": "उपाय",
        "month_outlook": "दृष्टिकोण",
        "month_career": "करियर",
        "month_money": "धन",
        "month_relationships": "संबंध",
        "month_health": "स्वास्थ्य और आहार",
        "month_learning": "सीखना",
        "month_travel": "यात्रा",
        "month_opportunity": "अवसर",
        "month_heading": "{label}: {title}",
        "gemstone_caveat": "सावधानी: {text}",
        "mantra_day": "{day} से आरंभ करना श्रेष्ठ है।",
        "member_heading": "{name} ({sign})",
    },
}

SIGN_NAMES: dict[str, dict[str, str]] = {
    "en": {
        "aries": "Aries",
        "taurus": "Taurus",
        "gemini": "Gemini",
        "cancer": "Cancer",
        "leo": "Leo",
        "virgo": "Virgo",
        "libra": "Libra",
        "scorpio": "Scorpio",
        "sagittarius": "Sagittarius",
        "capricorn": "Capricorn",
        "aquarius": "Aquarius",
        "pisces": "Pisces",
    },
    "hi": {
        "aries": "मेष",
        "taurus": "वृषभ",
        "gemini": "मिथुन",
        "cancer": "कर्क",
        "leo": "सिंह",
        "virgo": "कन्या",
        "libra": "तुला",
        "scorpio": "वृश्चिक",
        "sagittarius": "धनु",
        "capricorn": "मकर",
        "aquarius": "कुंभ",
        "pisces": "मीन",
    },
}

# Sunday first, matching weekday_index.
WEEKDAY_NAMES: dict[str, list[str]] = {
    "en": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
    "hi": ["रविवार", "सोमवार", "मंगलवार", "बुधवार", "गुरुवार", "शुक्रवार", "शनिवार"],
}

MONTH_NAMES: dict[str, list[str]] = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "hi": [
        "जनवरी", "फ़रवरी", "मार्च", "अप्रैल", "मई", "जून",
        "जुलाई", "अगस्त", "सितंबर", "अक्टूबर", "नवंबर", "दिसंबर",
    ],
}

COLOR_NAMES_HI = {
    "saffron": "केसरिया",
    "leaf green": "पत्तियों जैसा हरा",
    "amber": "अम्बर",
    "turquoise": "फ़िरोज़ी",
    "coral": "मूंगा",
    "royal blue": "रॉयल ब्लू",
    "maroon": "मरून",
    "violet": "बैंगनी",
    "silver": "चांदी",
    "teal": "टील",
    "indigo": "नील",
    "crimson": "गहरा लाल",
    "pearl white": "मोती-सा सफ़ेद",
    "charcoal": "गहरा स्लेटी",
}


def normalize_lang(lang: Any) -> str:
    candidate = str(lang or "").strip().lower()
    return candidate if candidate in RESOURCES else DEFAULT_LANG


def resource(lang: str, key: str, **fmt: Any) -> str:
    table = RESOURCES.get(normalize_lang(lang), RESOURCES[DEFAULT_LANG])
    template = table.get(key)
    if template is None:
        template = RESOURCES[DEFAULT_LANG].get(key, key)
    return template.format(**fmt) if fmt else template


def sign_name(sign: str, lang: str = DEFAULT_LANG) -> str:
    normalized = str(sign or "").strip().lower()
    names = SIGN_NAMES.get(normalize_lang(lang), SIGN_NAMES[DEFAULT_LANG])
    return names.get(normalized) or (normalized[:1].upper() + normalized[1:])


def weekday_name(weekday_index: int, lang: str = DEFAULT_LANG) -> str:
    names = WEEKDAY_NAMES.get(normalize_lang(lang), WEEKDAY_NAMES[DEFAULT_LANG])
    return names[int(weekday_index) % 7]


def month_name(month: int, lang: str = DEFAULT_LANG) -> str:
    names = MONTH_NAMES.get(normalize_lang(lang), MONTH_NAMES[DEFAULT_LANG])
    return names[(int(month) - 1) % 12]


def color_name(color_en: str, lang: str = DEFAULT_LANG) -> str:
    if normalize_lang(lang) == "hi":
        return COLOR_NAMES_HI.get(color_en, color_en)
    return color_en
