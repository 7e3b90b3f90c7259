"""Static weekday/sign lookup tables.

The window strings are user-facing and must stay byte-identical (en dash
separators included). They assume a 6:00 sunrise and a 12-hour day.
"""

from __future__ import annotations

from typing import Any

from astro_baba.locale_resources import normalize_lang

WINDOW_KEYS = ("rahuKaal", "yamaganda", "gulikaKaal", "abhijitMuhurat")

RAHU_KAAL = [
    "16:30–18:00",
    "07:30–09:00",
    "15:00–16:30",
    "12:00–13:30",
    "13:30–15:00",
    "10:30–12:00",
    "09:00–10:30",
]
YAMAGANDA = [
    "12:00–13:30",
    "10:30–12:00",
    "09:00–10:30",
    "07:30–09:00",
    "06:00–07:30",
    "15:00–16:30",
    "13:30–15:00",
]
GULIKA_KAAL = [
    "15:00–16:30",
    "13:30–15:00",
    "12:00–13:30",
    "10:30–12:00",
    "09:00–10:30",
    "07:30–09:00",
    "06:00–07:30",
]
ABHIJIT_MUHURAT = "12:05–12:52"


def vedic_times_for_day_index(weekday_index: int) -> dict[str, str]:
    idx = int(weekday_index) % 7
    return {
        "rahuKaal": RAHU_KAAL[idx],
        "yamaganda": YAMAGANDA[idx],
        "gulikaKaal": GULIKA_KAAL[idx],
        "abhijitMuhurat": ABHIJIT_MUHURAT,
    }


DAY_DEITY: dict[int, dict[str, dict[str, str]]] = {
    0: {
        "en": {"name": "Sunday", "pair": "Surya/Aditya", "ritual": "Recite Aditya Hridayam; offer red flowers."},
        "hi": {"name": "रविवार", "pair": "सूर्य/आदित्य", "ritual": "आदित्य हृदय स्तोत्र; लाल पुष्प अर्पित करें।"},
    },
    1: {
        "en": {"name": "Monday", "pair": "Shiva/Som", "ritual": "Chant “Om Namah Shivaya”; offer white rice or milk."},
        "hi": {"name": "सोमवार", "pair": "शिव/सोम", "ritual": "“ॐ नमः शिवाय” जप; चावल/दूध अर्पित करें।"},
    },
    2: {
        "en": {"name": "Tuesday", "pair": "Hanuman/Mangal", "ritual": "Recite Hanuman Chalisa; offer sindoor & jaggery."},
        "hi": {"name": "मंगलवार", "pair": "हनुमान/मंगल", "ritual": "हनुमान चालीसा; सिंदूर व गुड़ अर्पित करें।"},
    },
    3: {
        "en": {"name": "Wednesday", "pair": "Ganesha/Budh", "ritual": "Chant “Om Gam Ganapataye”; offer green moong."},
        "hi": {"name": "बुधवार", "pair": "गणेश/बुध", "ritual": "“ॐ गं गणपतये नमः”; हरी मूंग अर्पित करें।"},
    },
    4: {
        "en": {"name": "Thursday", "pair": "Vishnu/Brihaspati", "ritual": "Recite Vishnu Sahasranama; offer chana dal & turmeric."},
        "hi": {"name": "गुरुवार", "pair": "विष्णु/बृहस्पति", "ritual": "विष्णु सहस्रनाम; चना दाल व हल्दी अर्पित करें।"},
    },
    5: {
        "en": {"name": "Friday", "pair": "Lakshmi/Shukra", "ritual": "Recite Sri Suktam; offer white sweets & fragrance."},
        "hi": {"name": "शुक्रवार", "pair": "लक्ष्मी/शुक्र", "ritual": "श्री सूक्त; सफ़ेद मिष्ठान व सुगंध अर्पित करें।"},
    },
    6: {
        "en": {"name": "Saturday", "pair": "Shani/Hanuman", "ritual": "Chant Hanuman Chalisa; offer sesame oil & black til."},
        "hi": {"name": "शनिवार", "pair": "शनि/हनुमान", "ritual": "हनुमान चालीसा; तिल-तेल व काला तिल अर्पित करें।"},
    },
}


def day_deity(weekday_index: int, lang: str = "en") -> dict[str, str]:
    info = DAY_DEITY.get(int(weekday_index) % 7, DAY_DEITY[0])
    return dict(info[normalize_lang(lang)])


# ------------------------------------------------------------------------------
# Sign -> ruling planet -> gemstone / mantra
# ------------------------------------------------------------------------------
SIGN_RULERS = {
    "aries": "mars",
    "taurus": "venus",
    "gemini": "mercury",
    "cancer": "moon",
    "leo": "sun",
    "virgo": "mercury",
    "libra": "venus",
    "scorpio": "mars",
    "sagittarius": "jupiter",
    "capricorn": "saturn",
    "aquarius": "saturn",
    "pisces": "jupiter",
}

MANTRA_COUNT = 108

PLANETS: dict[str, dict[str, Any]] = {
    "sun": {
        "en": {"name": "Sun (Surya)", "primary": "Ruby", "alternate": "Red Garnet",
               "day": "Sunday", "metal": "gold", "finger": "ring finger"},
        "hi": {"name": "सूर्य", "primary": "माणिक्य", "alternate": "लाल गार्नेट",
               "day": "रविवार", "metal": "सोना", "finger": "अनामिका"},
        "mantra": "Om Hraam Hreem Hraum Sah Suryaya Namah",
    },
    "moon": {
        "en": {"name": "Moon (Chandra)", "primary": "Pearl", "alternate": "Moonstone",
               "day": "Monday", "metal": "silver", "finger": "little finger"},
        "hi": {"name": "चंद्र", "primary": "मोती", "alternate": "चंद्रकांत मणि",
               "day": "सोमवार", "metal": "चांदी", "finger": "कनिष्ठा"},
        "mantra": "Om Shraam Shreem Shraum Sah Chandraya Namah",
    },
    "mars": {
        "en": {"name": "Mars (Mangal)", "primary": "Red Coral", "alternate": "Carnelian",
               "day": "Tuesday", "metal": "copper or gold", "finger": "ring finger"},
        "hi": {"name": "मंगल", "primary": "मूंगा", "alternate": "कार्नेलियन",
               "day": "मंगलवार", "metal": "तांबा या सोना", "finger": "अनामिका"},
        "mantra": "Om Kraam Kreem Kraum Sah Bhaumaya Namah",
    },
    "mercury": {
        "en": {"name": "Mercury (Budh)", "primary": "Emerald", "alternate": "Peridot",
               "day": "Wednesday", "metal": "gold", "finger": "little finger"},
        "hi": {"name": "बुध", "primary": "पन्ना", "alternate": "पेरिडॉट",
               "day": "बुधवार", "metal": "सोना", "finger": "कनिष्ठा"},
        "mantra": "Om Braam Breem Braum Sah Budhaya Namah",
    },
    "jupiter": {
        "en": {"name": "Jupiter (Brihaspati)", "primary": "Yellow Sapphire", "alternate": "Citrine",
               "day": "Thursday", "metal": "gold", "finger": "index finger"},
        "hi": {"name": "बृहस्पति", "primary": "पुखराज", "alternate": "सुनहला",
               "day": "गुरुवार", "metal": "सोना", "finger": "तर्जनी"},
        "mantra": "Om Graam Greem Graum Sah Gurave Namah",
    },
    "venus": {
        "en": {"name": "Venus (Shukra)", "primary": "Diamond", "alternate": "White Sapphire",
               "day": "Friday", "metal": "silver or platinum", "finger": "middle finger"},
        "hi": {"name": "शुक्र", "primary": "हीरा", "alternate": "सफ़ेद पुखराज",
               "day": "शुक्रवार", "metal": "चांदी या प्लेटिनम", "finger": "मध्यमा"},
        "mantra": "Om Draam Dreem Draum Sah Shukraya Namah",
    },
    "saturn": {
        "en": {"name": "Saturn (Shani)", "primary": "Blue Sapphire", "alternate": "Amethyst",
               "day": "Saturday", "metal": "silver or panchdhatu", "finger": "middle finger"},
        "hi": {"name": "शनि", "primary": "नीलम", "alternate": "जामुनिया (एमेथिस्ट)",
               "day": "शनिवार", "metal": "चांदी या पंचधातु", "finger": "मध्यमा"},
        "mantra": "Om Praam Preem Praum Sah Shanaischaraya Namah",
    },
}

# Aquarius keeps Saturn as ruler but must not be pointed at Blue Sapphire.
GEMSTONE_OVERRIDES: dict[str, dict[str, dict[str, str]]] = {
    "aquarius": {
        "en": {
            "primary": "Amethyst",
            "alternate": "Blue Topaz",
            "caveat": (
                "Blue Sapphire is not suggested for Aquarius without a full personal chart review; "
                "Amethyst is the gentler Saturn-friendly choice."
            ),
        },
        "hi": {
            "primary": "जामुनिया (एमेथिस्ट)",
            "alternate": "ब्लू टोपाज़",
            "caveat": (
                "कुंभ राशि के लिए नीलम व्यक्तिगत कुंडली की पूर्ण जाँच के बिना सुझाया नहीं जाता; "
                "जामुनिया शनि के अनुकूल सौम्य विकल्प है।"
            ),
        },
    },
}


def ruling_planet(sign: str) -> str:
    return SIGN_RULERS.get(str(sign or "").strip().lower(), "mars")


def gemstone_for_sign(sign: str, lang: str = "en") -> dict[str, Any]:
    normalized = str(sign or "").strip().lower()
    language = normalize_lang(lang)
    planet_key = ruling_planet(normalized)
    planet = PLANETS[planet_key][language]
    recommendation: dict[str, Any] = {
        "sign": normalized,
        "planet": planet_key,
        "planetName": planet["name"],
        "primary": planet["primary"],
        "alternate": planet["alternate"],
        "day": planet["day"],
        "metal": planet["metal"],
        "finger": planet["finger"],
        "caveat": None,
    }
    override = GEMSTONE_OVERRIDES.get(normalized)
    if override:
        recommendation.update(override[language])
    return recommendation


def mantra_for_sign(sign: str, lang: str = "en") -> dict[str, Any]:
    normalized = str(sign or "").strip().lower()
    planet_key = ruling_planet(normalized)
    planet = PLANETS[planet_key]
    return {
        "sign": normalized,
        "planet": planet_key,
        "planetName": planet[normalize_lang(lang)]["name"],
        "mantra": planet["mantra"],
        "count": MANTRA_COUNT,
        "day": planet[normalize_lang(lang)]["day"],
    }
