"""Optional LLM polish/translation.

Every public coroutine here returns usable text: when no client is
configured, or the upstream fails, times out or answers with something the
output scanner rejects, the input comes back unmodified.

``hindi_template_lines`` is the deterministic Hindi rendering of bank
phrases; callers use it explicitly.
"""

from __future__ import annotations

import asyncio
import logging
import re
import unicodedata
from typing import Awaitable, Callable, NamedTuple, Optional, Sequence

from openai import AsyncOpenAI

from astro_baba import llm_service
from astro_baba.cache_manager import CacheManager, cache as default_cache
from astro_baba.content_bank import HI_PHRASES
from astro_baba.locale_resources import COLOR_NAMES_HI, RESOURCES, SIGN_NAMES, normalize_lang
from astro_baba.output_scanner import missing_time_windows, scan_forbidden_patterns

logger = logging.getLogger("astro_baba")

POLISH_SYSTEM_PROMPT = (
    "You are Astro-Baba, a warm and practical Vedic astrology editor. "
    "Lightly polish the user's horoscope text for flow and warmth. "
    "Keep every heading, bullet, number, time range (e.g. 12:05–12:52) and mantra exactly as written. "
    "Do not add predictions, medical or financial guarantees. "
    "Keep roughly the same length and the same line structure. Reply in the language of the input, with the polished text only."
)

TRANSLATE_SYSTEM_PROMPT = (
    "You are a precise translator. Translate user content into Hindi (hi-IN). "
    "Preserve numbers, punctuation, time ranges (e.g., 12:05–12:52), and bullet symbols. "
    "Do NOT translate Sanskrit mantras, and keep proper nouns like Hanuman, Rahu Kaal, Abhijit Muhurat, Surya, etc. "
    "Keep formatting and line breaks; output exactly one line for every input line. "
    "Reply with Hindi text only."
)


class Provider(NamedTuple):
    name: str
    run: Callable[[str], Awaitable[Optional[str]]]


class ProviderChain:
    """Ordered text strategies; the first non-empty, non-raising answer wins."""

    def __init__(self, providers: Sequence[Provider], label: str = "chain"):
        self.providers = list(providers)
        self.label = label

    async def run(self, text: str) -> tuple[str, str]:
        for provider in self.providers:
            try:
                out = await provider.run(text)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(
                    "%s provider failed; trying next provider=%s error_type=%s error=%s",
                    self.label,
                    provider.name,
                    type(e).__name__,
                    e,
                )
                continue
            if isinstance(out, str) and out.strip():
                return out, provider.name
        return text, "passthrough"


class RejectedOutput(ValueError):
    pass


def _validate_llm_output(baseline: str, candidate: str, expected_lines: Optional[int] = None) -> str:
    findings = scan_forbidden_patterns(candidate)
    if findings:
        raise RejectedOutput(f"forbidden pattern in LLM output: {findings[0]['match']!r}")
    dropped = missing_time_windows(baseline, candidate)
    if dropped:
        raise RejectedOutput(f"LLM output dropped time windows {dropped}")
    if expected_lines is not None and len(candidate.split("\n")) != expected_lines:
        raise RejectedOutput(
            f"LLM output has {len(candidate.split(chr(10)))} lines, expected {expected_lines}"
        )
    return candidate


def _llm_provider(
    name: str,
    client: AsyncOpenAI,
    *,
    system_message: str,
    request_id: str,
    endpoint: str,
    expected_lines: Optional[int] = None,
) -> Provider:
    async def _run(text: str) -> Optional[str]:
        out = await asyncio.wait_for(
            llm_service.complete_text(
                client,
                system_message=system_message,
                user_message=text,
                request_id=request_id,
                endpoint=endpoint,
            ),
            timeout=llm_service.LLM_TIMEOUT_SEC,
        )
        return _validate_llm_output(text, out.strip(), expected_lines)

    return Provider(name, _run)


async def _identity(text: str) -> Optional[str]:
    return text


# ------------------------------------------------------------------------------
# Hindi dictionary translation + cleanup
# ------------------------------------------------------------------------------
def _label_phrases() -> dict[str, str]:
    phrases: dict[str, str] = {}
    en_table, hi_table = RESOURCES["en"], RESOURCES["hi"]
    for key, en_value in en_table.items():
        hi_value = hi_table.get(key)
        if isinstance(en_value, str) and isinstance(hi_value, str) and "{" not in en_value:
            phrases[en_value] = hi_value
    return phrases


def _build_phrase_table() -> list[tuple[str, str]]:
    table: dict[str, str] = {}
    table.update(_label_phrases())
    table.update(HI_PHRASES)
    # Sign names only as whole words.
    table.update({SIGN_NAMES["en"][sign]: SIGN_NAMES["hi"][sign] for sign in SIGN_NAMES["en"]})
    table.update(COLOR_NAMES_HI)
    return sorted(table.items(), key=lambda item: len(item[0]), reverse=True)


_PHRASE_TABLE = _build_phrase_table()


def dictionary_translate(text: str) -> str:
    """Replace every known English phrase with its Hindi variant.

    Longest phrases are substituted first so a full pool line wins over a
    label that happens to occur inside it.
    """
    out = str(text or "")
    for en, hi in _PHRASE_TABLE:
        if en in out:
            if len(en) < 24:
                out = re.sub(rf"(?<![\w]){re.escape(en)}(?![\w])", hi, out)
            else:
                out = out.replace(en, hi)
    return out


_CLEAN_HI_RULES: list[tuple[re.Pattern[str], str]] = [
    # themes and common lines
    (re.compile(r"Stewardship\s*&\s*Savings", re.I), "संरक्षण और बचत"),
    (re.compile(r"tighten one small leak", re.I), "एक छोटी रिसाव बंद करें"),
    (re.compile(r"Creative\s*Spark", re.I), "रचनात्मक चिंगारी"),
    (re.compile(r"test a playful idea quickly", re.I), "एक खिलंदड़े विचार को जल्दी परखें"),
    (re.compile(r"Relationship\s*Warmth", re.I), "संबंधों में ऊष्मा"),
    (re.compile(r"short honest (?:conversations?|बातचीत)s? go far", re.I), "छोटी ईमानदार बातचीत बहुत असर करती है"),
    (re.compile(r"Pragmatic\s*Care", re.I), "व्यावहारिक देखभाल"),
    (re.compile(r"body,\s*sleep,\s*budgeting,\s*tiny wins", re.I), "शरीर, नींद, बजट, छोटी-छोटी जीत"),
    # partial English/Hindi mixes
    (re.compile(r"Learn\s+one\s+micro[-\s]?skill", re.I), "एक सूक्ष्म कौशल सीखें"),
    (re.compile(r"you[’']?ll\s+reuse\s+this\s+week", re.I), "जिसे आप इस सप्ताह फिर उपयोग करेंगे"),
    (re.compile(r"if you need an early start", re.I), "अगर आपको सुबह जल्दी शुरू करना है तो"),
    (re.compile(r"Journal one page to clear mental fog", re.I), "मानसिक धुंध हटाने के लिए एक पृष्ठ जर्नल लिखें"),
    (re.compile(r"Skip unplanned purchases sparked by mood", re.I), "मूड में की गई अनियोजित खरीद से बचें"),
    (re.compile(r"Limit multitasking during crucial work", re.I), "महत्वपूर्ण काम के दौरान मल्टीटास्किंग सीमित रखें"),
    (
        re.compile(r"Don[’']?t\s*overfill\s*the\s*calendar(?:\s*—|\s*-\s*)\s*leave\s*white\s*space", re.I),
        "कैलेंडर मत ठूँसें — थोड़ा खाली समय छोड़ें",
    ),
    (re.compile(r"Invest 20 minutes in a health micro[- ]habit", re.I), "स्वास्थ्य की एक सूक्ष्म आदत में 20 मिनट लगाएँ"),
    (
        re.compile(r"Touch base with a senior/mentor for a 30[- ]sec checkpoint", re.I),
        "किसी वरिष्ठ/मार्गदर्शक से 30-सेकंड का चेकपॉइंट लें",
    ),
    (
        re.compile(r"Draft a quick 3[–-]6[- ]month outline so today fits a bigger arc", re.I),
        "आज को बड़े प्रवाह में फिट करने के लिए 3–6 माह की एक त्वरित रूपरेखा बनाएँ",
    ),
    (
        re.compile(r"let\s+perfect\s+kill\s+good(?:\s*—|\s*-\s*)\s*ship\s+version\s+one", re.I),
        "पूर्णता के लालच में अच्छे को मत मारें — संस्करण 1 जारी करें।",
    ),
    (re.compile(r"ship\s+version\s*(?:1|one)", re.I), "संस्करण 1 जारी करें"),
    (
        re.compile(r"Before work, chant “?Om Gam Ganapataye”? ?21× for obstacle clearing", re.I),
        "कार्य से पहले “ॐ गं गणपतये” 21 बार जप करें — विघ्न शमन हेतु",
    ),
    (
        re.compile(r"At sunset, read a few names from Vishnu Sahasranama; offer chana dal\s*&\s*turmeric", re.I),
        "सूर्यास्त पर विष्णु सहस्रनाम के कुछ नाम पढ़ें; चना दाल और हल्दी अर्पित करें",
    ),
    (
        re.compile(r"Light a (?:pleasant )?fragrance; recite Sri Suktam or express gratitude for sufficiency", re.I),
        "सुगंधित धूप/दीप जलाएँ; श्री सूक्त का पाठ करें या पर्याप्तता के लिए कृतज्ञता व्यक्त करें",
    ),
    (
        re.compile(r"Ship one starter task before lunch to unlock afternoon flow", re.I),
        "दोपहर भोजन से पहले एक प्रारंभिक काम पूरा करें ताकि दोपहर का प्रवाह खुले",
    ),
    (
        re.compile(r"At sunrise, face east and offer gratitude to the Sun; keep 2 minutes of stillness", re.I),
        "सूर्योदय पर पूर्वमुख होकर सूर्य को कृतज्ञता अर्पित करें; 2 मिनट शांत बैठें",
    ),
    (
        re.compile(r"At sunset, chant Hanuman Chalisa; keep conduct calm and fair", re.I),
        "सूर्यास्त पर हनुमान चालीसा जपें; आचरण शांत और न्यायपूर्ण रखें",
    ),
    (
        re.compile(r"In the evening, recite Hanuman Chalisa once; offer a little sesame oil", re.I),
        "संध्या में हनुमान चालीसा एक बार पढ़ें; थोड़ा तिल का तेल अर्पित करें",
    ),
    (re.compile(r"late-?night screens", re.I), "रात देर तक स्क्रीन"),
    # OCR / ligature typos
    (re.compile("ईर्मेल"), "ईमेल"),
    (re.compile("ईर्मानदार"), "ईमानदार"),
    (re.compile("गमर्जोशी"), "गर्मजोशी"),
    (re.compile("कायर्"), "कार्य"),
    (re.compile("समयसीमाआें"), "समयसीमाओं"),
    (re.compile("मानिसक"), "मानसिक"),
    (re.compile("जनर्ल"), "जर्नल"),
    (re.compile("अिपंत"), "अर्पित"),
    (re.compile("पयार्प्तता"), "पर्याप्तता"),
    (re.compile("सूयार्स्त"), "सूर्यास्त"),
    (re.compile("सूयार्दय"), "सूर्योदय"),
    (re.compile("संबंधाें"), "संबंधों"),
    (re.compile("िरसाव"), "रिसाव"),
    # Hinglish normalisation
    (re.compile(r"इनबॉक्स\s*ट्रिम"), "इनबॉक्स साफ़ करें"),
    (re.compile("ट्रिम"), "छाँटें"),
    (re.compile("परफेक्ट"), "पूर्णता"),
    (re.compile(r"(?<!\w)गुड(?!\w)"), "अच्छा"),
    (re.compile("शिप"), "जारी करें"),
    (re.compile(r"वर्जन\s*वन"), "संस्करण 1"),
    (re.compile(r"माइक्रो[- ]स्किल"), "सूक्ष्म कौशल"),
    (re.compile("ग्राउंड"), "स्थिर"),
    (re.compile("ग्लो"), "दीप्ति"),
    (re.compile(r"\bemail\b", re.I), "ईमेल"),
    (re.compile(r"\binbox\b", re.I), "इनबॉक्स"),
]


def clean_hi(text: str) -> str:
    """Best-effort cleanup of Hinglish bleed-through and Devanagari OCR slips."""
    out = unicodedata.normalize("NFC", str(text or ""))
    for pattern, replacement in _CLEAN_HI_RULES:
        out = pattern.sub(replacement, out)
    out = out.replace("\u00a0", " ")
    out = re.sub(r"[ \t]+", " ", out)
    out = re.sub(r" *\n *", "\n", out)
    return out.strip()


# ------------------------------------------------------------------------------
# Public entry points
# ------------------------------------------------------------------------------
def polished_cache_key(text: str, lang: str) -> str:
    return f"llm_polished::{llm_service.sha256_hex(text)}::{normalize_lang(lang)}"


async def polish(
    text: str,
    client: Optional[AsyncOpenAI] = None,
    *,
    lang: str = "en",
    request_id: Optional[str] = None,
    polish_cache: Optional[CacheManager] = None,
) -> str:
    """[LLM polish, identity]. Accepted LLM output is cached by input hash."""
    if not text or not text.strip():
        return text
    store = polish_cache if polish_cache is not None else default_cache
    key = polished_cache_key(text, lang)
    cached = store.get(key)
    if isinstance(cached, str) and cached.strip():
        return cached

    providers: list[Provider] = []
    if client is not None:
        providers.append(
            _llm_provider(
                "llm_polish",
                client,
                system_message=POLISH_SYSTEM_PROMPT,
                request_id=request_id or llm_service.resolve_request_id(None),
                endpoint="polish",
            )
        )
    providers.append(Provider("identity", _identity))
    out, source = await ProviderChain(providers, label="polish").run(text)
    if source != "llm_polish":
        return text
    if normalize_lang(lang) == "hi":
        out = clean_hi(out)
    store.set(key, out)
    return out


async def _translate_llm(
    text: str,
    client: Optional[AsyncOpenAI],
    request_id: Optional[str],
    expected_lines: Optional[int],
) -> Optional[str]:
    if client is None:
        return None
    provider = _llm_provider(
        "llm_translate",
        client,
        system_message=TRANSLATE_SYSTEM_PROMPT,
        request_id=request_id or llm_service.resolve_request_id(None),
        endpoint="translate",
        expected_lines=expected_lines,
    )
    out, source = await ProviderChain([provider], label="translate").run(text)
    if source != "llm_translate":
        return None
    return clean_hi(out)


async def translate(
    text: str,
    target_lang: str,
    client: Optional[AsyncOpenAI] = None,
    *,
    request_id: Optional[str] = None,
    expected_lines: Optional[int] = None,
) -> str:
    """[LLM translate, input]. ``clean_hi`` runs on accepted Hindi output only."""
    if normalize_lang(target_lang) != "hi" or not text or not text.strip():
        return text
    out = await _translate_llm(text, client, request_id, expected_lines)
    return text if out is None else out


async def translate_many(
    lines: Sequence[str],
    target_lang: str,
    client: Optional[AsyncOpenAI] = None,
    *,
    request_id: Optional[str] = None,
) -> list[str]:
    """Translate a batch in one upstream call, keeping a 1:1 line mapping.

    Any failure returns the lines unchanged.
    """
    items = [str(line or "") for line in lines]
    if normalize_lang(target_lang) != "hi":
        return items
    slots = [i for i, line in enumerate(items) if line.strip()]
    if not slots:
        return items
    joined = "\n".join(items[i].replace("\n", " ").strip() for i in slots)
    translated = await _translate_llm(joined, client, request_id, len(slots))
    if translated is None:
        return items
    parts = translated.split("\n")
    if len(parts) != len(slots):
        logger.warning("translate_many line mismatch; keeping input lines got=%s want=%s", len(parts), len(slots))
        return items
    out = list(items)
    for slot, part in zip(slots, parts):
        out[slot] = part
    return out


def hindi_template_lines(lines: Sequence[str]) -> list[str]:
    """Deterministic Hindi rendering of bank phrases via ``HI_PHRASES`` and labels."""
    return [clean_hi(dictionary_translate(line)) if str(line or "").strip() else str(line or "") for line in lines]
