from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

# Polished/translated text matching any of these is discarded in favour of
# the deterministic baseline.
FORBIDDEN_PATTERNS = [
    re.compile("\u00e2\u20ac|\u00c3.|\u00e0\u00a4|\u00e0\u00a5"),
    re.compile("\uFFFD"),
    re.compile(r"\bas an ai\b", re.IGNORECASE),
    re.compile(r"\b100\s?%\s*(?:sure|certain|guaranteed)\b", re.IGNORECASE),
]

TIME_WINDOW_RE = re.compile(r"\d{2}:\d{2}–\d{2}:\d{2}")


def scan_forbidden_patterns(
    text: str,
    patterns: Iterable[re.Pattern] = FORBIDDEN_PATTERNS,
) -> list[dict[str, str]]:
    findings: list[dict[str, str]] = []
    for pattern in patterns:
        for match in pattern.finditer(text or ""):
            start = max(0, match.start() - 40)
            end = min(len(text), match.end() + 40)
            findings.append(
                {
                    "pattern": pattern.pattern,
                    "match": match.group(0),
                    "context": (text[start:end] or "").replace("\n", " "),
                }
            )
    return findings


def missing_time_windows(baseline: str, candidate: str) -> list[str]:
    """Time windows present in ``baseline`` that ``candidate`` dropped or altered."""
    kept = set(TIME_WINDOW_RE.findall(candidate or ""))
    return [window for window in dict.fromkeys(TIME_WINDOW_RE.findall(baseline or "")) if window not in kept]


def extract_pdf_text(pdf_path: Path) -> str:
    from pypdf import PdfReader

    reader = PdfReader(str(pdf_path))
    return "\n".join((page.extract_text() or "") for page in reader.pages)
