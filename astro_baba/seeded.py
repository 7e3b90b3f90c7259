"""Deterministic selection helpers shared by every content builder."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
_UINT32 = 0xFFFFFFFF

SIGNS = [
    "aries",
    "taurus",
    "gemini",
    "cancer",
    "leo",
    "virgo",
    "libra",
    "scorpio",
    "sagittarius",
    "capricorn",
    "aquarius",
    "pisces",
]


def _utf16_units(text: str) -> list[int]:
    raw = text.encode("utf-16-le", errors="surrogatepass")
    return [int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2)]


def hash_code(key: str) -> int:
    """FNV-1a over UTF-16 code units, returned as an unsigned 32-bit int.

    Folding over code units (not UTF-8 bytes) keeps the output identical to
    seeds already written into the on-disk daily cache.
    """
    h = FNV_OFFSET_BASIS
    for unit in _utf16_units(str(key)):
        h ^= unit
        h = (h * FNV_PRIME) & _UINT32
    return h


def pick(items: Sequence[T], seed: int) -> T | None:
    if not items:
        return None
    return items[int(seed) % len(items)]


def pick_n(items: Sequence[T], n: int, seed: int) -> list[T]:
    """Pick up to ``n`` distinct items by walking an LCG from ``seed``.

    When ``n >= len(items)`` every item is returned, in the order the walk
    first reaches it.
    """
    want = min(max(int(n), 0), len(items))
    out: list[T] = []
    used: set[int] = set()
    k = int(seed) & _UINT32
    while len(out) < want:
        idx = k % len(items)
        if idx not in used:
            used.add(idx)
            out.append(items[idx])
        k = (k * LCG_MULTIPLIER + LCG_INCREMENT) & _UINT32
    return out


def sign_index(sign: str) -> int:
    normalized = str(sign or "").strip().lower()
    try:
        return SIGNS.index(normalized)
    except ValueError:
        return 0


def is_valid_sign(sign: str) -> bool:
    return str(sign or "").strip().lower() in SIGNS


def cap_sign(sign: str) -> str:
    normalized = str(sign or "").strip().lower()
    return normalized[:1].upper() + normalized[1:]
