"""Clean-up for generated letter text before it is laid out as PDF."""
from __future__ import annotations

import re

_PLACEHOLDER_PATTERNS = [
    re.compile(r"\[.*?\]"),                           # [Your Name]
    re.compile(r"\{.*?\}"),                           # {Company}
    re.compile(r"\([^()]*?fill in[^()]*?\)", re.I),   # (fill in the date)
    re.compile(r"\([^()]*?e\.g\.[^()]*?\)", re.I),    # (e.g., LinkedIn)
]

_GLYPHS = {
    "●": "•",
    "◦": "•",
    "▪": "•",
    "▫": "•",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
}


def strip_placeholders(text: str) -> str:
    for pattern in _PLACEHOLDER_PATTERNS:
        text = pattern.sub("", text)
    return re.sub(r"\n\s*\n\s*\n", "\n\n", text)


def normalize_glyphs(text: str) -> str:
    for char, replacement in _GLYPHS.items():
        text = text.replace(char, replacement)
    return text


def sanitize_cover_letter(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return normalize_glyphs(strip_placeholders(text)).strip()
