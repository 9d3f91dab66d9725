"""Text helpers for standard PDF fonts: sanitizing and greedy word-wrap."""

from __future__ import annotations

from typing import Callable
import unicodedata

_TRANSLITERATIONS = str.maketrans({"đ": "d", "Đ": "D", "ø": "o", "Ø": "O", "ł": "l", "Ł": "L"})


def _encodable(ch: str) -> bool:
    try:
        ch.encode("cp1252")
    except UnicodeEncodeError:
        return False
    return True


def sanitize_text(text: str) -> str:
    """Reduce text to what the WinAnsi-encoded standard fonts can show."""
    if not text:
        return text
    decomposed = unicodedata.normalize("NFKD", text.translate(_TRANSLITERATIONS))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(ch if _encodable(ch) else "?" for ch in stripped)


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    lines: list[str] = []
    line = ""
    for word in text.split():
        candidate = f"{line} {word}" if line else word
        if line and measure(candidate) > max_width:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def truncate(text: str, limit: int, keep: int) -> str:
    if len(text) <= limit:
        return text
    return text[:keep] + "..."
