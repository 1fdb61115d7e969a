"""Utility helpers used across the project."""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Optional


LOGGER = logging.getLogger(__name__)


# Letters that do not decompose into base letter + combining mark, or whose
# lowercase form differs from the folded one (dotted capital I).
FOLD_TABLE = str.maketrans(
    {
        "ı": "i",
        "İ": "i",
        "ş": "s",
        "Ş": "s",
        "ç": "c",
        "Ç": "c",
        "ğ": "g",
        "Ğ": "g",
        "ü": "u",
        "Ü": "u",
        "ö": "o",
        "Ö": "o",
        "ß": "ss",
    }
)


def strip_accents(text: str) -> str:
    """Remove diacritics from ``text``."""

    normalized = unicodedata.normalize("NFD", text)
    return "".join(char for char in normalized if unicodedata.category(char) != "Mn")


def normalize_text(text: Optional[str]) -> str:
    """Fold ``text`` into a lowercase, accent-free form used for comparisons.

    * Turkish dotless/dotted ``i``, cedilla, breve and umlaut letters map to
      their plain Latin letter
    * any other combining mark is removed
    * lowercase

    Punctuation and spacing are kept so that quantity and date patterns still
    apply to the normalized text.
    """

    if not text:
        return ""
    return strip_accents(text.translate(FOLD_TABLE)).lower()


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def digits_only(value: Optional[str]) -> str:
    if value is None:
        return ""
    return re.sub(r"\D", "", str(value))


def dump_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def load_json(path: Path):
    with Path(path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


__all__ = [
    "FOLD_TABLE",
    "strip_accents",
    "normalize_text",
    "collapse_whitespace",
    "digits_only",
    "dump_json",
    "load_json",
]
