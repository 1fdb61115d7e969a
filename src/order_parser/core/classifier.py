"""Heuristics that decide what a single line of an order message carries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from .line_items import UNIT_WORDS, parse_line
from .matcher import FuzzyProductMatcher
from .models import Match, ParsedLine
from .utils import normalize_text


KIND_BLANK = "blank"
KIND_DATE = "date"
KIND_PHONE = "phone"
KIND_ADDRESS = "address"
KIND_NAME = "name"
KIND_PRODUCT = "product"

MONTHS_TR: Dict[str, int] = {
    "ocak": 1,
    "subat": 2,
    "mart": 3,
    "nisan": 4,
    "mayis": 5,
    "haziran": 6,
    "temmuz": 7,
    "agustos": 8,
    "eylul": 9,
    "ekim": 10,
    "kasim": 11,
    "aralik": 12,
}

MONTHS_EN: Dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

MONTHS_NL: Dict[str, int] = {
    "januari": 1,
    "februari": 2,
    "maart": 3,
    "mei": 5,
    "juni": 6,
    "juli": 7,
    "augustus": 8,
    "oktober": 10,
}

MONTHS: Dict[str, int] = {**MONTHS_NL, **MONTHS_EN, **MONTHS_TR}

DEFAULT_ADDRESS_KEYWORDS: Tuple[str, ...] = (
    "straat",
    "weg",
    "laan",
    "plein",
    "gracht",
    "kade",
    "nieuw",
    "oud",
    "noord",
    "zuid",
    "oost",
    "west",
    "amsterdam",
    "rotterdam",
    "utrecht",
    "den haag",
    "almere",
    "sloten",
    "buitenveldert",
    "amstelveen",
    "adres",
    "address",
    "teslimat",
)

DATE_WORD_PATTERN = re.compile(r"(\d{1,2})\s+([a-z]+)\s+(\d{4})")
DATE_NUMERIC_PATTERN = re.compile(r"(\d{1,2})[/.\\-](\d{1,2})[/.\\-](\d{4})")
DATE_ISO_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")

PHONE_STRIP_PATTERN = re.compile(r"[\s\-().]")
PHONE_NL_PATTERN = re.compile(r"^(\+?31|0031|0)?6\d{8}$")
PHONE_TR_PATTERN = re.compile(r"^(\+?90|0090|0)?5\d{9}$")
PHONE_GENERIC_PATTERN = re.compile(r"^\d{10,12}$")

ADDRESS_LABEL_PATTERN = re.compile(r"^(?:adres|address|teslimat)\s*[:：]\s*", re.IGNORECASE)
DIGIT_LETTER_PATTERN = re.compile(r"\d[a-z]", re.IGNORECASE)
QUANTITY_MARKER_PATTERN = re.compile(
    r"^\d+\s*(?:x|" + "|".join(UNIT_WORDS) + r")|(?<![a-z])x\s*\d+$",
    re.IGNORECASE,
)
DIGIT_PATTERN = re.compile(r"\d")


@dataclass
class LineClassification:
    """Outcome of :func:`classify_line`.

    ``value`` holds the extracted date, phone, address or name; product lines
    carry the ``parsed`` line and its catalog ``match`` (possibly ``None``).
    """

    kind: str
    line: str
    value: Optional[str] = None
    parsed: Optional[ParsedLine] = None
    match: Optional[Match] = None


@dataclass(frozen=True)
class ClassifierOptions:
    name_confidence_cutoff: float = 0.5
    max_name_tokens: int = 3
    min_address_length: int = 5
    address_keywords: Tuple[str, ...] = DEFAULT_ADDRESS_KEYWORDS

    @classmethod
    def with_extra_keywords(cls, keywords: Iterable[str], **kwargs) -> "ClassifierOptions":
        extra = tuple(normalize_text(keyword) for keyword in keywords if keyword)
        return cls(address_keywords=DEFAULT_ADDRESS_KEYWORDS + extra, **kwargs)


def _safe_date(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(text: str) -> Optional[str]:
    """Return the ISO date found in ``text`` or ``None``.

    Formats are tried in order; a format whose numbers do not form a real
    calendar date is rejected and the next format is tried.
    """

    clean_text = normalize_text(text).strip()

    match = DATE_WORD_PATTERN.search(clean_text)
    if match:
        month = MONTHS.get(match.group(2))
        if month is not None:
            parsed = _safe_date(int(match.group(3)), month, int(match.group(1)))
            if parsed:
                return parsed

    match = DATE_NUMERIC_PATTERN.search(clean_text)
    if match:
        parsed = _safe_date(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        if parsed:
            return parsed

    match = DATE_ISO_PATTERN.search(clean_text)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    return None


def clean_phone(text: str) -> str:
    return PHONE_STRIP_PATTERN.sub("", text.strip())


def is_phone_number(text: str) -> bool:
    cleaned = clean_phone(text)
    return bool(
        PHONE_NL_PATTERN.match(cleaned)
        or PHONE_TR_PATTERN.match(cleaned)
        or PHONE_GENERIC_PATTERN.match(cleaned)
    )


def normalize_phone(text: str) -> str:
    """Bring a phone number into a ``+<country><number>`` shape where known.

    Dutch mobile numbers (``06...``, ``00316...``, ``316...``) gain the
    ``+31`` prefix.  Anything else, other ``00`` international forms
    included, keeps its digits and any ``+`` already present.
    """

    cleaned = clean_phone(text)
    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("00316") and PHONE_NL_PATTERN.match(cleaned):
        return "+" + cleaned[2:]
    if cleaned.startswith("06") and PHONE_NL_PATTERN.match(cleaned):
        return "+31" + cleaned[1:]
    if cleaned.startswith("6") and len(cleaned) == 9:
        return "+31" + cleaned
    if cleaned.startswith("316") and PHONE_NL_PATTERN.match(cleaned):
        return "+" + cleaned
    return cleaned


def is_address_line(text: str, options: ClassifierOptions = ClassifierOptions()) -> bool:
    lowered = normalize_text(text)
    if any(keyword in lowered for keyword in options.address_keywords):
        return True
    if len(text) <= options.min_address_length:
        return False
    # "3x", "2kg" and friends are quantities, not house numbers
    remainder = QUANTITY_MARKER_PATTERN.sub(" ", lowered.strip())
    return bool(DIGIT_LETTER_PATTERN.search(remainder))


def clean_address(text: str) -> str:
    return ADDRESS_LABEL_PATTERN.sub("", text.strip()).strip()


def is_likely_name(text: str, options: ClassifierOptions = ClassifierOptions()) -> bool:
    words = text.split()
    if not words or len(words) > options.max_name_tokens:
        return False
    return not DIGIT_PATTERN.search(text)


def classify_line(
    line: str,
    matcher: FuzzyProductMatcher,
    *,
    allow_name: bool = True,
    options: ClassifierOptions = ClassifierOptions(),
) -> LineClassification:
    """Classify one line as date, phone, address, name, product or blank.

    ``allow_name`` is ``False`` once a customer name has been captured, so a
    poorly matching short line is then kept as an (unmatched) product.
    """

    trimmed = (line or "").strip()
    if not trimmed:
        return LineClassification(kind=KIND_BLANK, line=trimmed)

    parsed_date = parse_date(trimmed)
    if parsed_date:
        return LineClassification(kind=KIND_DATE, line=trimmed, value=parsed_date)

    if is_phone_number(trimmed):
        return LineClassification(kind=KIND_PHONE, line=trimmed, value=normalize_phone(trimmed))

    if is_address_line(trimmed, options):
        return LineClassification(kind=KIND_ADDRESS, line=trimmed, value=clean_address(trimmed))

    parsed = parse_line(trimmed)
    match = matcher.match(parsed.searched_name) if parsed else None

    weak = match is None or match.confidence < options.name_confidence_cutoff
    if weak and allow_name and is_likely_name(trimmed, options):
        return LineClassification(kind=KIND_NAME, line=trimmed, value=trimmed)

    return LineClassification(kind=KIND_PRODUCT, line=trimmed, parsed=parsed, match=match)


__all__ = [
    "KIND_BLANK",
    "KIND_DATE",
    "KIND_PHONE",
    "KIND_ADDRESS",
    "KIND_NAME",
    "KIND_PRODUCT",
    "MONTHS",
    "DEFAULT_ADDRESS_KEYWORDS",
    "LineClassification",
    "ClassifierOptions",
    "parse_date",
    "is_phone_number",
    "normalize_phone",
    "is_address_line",
    "clean_address",
    "is_likely_name",
    "classify_line",
]
