"""
Canonical forms for free-text property names and street addresses.

Scraped listings and user-entered profiles spell the same place differently
("222 Main Street, Springfield" vs "222 Main St. Springfield"). Everything here
maps those variants onto one form so that edit-distance comparisons measure
real differences rather than formatting. Results are memoized per raw string.
"""
import re
from functools import lru_cache
from typing import Optional

_PUNCTUATION_RE = re.compile(r"[.,;#]")
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_NUMBER_RE = re.compile(r"^(\d+)")
_LEADING_NUMBER_SPACE_RE = re.compile(r"^\d+\s*")
_LEADING_ARTICLE_RE = re.compile(r"^the\s+")
_GENERIC_SUFFIX_RE = re.compile(
    r"\s+(apartments?|apt|residences?|homes?|towers?|place|commons?)$"
)

STREET_ABBREVIATIONS = {
    "street": "st",
    "avenue": "ave",
    "boulevard": "blvd",
    "drive": "dr",
    "road": "rd",
    "lane": "ln",
    "plaza": "plz",
    "circle": "cir",
    "parkway": "pkwy",
    "court": "ct",
    "north": "n",
    "south": "s",
    "east": "e",
    "west": "w",
    "northeast": "ne",
    "northwest": "nw",
    "southeast": "se",
    "southwest": "sw",
}

_ABBREVIATION_RE = re.compile(
    r"\b(" + "|".join(sorted(STREET_ABBREVIATIONS, key=len, reverse=True)) + r")\b"
)

NORMALIZE_CACHE_SIZE = 4096


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


@lru_cache(maxsize=NORMALIZE_CACHE_SIZE)
def normalize_address(address: Optional[str]) -> str:
    """
    Lowercase, drop punctuation and abbreviate street types and directions.

    Example:
        "222 North Main Street, Springfield" -> "222 n main st springfield"
    """
    if not address:
        return ""
    text = _PUNCTUATION_RE.sub("", str(address).lower())
    text = _ABBREVIATION_RE.sub(lambda m: STREET_ABBREVIATIONS[m.group(1)], text)
    return _collapse_whitespace(text)


@lru_cache(maxsize=NORMALIZE_CACHE_SIZE)
def normalize_property_name(name: Optional[str]) -> str:
    """Lowercase and strip a leading "the" and a trailing generic suffix like "apartments"."""
    if not name:
        return ""
    text = _collapse_whitespace(str(name).lower())
    text = _LEADING_ARTICLE_RE.sub("", text)
    text = _GENERIC_SUFFIX_RE.sub("", text)
    return _collapse_whitespace(text)


def extract_street_number(address: Optional[str]) -> str:
    if not address:
        return ""
    match = _LEADING_NUMBER_RE.match(str(address).strip())
    return match.group(1) if match else ""


def extract_street_name(address: Optional[str]) -> str:
    """Street portion of an address (before the first comma), normalized, without its number."""
    if not address:
        return ""
    street_part = str(address).split(",", 1)[0]
    return _LEADING_NUMBER_SPACE_RE.sub("", normalize_address(street_part)).strip()
