"""Helpers for hierarchical 2-6 digit industry classification codes.

A code is read as a chain of prefixes, from the 2-digit sector down to the
6-digit national industry: ``238160`` -> ``23``, ``238``, ``2381``,
``23816``, ``238160``. Every helper strips non-digit characters first, so
``"23-81-60"`` and ``"238160"`` are the same code.
"""

from __future__ import annotations

import re

from app.industry_config.errors import InvalidClassificationError
from app.industry_config.schemas import ClassificationLevel, ClassificationRead
from app.industry_config.templates import template_for_sector

MIN_LENGTH = 2
MAX_LENGTH = 6

_NON_DIGITS = re.compile(r"[^0-9]")

_LEVELS = {
    2: ClassificationLevel.SECTOR,
    3: ClassificationLevel.SUBSECTOR,
    4: ClassificationLevel.INDUSTRY_GROUP,
    5: ClassificationLevel.NAICS_INDUSTRY,
    6: ClassificationLevel.NATIONAL_INDUSTRY,
}

SECTOR_NAMES: dict[str, str] = {
    "11": "Agriculture, Forestry, Fishing and Hunting",
    "21": "Mining, Quarrying, and Oil and Gas Extraction",
    "22": "Utilities",
    "23": "Construction",
    "31": "Manufacturing",
    "32": "Manufacturing",
    "33": "Manufacturing",
    "42": "Wholesale Trade",
    "44": "Retail Trade",
    "45": "Retail Trade",
    "48": "Transportation and Warehousing",
    "49": "Transportation and Warehousing",
    "51": "Information",
    "52": "Finance and Insurance",
    "53": "Real Estate and Rental and Leasing",
    "54": "Professional, Scientific, and Technical Services",
    "55": "Management of Companies and Enterprises",
    "56": "Administrative and Support and Waste Management",
    "61": "Educational Services",
    "62": "Health Care and Social Assistance",
    "71": "Arts, Entertainment, and Recreation",
    "72": "Accommodation and Food Services",
    "81": "Other Services (except Public Administration)",
    "92": "Public Administration",
}

UNKNOWN_SECTOR_NAME = "Unknown Sector"


def normalize(code: str) -> str:
    return _NON_DIGITS.sub("", code or "")


def hierarchy(code: str) -> list[str]:
    digits = normalize(code)
    return [digits[:length] for length in range(MIN_LENGTH, min(len(digits), MAX_LENGTH) + 1)]


def level(code: str) -> ClassificationLevel:
    return _LEVELS.get(len(normalize(code)), ClassificationLevel.SECTOR)


def sector(code: str) -> str:
    return normalize(code)[:2]


def subsector(code: str) -> str | None:
    digits = normalize(code)
    return digits[:3] if len(digits) >= 3 else None


def parent(code: str) -> str | None:
    digits = normalize(code)[:MAX_LENGTH]
    if len(digits) <= MIN_LENGTH:
        return None
    return digits[:-1]


def is_in_sector(code: str, sector_code: str) -> bool:
    return sector(code) == sector_code


def is_valid(code: str | None) -> bool:
    if code is None:
        return False
    return MIN_LENGTH <= len(normalize(code)) <= MAX_LENGTH


def require_valid(code: str) -> str:
    if not is_valid(code):
        raise InvalidClassificationError(code)
    return normalize(code)


def format_code(code: str) -> str:
    digits = normalize(code)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}-{digits[2:]}"
    return f"{digits[:2]}-{digits[2:4]}-{digits[4:]}"


def sector_name(code: str) -> str:
    return SECTOR_NAMES.get(code, UNKNOWN_SECTOR_NAME)


def all_sector_codes() -> list[str]:
    return list(SECTOR_NAMES)


def describe(code: str) -> ClassificationRead:
    digits = require_valid(code)
    sector_code = sector(digits)
    return ClassificationRead(
        code=digits,
        level=level(digits),
        hierarchy=hierarchy(digits),
        sector=sector_code,
        sector_name=sector_name(sector_code),
        template=template_for_sector(sector_code),
        formatted=format_code(digits),
    )
