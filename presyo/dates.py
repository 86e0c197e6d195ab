# ==============================================================================
# DATE RESOLUTION FROM BULLETIN FILENAMES
# ==============================================================================

import re
from datetime import date
from typing import Callable, List, Optional, Tuple

from presyo.config import DA_DEFAULT_DATE

MONTHS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sept': 9, 'sep': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

# Longest names first so "September" is not read as "Sep" + "tember"
_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))


def _month_day_year(m: re.Match) -> date:
    return date(int(m.group(3)), int(m.group(1)), int(m.group(2)))


def _year_month_day(m: re.Match) -> date:
    return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def _named_month(m: re.Match) -> date:
    return date(int(m.group(3)), MONTHS[m.group(1).lower()], int(m.group(2)))


# Tried strictly in this order; the first pattern that yields a real
# calendar date wins.
DATE_PATTERNS: List[Tuple[str, re.Pattern, Callable[[re.Match], date]]] = [
    ("MMDDYYYY", re.compile(r'(?<!\d)(\d{2})(\d{2})(\d{4})(?!\d)'), _month_day_year),
    ("YYYY-MM-DD", re.compile(r'(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)'), _year_month_day),
    ("MM-DD-YYYY", re.compile(r'(?<!\d)(\d{2})-(\d{2})-(\d{4})(?!\d)'), _month_day_year),
    ("M/D/YYYY", re.compile(r'(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)'), _month_day_year),
    ("YYYYMMDD", re.compile(r'(?<!\d)(\d{4})(\d{2})(\d{2})(?!\d)'), _year_month_day),
    ("Month-DD-YYYY", re.compile(
        r'(?<![A-Za-z])(' + _MONTH_ALTERNATION + r')(?![a-z])\.?[\s_\-.]*'
        r'(\d{1,2})(?:st|nd|rd|th)?[\s,_\-.]+(\d{4})(?!\d)',
        re.IGNORECASE,
    ), _named_month),
]


def match_date(filename: str) -> Optional[date]:
    """Date carried by the filename, or None when no pattern applies"""
    for _name, pattern, build in DATE_PATTERNS:
        for m in pattern.finditer(filename):
            try:
                return build(m)
            except ValueError:
                continue
    return None


def resolve_date(filename: str, default: date = DA_DEFAULT_DATE) -> date:
    """
    Canonical date for a bulletin filename.

    Examples:
        Price-Monitoring-June-26-2025.pdf   -> 2025-06-26
        DPI-AFC-06262025.pdf                 -> 2025-06-26
        BNPC_SRP_BULLETIN_01_FEBRUARY_2025   -> default (day precedes month)
    """
    return match_date(filename) or default
