# ==============================================================================
# RX PARSER (LABELED CATEGORY TABLES)
# ==============================================================================
#
# Region X bulletins print a category header (IMPORTED COMMERCIAL RICE,
# FISH, ...), then a commodity/grade line (Special, Premium, Bangus, ...),
# then rows of six market prices glued together:
#
#     Blue tag48.0050.0048.0046.0050.0046.00
#     med(3-4pcs/kg)n/an/an/a200.00200.00200.00
#     160.00160.00160.00160.00160.00160.00
#
# ==============================================================================

import re
from statistics import mean
from typing import List, Optional, Tuple

from presyo.lexicon import commodity_category
from presyo.models import make_range
from presyo.parsers.base import BulletinParser, ParseOutput, ParseState

CATEGORY_HEADERS = (
    'IMPORTED COMMERCIAL RICE',
    'LOCAL COMMERCIAL RICE',
    'FISH',
    'MEAT',
    'VEGETABLES',
    'FRUITS',
)

COMMODITY_TOKENS = (
    'Special', 'Premium', 'Well milled', 'Regular milled',
    'Bangus', 'Tilapia', 'Galunggong',
)

_PRICE = r'\d+\.\d{2}'
_NA = r'n/a'
_SIZE = r'(?:\w+\([^)]*\))?'

# Ordered tiers; the first tier with any match handles the whole line.
NUMBER_TIERS: List[Tuple[str, re.Pattern]] = [
    ("tagged-six", re.compile(r'\w+\s+tag\s*(?P<cells>(?:' + _PRICE + r'){6})', re.IGNORECASE)),
    ("na-then-prices", re.compile(
        _SIZE + r'\s*(?P<cells>(?:' + _NA + r'){1,5}(?:' + _PRICE + r'){1,5})', re.IGNORECASE)),
    ("prices-then-na", re.compile(
        _SIZE + r'\s*(?P<cells>(?:' + _PRICE + r'){1,5}(?:' + _NA + r'){1,5})', re.IGNORECASE)),
    ("plain-six", re.compile(r'(?P<cells>(?:' + _PRICE + r'){6})')),
]
_CELL_PRICE = re.compile(_PRICE)
_FIRST_CELL = re.compile(_PRICE + '|' + _NA, re.IGNORECASE)


def extract_price_groups(line: str) -> List[List[float]]:
    """Price groups found by the first tier that matches the line"""
    for _name, tier in NUMBER_TIERS:
        groups = [
            [float(p) for p in _CELL_PRICE.findall(m.group('cells'))]
            for m in tier.finditer(line)
        ]
        if groups:
            return groups
    return []


def _label_part(line: str) -> str:
    """Text before the first price cell, "Premium (5% broken)" stays whole"""
    m = _FIRST_CELL.search(line)
    return line[:m.start()].strip() if m else line


def _commodity_token(line: str) -> Optional[str]:
    lower = line.lower()
    for token in COMMODITY_TOKENS:
        if token.lower() in lower:
            return token
    return None


class RxParser(BulletinParser):
    name = "rx"

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        if any(header in line for header in CATEGORY_HEADERS):
            state.current_category = line
            if debug:
                print(f"Found category: {state.current_category}")
            return

        if _commodity_token(line):
            label = _label_part(line)
            state.current_commodity = label or line
            if debug:
                print(f"Found commodity: {state.current_commodity}")
            # Grade lines normally carry no prices of their own
            if label == line:
                return

        commodity = state.current_commodity or "Rice"
        for prices in extract_price_groups(line):
            if len(prices) < 2:
                continue
            record = make_range(
                min(prices),
                max(prices),
                average_price=mean(prices),
                commodity=commodity,
                unit="per kg",
                category=commodity_category(commodity),
                **self.record_fields(state),
            )
            if record is None:
                continue
            out.ranges.append(record)
            if debug:
                print(f"Range: {commodity} - {record.min_price}-{record.max_price} "
                      f"PHP/kg (avg: {record.average_price:.2f})")
