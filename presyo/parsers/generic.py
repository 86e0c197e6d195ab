# ==============================================================================
# GENERIC PARSER (OTHER DA REGIONS)
# ==============================================================================
#
# Five single-line shapes, tried in order, first match wins:
#
#   1. Rice 45.50                 commodity price
#   2. Rice per kg 45.50          commodity unit price
#   3. 45.50 Rice                 price commodity
#   4. Rice 45.50-55.75           commodity min-max
#   5. Rice 45.50 55.75           commodity min max
#
# Every shape is anchored to the whole line so the range shapes are
# reachable instead of being shadowed by shape 1. A line that fits none of
# them falls back to its leading commodity and first price:
#
#   Special Rice 52.00 54.00 56.00
#   Onion 120.00/kg
#
# ==============================================================================

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from presyo.lexicon import UNIT_LEXICON, commodity_category, extract_unit
from presyo.models import make_price, make_range
from presyo.parsers.base import BulletinParser, ParseOutput, ParseState

_NUM = r'(?P<{}>\d+(?:\.\d{{1,2}})?)'
_COMMODITY = r'(?P<commodity>[A-Za-z][A-Za-z\s]*?)'
_UNIT_WORDS = r'(?:kg|g|liter|l|piece|pc|pcs)'
# Shape 1 must not swallow a trailing unit word into the commodity
_NO_UNIT_SUFFIX = (r'(?<!\bkg)(?<!\bg)(?<!\bliter)(?<!\bl)'
                   r'(?<!\bpiece)(?<!\bpc)(?<!\bpcs)')

HEADER_WORDS = ('page', 'monitoring', 'price', 'date', 'region', 'province')

PRICE_CEILING = 10000


@dataclass
class GenericMatch:
    commodity: str
    unit: str = "per kg"
    price: Optional[float] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


_COMMODITY_PRICE = _compile(r'^' + _COMMODITY + _NO_UNIT_SUFFIX + r'\s+' + _NUM.format('price') + r'$')
_COMMODITY_UNIT_PRICE = _compile(
    r'^' + _COMMODITY + r'\s+(?:per\s+)?(?P<unit>' + _UNIT_WORDS + r')\s+' + _NUM.format('price') + r'$')
_PRICE_COMMODITY = _compile(r'^' + _NUM.format('price') + r'\s+(?P<commodity>[A-Za-z][A-Za-z\s]*)$')
_COMMODITY_RANGE = _compile(
    r'^' + _COMMODITY + r'\s+' + _NUM.format('min') + r'\s*-\s*' + _NUM.format('max') + r'$')
_COMMODITY_MIN_MAX = _compile(
    r'^' + _COMMODITY + r'\s+' + _NUM.format('min') + r'\s+' + _NUM.format('max') + r'$')
# Prefix only: a price followed by more columns or unit text
_COMMODITY_PRICE_PREFIX = _compile(
    r'^' + _COMMODITY + _NO_UNIT_SUFFIX + r'\s+' + _NUM.format('price') + r'(?![\d.])')


def match_commodity_price(line: str) -> Optional[GenericMatch]:
    m = _COMMODITY_PRICE.match(line)
    return GenericMatch(m.group('commodity'), price=float(m.group('price'))) if m else None


def match_commodity_unit_price(line: str) -> Optional[GenericMatch]:
    m = _COMMODITY_UNIT_PRICE.match(line)
    if not m:
        return None
    return GenericMatch(m.group('commodity'), unit=extract_unit(m.group('unit')),
                        price=float(m.group('price')))


def match_price_commodity(line: str) -> Optional[GenericMatch]:
    m = _PRICE_COMMODITY.match(line)
    return GenericMatch(m.group('commodity'), price=float(m.group('price'))) if m else None


def match_commodity_range(line: str) -> Optional[GenericMatch]:
    m = _COMMODITY_RANGE.match(line)
    if not m:
        return None
    return GenericMatch(m.group('commodity'), min_price=float(m.group('min')),
                        max_price=float(m.group('max')))


def match_commodity_min_max(line: str) -> Optional[GenericMatch]:
    m = _COMMODITY_MIN_MAX.match(line)
    if not m:
        return None
    return GenericMatch(m.group('commodity'), min_price=float(m.group('min')),
                        max_price=float(m.group('max')))


def match_commodity_price_prefix(line: str) -> Optional[GenericMatch]:
    m = _COMMODITY_PRICE_PREFIX.match(line)
    if not m:
        return None
    trailing = line[m.end():].strip(" /")
    unit = UNIT_LEXICON.lookup(trailing) or "per kg"
    return GenericMatch(m.group('commodity'), unit=unit, price=float(m.group('price')))


LINE_SHAPES: List[Tuple[str, Callable[[str], Optional[GenericMatch]]]] = [
    ("commodity-price", match_commodity_price),
    ("commodity-unit-price", match_commodity_unit_price),
    ("price-commodity", match_price_commodity),
    ("commodity-range", match_commodity_range),
    ("commodity-min-max", match_commodity_min_max),
    ("commodity-price-prefix", match_commodity_price_prefix),
]


def match_line(line: str) -> Optional[Tuple[str, GenericMatch]]:
    for name, matcher in LINE_SHAPES:
        found = matcher(line)
        if found:
            return name, found
    return None


def is_header(commodity: str) -> bool:
    lower = commodity.lower()
    return len(commodity) < 2 or any(word in lower for word in HEADER_WORDS)


class GenericParser(BulletinParser):
    name = "generic"

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        found = match_line(line)
        if not found:
            return
        shape, match = found

        commodity = " ".join(match.commodity.split())
        if is_header(commodity):
            return

        category = commodity_category(commodity)
        fields = self.record_fields(state)

        if match.min_price is not None and match.max_price is not None:
            record = make_range(match.min_price, match.max_price, commodity=commodity,
                                unit=match.unit, category=category, **fields)
            if record is not None:
                out.ranges.append(record)
                if debug:
                    print(f"Range ({shape}): {commodity} - {match.min_price}-{match.max_price} PHP/{match.unit}")
            return

        if match.price is not None and match.price < PRICE_CEILING:
            record = make_price(match.price, commodity=commodity, unit=match.unit,
                                category=category, **fields)
            if record is not None:
                out.prices.append(record)
                if debug:
                    print(f"Single ({shape}): {commodity} - {match.price} PHP/{match.unit}")
