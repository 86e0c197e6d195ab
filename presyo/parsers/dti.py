# ==============================================================================
# DTI SRP BULLETIN PARSER
# ==============================================================================
#
# Suggested Retail Price bulletins are one product per line:
#
#     Argentina Corned Beef 150g 35.75
#     Century Tuna Flakes in Oil 30.25 155g
#     Bear Brand Powdered Milk 33g 12
#     Lucky Me Pancit Canton 15.50
#
# ==============================================================================

import re
from typing import List, Optional, Tuple

from presyo.config import DTI_DEFAULT_DATE
from presyo.lexicon import commodity_category
from presyo.models import Source, make_price
from presyo.parsers.base import BulletinParser, ParseOutput, ParseState

_SIZE = r'(?P<unit>\d+(?:\.\d+)?\s?(?:g|ml|pcs|L|kg))'

# Tried in order, first match wins
LINE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("commodity-unit-price", re.compile(r'^(?P<commodity>.*?)\s+' + _SIZE + r'\s+(?P<price>\d+\.\d{2})$', re.IGNORECASE)),
    ("commodity-price-unit", re.compile(r'^(?P<commodity>.*?)\s+(?P<price>\d+\.\d{2})\s+' + _SIZE + r'$', re.IGNORECASE)),
    ("commodity-unit-price-loose", re.compile(r'^(?P<commodity>.*?)\s+' + _SIZE + r'\s+(?P<price>\d+(?:\.\d{1,2})?)$', re.IGNORECASE)),
    ("commodity-price", re.compile(r'^(?P<commodity>.*?)\s+(?P<price>\d+(?:\.\d{1,2})?)$', re.IGNORECASE)),
]

BOILERPLATE = ('page', 'srp', 'bulletin')


def match_line(line: str) -> Optional[Tuple[str, str, str, float]]:
    """(shape, commodity, unit, price) for the first pattern that fits"""
    for shape, pattern in LINE_PATTERNS:
        m = pattern.match(line)
        if m:
            unit = m.groupdict().get('unit') or 'unit'
            return shape, m.group('commodity'), unit.strip(), float(m.group('price'))
    return None


class SrpParser(BulletinParser):
    source = Source.DTI
    default_date = DTI_DEFAULT_DATE
    min_line_length = 5
    name = "dti"

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        found = match_line(line)
        if not found:
            return
        shape, commodity, unit, price = found

        commodity = " ".join(commodity.split())
        lower = commodity.lower()
        if len(commodity) < 2 or any(word in lower for word in BOILERPLATE):
            return

        record = make_price(
            price,
            commodity=commodity,
            unit=unit,
            category=commodity_category(commodity),
            **self.record_fields(state),
        )
        if record is None:
            return
        out.prices.append(record)
        if debug:
            print(f"Matched ({shape}): {commodity} | {unit} | {price}")
