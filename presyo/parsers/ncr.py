# ==============================================================================
# NCR PARSER (MARKET TABLES)
# ==============================================================================
#
# NCR Bantay Presyo bulletins list a market name on its own line followed by
# rows of min-max price ranges. pdf text extraction often glues several
# ranges together with no separator, e.g.
#
#     45.00-48.007.00-8.00
#     37.00-45.00140.00-150.00180.00-200.007.00-7.80
#
# ==============================================================================

import re
from typing import Callable, List, Optional, Sequence, Tuple

from presyo.lexicon import MARKET_NAMES, commodity_category, match_market
from presyo.models import make_range
from presyo.parsers.base import BulletinParser, ParseOutput, ParseState

_NUM = r'(\d+(?:\.\d{1,2})?)'
_RANGE = _NUM + r'\s*-\s*' + _NUM

# Most complex tier first; at any position the widest run of glued
# ranges is consumed in one go.
RANGE_TIERS: List[Tuple[str, re.Pattern]] = [
    ("four-ranges", re.compile(_RANGE * 4)),
    ("two-ranges", re.compile(_RANGE * 2)),
    ("single-range", re.compile(_RANGE)),
]
_SINGLE = RANGE_TIERS[-1][1]
# 06-26-2025 in "As of 06-26-2025" is a date, not a 6-26 range
_DATE_RUN = re.compile(r'(?<![\d.])\d{1,2}-\d{1,2}-\d{4}(?![\d.])')

# Leading words before the first range, e.g. "Special 45.00-48.00"
_LEADING_LABEL = re.compile(r'^([A-Za-z][A-Za-z .,/()%-]*?)\s*(?=\d)')
_LABEL_BLACKLIST = ('page', 'price', 'commodity', 'market', 'date', 'range')

LabelRule = Callable[[Optional[str]], str]


def rice_label(market: Optional[str]) -> str:
    """NCR bulletins in this dataset are rice-only tables"""
    return f"Rice at {market}" if market else "Rice"


def scan_ranges(line: str) -> List[Tuple[float, float]]:
    """All (min, max) pairs in the line, left to right"""
    dates = [m.span() for m in _DATE_RUN.finditer(line)]
    pairs: List[Tuple[float, float]] = []
    pos = 0
    while True:
        first = _SINGLE.search(line, pos)
        if not first:
            break
        start = first.start()
        in_date = next((end for s, end in dates if s <= start < end), None)
        if in_date is not None:
            pos = in_date
            continue
        for _name, tier in RANGE_TIERS:
            m = tier.match(line, start)
            if not m:
                continue
            groups = m.groups()
            for i in range(0, len(groups), 2):
                pairs.append((float(groups[i]), float(groups[i + 1])))
            pos = m.end()
            break
    return pairs


def leading_label(line: str) -> Optional[str]:
    m = _LEADING_LABEL.match(line)
    if not m:
        return None
    label = m.group(1).strip(" .,-")
    if len(label) < 2 or any(word in label.lower() for word in _LABEL_BLACKLIST):
        return None
    return label


class NcrParser(BulletinParser):
    name = "ncr"

    def __init__(
        self,
        markets: Sequence[str] = MARKET_NAMES,
        label_rule: LabelRule = rice_label,
    ):
        self.markets = markets
        self.label_rule = label_rule

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        if match_market(line, self.markets):
            state.current_market = line
            if debug:
                print(f"Found market: {state.current_market}")
            return

        pairs = scan_ranges(line)
        if not pairs:
            return

        token = leading_label(line)
        commodity = token or self.label_rule(state.current_market)
        category = commodity_category(token or "rice")

        for min_price, max_price in pairs:
            record = make_range(
                min_price,
                max_price,
                commodity=commodity,
                unit="per kg",
                category=category,
                market=state.current_market,
                **self.record_fields(state),
            )
            if record is None:
                continue
            out.ranges.append(record)
            if debug:
                print(f"Range: {commodity} - {min_price}-{max_price} PHP/kg at {state.current_market}")
