# ==============================================================================
# PARSER BASE
# ==============================================================================

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Tuple

from presyo.config import DA_DEFAULT_DATE
from presyo.models import PriceRangeRecord, PriceRecord, Source


@dataclass
class ParseState:
    """Rolling context for one bulletin parse pass"""
    region: str
    date: date
    filename: Optional[str] = None
    current_market: Optional[str] = None
    current_category: Optional[str] = None
    current_commodity: Optional[str] = None
    current_fuel_type: Optional[str] = None


@dataclass
class ParseOutput:
    prices: List[PriceRecord] = field(default_factory=list)
    ranges: List[PriceRangeRecord] = field(default_factory=list)

    def extend(self, other: "ParseOutput") -> None:
        self.prices.extend(other.prices)
        self.ranges.extend(other.ranges)

    def as_tuple(self) -> Tuple[List[PriceRecord], List[PriceRangeRecord]]:
        return self.prices, self.ranges

    def __iter__(self):
        # prices, ranges = parser.parse(...)
        return iter(self.as_tuple())


class BulletinParser:
    """
    Line-by-line parser for one bulletin layout.

    Subclasses implement parse_line(). A fresh ParseState is created for
    every parse() call, so one instance can be reused across bulletins and
    threads.
    """

    source: Source = Source.DA
    default_date: date = DA_DEFAULT_DATE
    min_line_length = 3
    name = "base"

    def parse(
        self,
        lines: Iterable[str],
        region: str,
        date: date,
        debug: bool = False,
        filename: Optional[str] = None,
    ) -> ParseOutput:
        state = ParseState(region=region, date=date, filename=filename)
        out = ParseOutput()

        if debug:
            print(f"\n=== Processing {region} region ({self.name}) ===")
            print(f"Date: {date}")

        for i, raw in enumerate(lines):
            line = raw.strip()
            if len(line) < self.min_line_length:
                continue
            if debug:
                print(f"Line {i}: {line}")
            self.parse_line(line, state, out, debug)

        return out

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        raise NotImplementedError

    def record_fields(self, state: ParseState) -> dict:
        """Fields shared by every record emitted for this bulletin"""
        return {
            "source": self.source,
            "region": state.region,
            "date": state.date,
            "filename": state.filename,
        }
