# ==============================================================================
# DOE FUEL PRICE PARSER
# ==============================================================================
#
# DOE retail pump price monitoring prints a fuel header on its own line
# (RON 95, DIESEL, ...) followed by the prices observed for that product.
#
# ==============================================================================

import re

from presyo.config import DOE_DEFAULT_DATE
from presyo.lexicon import fuel_family
from presyo.models import Source, make_price
from presyo.parsers.base import BulletinParser, ParseOutput, ParseState

FUEL_HEADER = re.compile(r'^(RON\s+\d+|DIESEL(?:\s+PLUS)?|KEROSENE)\s*$', re.IGNORECASE)
SECTION_BOUNDARY = re.compile(
    r'^(RON\s+\d+|DIESEL(?:\s+PLUS)?|KEROSENE|PROVINCE|CITY|MUNICIPALITY|PRODUCT)\s*$',
    re.IGNORECASE,
)
PRICE = re.compile(r'\d+\.\d{2}')
NOISE_WORDS = ('page', 'none', 'monitoring')

MAX_PUMP_PRICE = 200


class FuelParser(BulletinParser):
    source = Source.DOE
    default_date = DOE_DEFAULT_DATE
    min_line_length = 2
    name = "doe"

    def parse_line(self, line: str, state: ParseState, out: ParseOutput, debug: bool) -> None:
        header = FUEL_HEADER.match(line)
        if header:
            state.current_fuel_type = " ".join(header.group(1).upper().split())
            if debug:
                print(f"Found fuel type: {state.current_fuel_type}")
            return

        if SECTION_BOUNDARY.match(line):
            state.current_fuel_type = None
            return

        if not state.current_fuel_type:
            return

        lower = line.lower()
        if any(word in lower for word in NOISE_WORDS):
            return

        fuel_type = state.current_fuel_type
        for price_str in PRICE.findall(line):
            price = float(price_str)
            if price > MAX_PUMP_PRICE:
                continue
            record = make_price(
                price,
                commodity=fuel_type,
                unit="per liter",
                category=fuel_family(fuel_type),
                **self.record_fields(state),
            )
            if record is None:
                continue
            out.prices.append(record)
            if debug:
                print(f"Extracted: {fuel_type} - {price} PHP/L")
