"""
Region / agency specific bulletin parsers.

parser_for() picks the layout parser for a bulletin:

    DA  + NCR   -> NcrParser      (market tables of min-max ranges)
    DA  + RX    -> RxParser       (category tables of glued prices)
    DA  + other -> GenericParser  (single-line commodity/price shapes)
    DOE         -> FuelParser
    DTI         -> SrpParser
"""

from presyo.parsers.base import BulletinParser, ParseOutput, ParseState
from presyo.parsers.doe import FuelParser
from presyo.parsers.dti import SrpParser
from presyo.parsers.generic import GenericParser
from presyo.parsers.ncr import NcrParser
from presyo.parsers.rx import RxParser

DA_REGION_PARSERS = {
    'NCR': NcrParser,
    'RX': RxParser,
}


def parser_for(agency: str, region: str) -> BulletinParser:
    agency = agency.upper()
    if agency == 'DOE':
        return FuelParser()
    if agency == 'DTI':
        return SrpParser()
    if agency == 'DA':
        return DA_REGION_PARSERS.get(region, GenericParser)()
    raise ValueError(f"Unknown agency: {agency}")


__all__ = [
    'BulletinParser',
    'ParseOutput',
    'ParseState',
    'FuelParser',
    'GenericParser',
    'NcrParser',
    'RxParser',
    'SrpParser',
    'parser_for',
]
