# ==============================================================================
# LEXICONS
# ==============================================================================
#
# Static tables translating free-text tokens into canonical forms.
# Tables are ordered lists, not dicts: when two variants both match, the
# longest variant wins and ties go to the entry listed first.
#
# ==============================================================================

import re
from typing import Iterable, List, Optional, Sequence, Tuple

Entry = Tuple[str, Sequence[str]]


class Lexicon:
    """Ordered canonical -> variants table with exact-then-substring lookup"""

    def __init__(self, entries: Iterable[Entry], word_boundary: bool = True):
        self.entries: List[Entry] = [(canonical, tuple(v.lower() for v in variants))
                                     for canonical, variants in entries]
        self.word_boundary = word_boundary
        self._patterns = {}
        for _, variants in self.entries:
            for variant in variants:
                if word_boundary:
                    pattern = r'(?<![a-z0-9])' + re.escape(variant) + r'(?![a-z0-9])'
                else:
                    pattern = re.escape(variant)
                self._patterns[variant] = re.compile(pattern)

    def _variant_matches(self, variant: str, text: str) -> bool:
        # Single letters ("l") only count as the whole token or "per <letter>"
        if len(variant) == 1:
            return text == variant or text == f"per {variant}"
        return self._patterns[variant].search(text) is not None

    def lookup(self, raw: Optional[str]) -> Optional[str]:
        """Canonical value for raw, or None when nothing matches"""
        if not raw:
            return None
        text = " ".join(raw.lower().split())

        for canonical, variants in self.entries:
            if text in variants:
                return canonical

        best = None
        best_len = 0
        for canonical, variants in self.entries:
            for variant in variants:
                if len(variant) > best_len and self._variant_matches(variant, text):
                    best, best_len = canonical, len(variant)
        return best


# ------------------------------------------------------------------------------
# Regions
# ------------------------------------------------------------------------------

REGION_LEXICON = Lexicon([
    ('NCR', ['ncr', 'national capital region', 'metro manila']),
    ('CAR', ['car', 'cordillera administrative region', 'cordillera']),
    ('Region I', ['region i', 'region 1', 'ilocos region', 'ilocos']),
    ('Region II', ['region ii', 'region 2', 'cagayan valley']),
    ('Region III', ['region iii', 'region 3', 'central luzon']),
    ('Region IV-A', ['region iv-a', 'region 4a', 'region 4-a', 'calabarzon']),
    ('Region IV-B', ['region iv-b', 'region 4b', 'region 4-b', 'mimaropa']),
    ('Region V', ['region v', 'region 5', 'bicol region', 'bicol']),
    ('Region VI', ['region vi', 'region 6', 'western visayas']),
    ('Region VII', ['region vii', 'region 7', 'central visayas']),
    ('Region VIII', ['region viii', 'region 8', 'eastern visayas']),
    ('Region IX', ['region ix', 'region 9', 'zamboanga peninsula']),
    ('Region X', ['region x', 'region 10', 'northern mindanao']),
    ('Region XI', ['region xi', 'region 11', 'davao region']),
    ('Region XII', ['region xii', 'region 12', 'soccsksargen']),
    ('Region XIII', ['region xiii', 'region 13', 'caraga']),
    ('BARMM', ['barmm', 'bangsamoro autonomous region',
               'bangsamoro autonomous region in muslim mindanao']),
])

# Bulletin directory names under pdf/<AGENCY>/.../<region-dir>/
REGION_DIRECTORIES = {
    'ncr': 'NCR',
    'rx': 'RX',
    'region-i': 'Region I',
    'region-ii': 'Region II',
    'region-iii': 'Region III',
    'region-iv-a': 'Region IV-A',
    'region-iv-b': 'Region IV-B',
    'region-v': 'Region V',
    'region-vi': 'Region VI',
    'region-vii': 'Region VII',
    'region-viii': 'Region VIII',
    'region-ix': 'Region IX',
    'region-x': 'Region X',
    'region-xi': 'Region XI',
    'region-xii': 'Region XII',
    'car': 'CAR',
    'caraga': 'CARAGA',
    'barmm': 'BARMM',
    'luzon': 'Luzon',
    'visayas': 'Visayas',
    'mindanao': 'Mindanao',
}


def normalize_region(raw: Optional[str]) -> str:
    """Canonical region name; unknown names pass through trimmed"""
    if not raw:
        return ''
    return REGION_LEXICON.lookup(raw) or raw.strip()


def canonical_region(raw: Optional[str]) -> str:
    """Region from either a directory token ("rx", "region-iii") or free text"""
    if not raw:
        return ''
    return REGION_DIRECTORIES.get(raw.strip().lower()) or normalize_region(raw)


def region_from_directory(dirname: str) -> str:
    """Canonical region for a bulletin directory, upper-cased dir name if unknown"""
    key = dirname.strip().lower()
    if key in REGION_DIRECTORIES:
        return REGION_DIRECTORIES[key]
    return REGION_LEXICON.lookup(key.replace('-', ' ').replace('_', ' ')) or dirname.strip().upper()


# ------------------------------------------------------------------------------
# Sources
# ------------------------------------------------------------------------------

SOURCE_LEXICON = Lexicon([
    ('DTI', ['dti', 'department of trade and industry']),
    ('DA', ['da', 'department of agriculture']),
    ('DOE', ['doe', 'department of energy']),
    ('Local Market', ['local market', 'market']),
    ('Wholesale Market', ['wholesale']),
    ('Retail Market', ['retail']),
])


def normalize_source(raw: Optional[str]) -> str:
    if not raw or not raw.strip():
        return 'Unknown'
    return SOURCE_LEXICON.lookup(raw) or raw.strip()


# ------------------------------------------------------------------------------
# Units
# ------------------------------------------------------------------------------

UNIT_LEXICON = Lexicon([
    ('per kg', ['per kg', 'per kilogram', 'pcs/kg', 'kg', 'kilogram', 'kilo']),
    ('per gram', ['per gram', 'grams', 'gram', 'g']),
    ('per liter', ['per liter', 'per litre', 'per l', 'liter', 'litre', 'litro', 'l']),
    ('per piece', ['per piece', 'per pc', 'piece', 'pc', 'pcs']),
    ('per dozen', ['per dozen', 'per dz', 'dozen', 'dz']),
    ('per sack', ['per sack', 'sack', 'sacks']),
    ('per bundle', ['per bundle', 'bundle', 'bundles']),
], word_boundary=False)

DEFAULT_UNIT = 'per unit'


def extract_unit(raw: Optional[str]) -> str:
    """
    Canonical unit for a unit token or phrase.

    'per kilogram' -> 'per kg'. The bare letter 'l' only means liter when it
    is the whole token ('l' or 'per l'), so words that merely contain an
    'l' never resolve to 'per liter'.
    """
    return UNIT_LEXICON.lookup(raw) or DEFAULT_UNIT


# ------------------------------------------------------------------------------
# Commodity categories
# ------------------------------------------------------------------------------

CATEGORIES = ('rice', 'vegetables', 'fruits', 'meat', 'dairy', 'grains', 'sugar', 'oil', 'other')

CATEGORY_LEXICON = Lexicon([
    ('rice', ['rice', 'bigas', 'palay', 'white rice', 'brown rice', 'special', 'premium',
              'well milled', 'regular milled']),
    ('vegetables', ['vegetables', 'gulay', 'tomato', 'onion', 'garlic', 'potato', 'cabbage',
                    'carrot']),
    ('fruits', ['fruits', 'prutas', 'banana', 'apple', 'orange', 'mango', 'papaya']),
    ('meat', ['meat', 'karne', 'pork', 'beef', 'chicken', 'fish', 'bangus', 'tilapia',
              'galunggong']),
    ('dairy', ['dairy', 'milk', 'cheese', 'butter', 'eggs']),
    ('grains', ['grains', 'corn', 'wheat', 'flour']),
    ('sugar', ['sugar', 'asukal']),
    ('oil', ['oil', 'cooking oil', 'vegetable oil']),
], word_boundary=False)


def commodity_category(commodity: Optional[str]) -> str:
    return CATEGORY_LEXICON.lookup(commodity) or 'other'


# ------------------------------------------------------------------------------
# Fuel families (DOE)
# ------------------------------------------------------------------------------

FUEL_LEXICON = Lexicon([
    ('gasoline', ['gasoline', 'gas', 'unleaded', 'premium', 'regular', 'ron']),
    ('diesel', ['diesel', 'diesel plus', 'diesel fuel']),
    ('lpg', ['lpg', 'liquefied petroleum gas', 'cooking gas']),
    ('kerosene', ['kerosene', 'kero']),
    ('biodiesel', ['biodiesel', 'bio-diesel']),
    ('ethanol', ['ethanol', 'e10', 'e85']),
])


def fuel_family(fuel_type: str) -> str:
    return FUEL_LEXICON.lookup(fuel_type) or fuel_type.strip().lower()


# ------------------------------------------------------------------------------
# NCR market names
# ------------------------------------------------------------------------------

MARKET_NAMES = (
    'Agora Public Market', 'Balintawak', 'Bicutan Market', 'Cartimar Market',
    'Commonwealth Market', 'Dagonoy Market', 'Guadalupe Public Market',
    'Kamuning Public Market', 'La Huerta Market', 'New Las Piñas City Public Market',
    'Malabon Central Market', 'Mandaluyong Public Market', 'Marikina Public Market',
    'Maypajo Public Market', 'Mega Q-mart', 'Navotas Fish Port', 'Pasig City Market',
    'Quiapo Market', 'San Andres Market', 'Sta. Ana Market', 'Taguig Market',
    'Valenzuela Market', 'Vitas Market',
)


def match_market(line: str, markets: Sequence[str] = MARKET_NAMES) -> Optional[str]:
    """Longest known market name contained in the line, if any"""
    lower = line.lower()
    found = [m for m in markets if m.lower() in lower]
    if not found:
        return None
    return max(found, key=len)
