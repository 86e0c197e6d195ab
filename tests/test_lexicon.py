import pytest

from presyo.lexicon import (
    canonical_region,
    commodity_category,
    extract_unit,
    fuel_family,
    match_market,
    normalize_region,
    normalize_source,
    region_from_directory,
)


@pytest.mark.parametrize("raw, expected", [
    ("metro manila", "NCR"),
    ("NCR", "NCR"),
    ("Region 7", "Region VII"),
    ("  Central Visayas ", "Region VII"),
    ("Prices for Region 10", "Region X"),
    ("Neverland", "Neverland"),
])
def test_normalize_region(raw, expected):
    assert normalize_region(raw) == expected


def test_normalize_region_empty():
    assert normalize_region("") == ""
    assert normalize_region(None) == ""


def test_canonical_region_understands_directory_tokens():
    assert canonical_region("rx") == "RX"
    assert canonical_region("ncr") == "NCR"
    assert canonical_region("region 7") == "Region VII"


def test_region_from_directory():
    assert region_from_directory("region-iii") == "Region III"
    assert region_from_directory("central-luzon") == "Region III"
    assert region_from_directory("luzon") == "Luzon"
    assert region_from_directory("zamboanga") == "ZAMBOANGA"


@pytest.mark.parametrize("raw, expected", [
    ("per kilogram", "per kg"),
    ("pcs/kg", "per kg"),
    ("kilogram pack", "per kg"),
    ("L", "per liter"),
    ("per l", "per liter"),
    ("Lettuce", "per unit"),
    ("per piece", "per piece"),
    (None, "per unit"),
])
def test_extract_unit(raw, expected):
    assert extract_unit(raw) == expected


def test_normalize_source():
    assert normalize_source("") == "Unknown"
    assert normalize_source("Department of Trade and Industry") == "DTI"
    assert normalize_source("da") == "DA"
    assert normalize_source("Barangay Co-op") == "Barangay Co-op"


def test_commodity_category():
    assert commodity_category("Special rice") == "rice"
    assert commodity_category("Tomato") == "vegetables"
    assert commodity_category("Widget") == "other"
    assert commodity_category(None) == "other"


def test_fuel_family():
    assert fuel_family("DIESEL PLUS") == "diesel"
    assert fuel_family("RON 91") == "gasoline"
    assert fuel_family("KEROSENE") == "kerosene"


def test_match_market_prefers_longest_name():
    assert match_market("Balintawak (Cloverleaf) Market") == "Balintawak"
    assert match_market("Cartimar Market Pasay") == "Cartimar Market"
    assert match_market("45.00-48.00") is None
