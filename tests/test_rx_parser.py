import pytest

from presyo.parsers.rx import RxParser, extract_price_groups

RX_BULLETIN = [
    "DA Region X Price Monitoring",
    "IMPORTED COMMERCIAL RICE",
    "Special",
    "Blue tag48.0050.0048.0046.0050.0046.00",
    "med(3-4pcs/kg)n/an/an/a200.00200.00200.00",
    "FISH",
    "Bangus",
    "160.00160.00160.00160.00160.00160.00",
]


def test_category_and_commodity_context(bulletin_date):
    prices, ranges = RxParser().parse(RX_BULLETIN, "RX", bulletin_date)

    assert prices == []
    assert len(ranges) == 3

    blue_tag = ranges[0]
    assert blue_tag.commodity == "Special"
    assert (blue_tag.min_price, blue_tag.max_price) == (46.0, 50.0)
    assert blue_tag.average_price == pytest.approx(48.0)
    assert blue_tag.category == "rice"

    sized = ranges[1]
    assert (sized.min_price, sized.max_price, sized.average_price) == (200.0, 200.0, 200.0)

    fish = ranges[2]
    assert fish.commodity == "Bangus"
    assert fish.category == "meat"
    assert fish.min_price == fish.max_price == 160.0


def test_average_is_mean_of_observed_prices(bulletin_date):
    lines = ["Premium (5% broken)45.0046.0047.0045.0046.0049.00"]
    ranges = RxParser().parse(lines, "RX", bulletin_date).ranges
    assert len(ranges) == 1
    assert ranges[0].commodity == "Premium (5% broken)"
    assert (ranges[0].min_price, ranges[0].max_price) == (45.0, 49.0)
    assert ranges[0].average_price == pytest.approx(278.0 / 6)


def test_commodity_defaults_to_rice(bulletin_date):
    ranges = RxParser().parse(["40.0041.0042.0040.0041.0042.00"], "RX", bulletin_date).ranges
    assert ranges[0].commodity == "Rice"


def test_tier_order():
    assert extract_price_groups("Red tag40.0041.0042.0043.0044.0045.00") == [
        [40.0, 41.0, 42.0, 43.0, 44.0, 45.0]]
    assert extract_price_groups("small(5-6pcs/kg)n/an/a180.00185.00") == [[180.0, 185.0]]
    assert extract_price_groups("large(1-2pcs/kg)220.00230.00n/a") == [[220.0, 230.0]]
    assert extract_price_groups("no prices here") == []


def test_single_price_group_is_not_a_range(bulletin_date):
    ranges = RxParser().parse(["tiny(8pcs/kg)n/an/an/an/an/a90.00"], "RX", bulletin_date).ranges
    assert ranges == []
