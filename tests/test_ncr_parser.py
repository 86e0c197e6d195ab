from presyo.parsers.ncr import NcrParser, leading_label, scan_ranges
from presyo.text import normalize


def test_market_context_and_glued_ranges(ncr_lines, bulletin_date):
    prices, ranges = NcrParser().parse(ncr_lines, "NCR", bulletin_date, filename="ncr.pdf")

    assert prices == []
    assert [(r.min_price, r.max_price, r.average_price) for r in ranges] == [
        (45.0, 48.0, 46.5),
        (42.0, 46.0, 44.0),
        (50.0, 55.0, 52.5),
    ]
    first = ranges[0]
    assert first.commodity == "Rice at Balintawak (Cloverleaf) Market"
    assert first.market == "Balintawak (Cloverleaf) Market"
    assert first.unit == "per kg"
    assert first.category == "rice"
    assert first.region == "NCR"
    assert first.filename == "ncr.pdf"
    assert ranges[2].market == "Commonwealth Market"


def test_market_line_alone_emits_nothing(bulletin_date):
    out = NcrParser().parse(["Commonwealth Market"], "NCR", bulletin_date)
    assert out.prices == [] and out.ranges == []


def test_inverted_range_is_dropped(bulletin_date):
    out = NcrParser().parse(["Commonwealth Market", "50.00-45.00"], "NCR", bulletin_date)
    assert out.ranges == []


def test_four_glued_ranges_are_emitted_once():
    line = "37.00-45.00140.00-150.00180.00-200.007.00-7.80"
    assert scan_ranges(line) == [(37.0, 45.0), (140.0, 150.0), (180.0, 200.0), (7.0, 7.8)]


def test_ranges_separated_by_spaces():
    assert scan_ranges("45.00 - 48.00   52 - 55") == [(45.0, 48.0), (52.0, 55.0)]


def test_leading_token_overrides_default_label(bulletin_date):
    lines = normalize("Quiapo Market\nSpecial 52.00-56.00")
    ranges = NcrParser().parse(lines, "NCR", bulletin_date).ranges
    assert len(ranges) == 1
    assert ranges[0].commodity == "Special"
    assert ranges[0].market == "Quiapo Market"


def test_leading_label_ignores_headers():
    assert leading_label("Price Range 45.00-48.00") is None
    assert leading_label("45.00-48.00") is None
    assert leading_label("Well milled 40.00-42.00") == "Well milled"


def test_custom_label_rule(bulletin_date):
    parser = NcrParser(label_rule=lambda market: f"Commodity ({market or 'unknown'})")
    ranges = parser.parse(["40.00-42.00"], "NCR", bulletin_date).ranges
    assert ranges[0].commodity == "Commodity (unknown)"
    assert ranges[0].market is None


def test_state_does_not_leak_between_bulletins(bulletin_date):
    parser = NcrParser()
    parser.parse(["Quiapo Market", "40.00-42.00"], "NCR", bulletin_date)
    ranges = parser.parse(["40.00-42.00"], "NCR", bulletin_date).ranges
    assert ranges[0].commodity == "Rice"
    assert ranges[0].market is None


def test_date_in_header_is_not_a_range(bulletin_date):
    assert scan_ranges("As of 06-26-2025") == []
    lines = ["As of 06-26-2025", "Quiapo Market", "45.00-48.00 as of 6-26-2025"]
    ranges = NcrParser().parse(lines, "NCR", bulletin_date).ranges
    assert [(r.min_price, r.max_price) for r in ranges] == [(45.0, 48.0)]
