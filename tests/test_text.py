from presyo.text import normalize, normalize_line


def test_normalize_trims_and_single_spaces():
    lines = normalize("  Rice   per\tkg   45.00  \r\nSugar\x07 60.00\n")
    assert lines == ("Rice per kg 45.00", "Sugar 60.00", "")


def test_normalize_strips_peso_sign_and_unifies_dashes():
    assert normalize_line("₱45.00 – ₱48.00") == "45.00 - 48.00"
    assert normalize_line("Php 52.00") == "52.00"


def test_normalize_is_restartable():
    lines = normalize("a\nb")
    assert list(lines) == list(lines) == ["a", "b"]


def test_undecodable_bytes_degrade_to_empty_lines():
    lines = normalize(b"RON 95\n\xff\xfe\xfa\n56.49")
    assert lines == ("RON 95", "", "56.49")


def test_empty_input():
    assert normalize("") == ()
    assert normalize(None) == ()
