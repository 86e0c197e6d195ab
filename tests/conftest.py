"""Shared fixtures for the presyo test suite."""

from datetime import date
from pathlib import Path

import pytest


@pytest.fixture
def bulletin_date() -> date:
    return date(2025, 6, 26)


@pytest.fixture
def ncr_lines() -> list:
    return [
        "Department of Agriculture",
        "Bantay Presyo - NCR",
        "Balintawak (Cloverleaf) Market",
        "45.00-48.00",
        "Commonwealth Market",
        "42.00-46.0050.00-55.00",
        "Page 1 of 2",
    ]


@pytest.fixture
def doe_html() -> str:
    return (
        "<html><body>"
        "<p>Retail Pump Prices</p>"
        "<p>RON 95</p><p>56.49</p><p>58.49</p>"
        "<p>DIESEL</p><p>52.10 53.25</p>"
        "<p>PROVINCE</p><p>61.00</p>"
        "</body></html>"
    )


@pytest.fixture
def pdf_tree(tmp_path: Path, doe_html: str) -> Path:
    """pdf/ root with a couple of HTML bulletins laid out by agency/region"""
    root = tmp_path / "pdf"
    luzon = root / "DOE" / "luzon"
    luzon.mkdir(parents=True)
    (luzon / "fuel_prices_06172025.html").write_text(doe_html, encoding="utf-8")

    visayas = root / "DOE" / "visayas"
    visayas.mkdir(parents=True)
    (visayas / "fuel_prices_2025-06-24.html").write_text(
        "<p>KEROSENE</p><p>70.15</p>", encoding="utf-8"
    )
    return root
