from datetime import date

import pytest
from fastapi.testclient import TestClient

import main
from presyo.artifacts import RANGES, artifact_path, write_records
from presyo.fetcher import BulletinLink, FetchError
from presyo.models import Source, make_range

BULLETIN_DATE = date(2025, 6, 26)


def _range(commodity, region, market=None, low=40.0, high=45.0):
    return make_range(low, high, commodity=commodity, source=Source.DA, region=region,
                      date=BULLETIN_DATE, market=market)


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    out = tmp_path / "output"
    monkeypatch.setenv("PRESYO_OUTPUT_DIR", str(out))
    return out


@pytest.fixture
def client(output_dir):
    return TestClient(main.app)


@pytest.fixture
def da_ranges(output_dir):
    records = [
        _range("Rice at Balintawak (Cloverleaf) Market", "NCR", "Balintawak (Cloverleaf) Market"),
        _range("Rice at Commonwealth Market", "NCR", "Commonwealth Market"),
        _range("Rice", "Region III", low=38.0, high=42.0),
    ]
    write_records(artifact_path(output_dir, "DA", RANGES), records)
    write_records(artifact_path(output_dir, "DA", RANGES, "NCR"), records[:2])
    return records


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Running" in resp.json()["message"]


def test_missing_artifact_is_404(client):
    resp = client.get("/api/v1/prices/da/ranges")
    assert resp.status_code == 404
    assert "Please run the DA parser first" in resp.json()["detail"]


def test_unknown_agency_is_404(client):
    assert client.get("/api/v1/prices/bsp").status_code == 404


def test_ranges_are_paginated(client, da_ranges):
    resp = client.get("/api/v1/prices/da/ranges", params={"page": 1, "limit": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 2
    assert body["data"][0]["minPrice"] == 40.0
    assert body["meta"]["pagination"]["totalPages"] == 2
    assert body["meta"]["pagination"]["hasNext"] is True


def test_invalid_page_is_rejected(client, da_ranges):
    assert client.get("/api/v1/prices/da/ranges", params={"limit": 0}).status_code == 422


def test_region_file(client, da_ranges):
    body = client.get("/api/v1/prices/DA/ranges/NCR").json()
    assert body["meta"]["pagination"]["total"] == 2


def test_region_falls_back_to_combined_artifact(client, da_ranges):
    resp = client.get("/api/v1/prices/da/ranges/Region%203")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [r["region"] for r in data] == ["Region III"]


def test_unknown_region_is_404(client, da_ranges):
    assert client.get("/api/v1/prices/da/ranges/Mars").status_code == 404


def test_market_lookup(client, da_ranges):
    data = client.get("/api/v1/prices/da/markets/balintawak").json()["data"]
    assert [r["market"] for r in data] == ["Balintawak (Cloverleaf) Market"]
    assert client.get("/api/v1/prices/da/markets/cubao").status_code == 404


def test_manual_html_upload(client, doe_html):
    resp = client.post(
        "/api/extract-manual",
        files={"file": ("fuel_06172025.html", doe_html.encode("utf-8"), "text/html")},
        data={"agency": "doe", "region": "luzon"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Success (Manual)"
    assert body["agency"] == "DOE"
    assert body["region"] == "Luzon"
    assert body["date_processed"] == "2025-06-17"
    assert len(body["prices"]) == 4
    assert body["prices"][0]["unit"] == "per liter"
    assert body["prices"][0]["hasRange"] is False
    assert body["price_ranges"] == []


def test_manual_upload_rejects_other_files(client):
    resp = client.post(
        "/api/extract-manual",
        files={"file": ("notes.txt", b"Rice 45.00", "text/plain")},
    )
    assert resp.status_code == 400


def test_manual_upload_rejects_corrupt_pdf(client):
    resp = client.post(
        "/api/extract-manual",
        files={"file": ("bulletin.pdf", b"not a pdf", "application/pdf")},
    )
    assert resp.status_code == 400


def test_scrape_reports_fetch_errors(client, monkeypatch):
    async def unreachable(client, target_url):
        raise FetchError("Fetch failed: connection refused")

    monkeypatch.setattr(main, "fetch_newest_bulletin", unreachable)
    resp = client.post("/api/scrape-new-pdf", json={})
    assert resp.status_code == 502
    assert "connection refused" in resp.json()["detail"]


def test_scrape_reports_undecodable_pdf(client, monkeypatch):
    async def garbage(client, target_url):
        link = BulletinLink("https://www.da.gov.ph/x/DPI-06262025.pdf", "DPI-06262025.pdf",
                            BULLETIN_DATE)
        return link, b"garbage"

    monkeypatch.setattr(main, "fetch_newest_bulletin", garbage)
    assert client.post("/api/scrape-new-pdf", json={}).status_code == 502
