import json

import pytest

from worker import handle_request


@pytest.fixture
def env(pdf_tree, tmp_path, monkeypatch):
    out = tmp_path / "output"
    monkeypatch.setenv("PRESYO_PDF_DIR", str(pdf_tree))
    monkeypatch.setenv("PRESYO_OUTPUT_DIR", str(out))
    return out


@pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'{"agency": "BSP"}', b"{}"])
def test_invalid_requests_are_dropped(body, env):
    assert handle_request(body) is None


def test_parse_request_writes_artifacts(env):
    payload = handle_request(json.dumps({"agency": "doe"}).encode())

    assert payload["status"] == "SUCCESS"
    assert payload["agency"] == "DOE"
    assert payload["prices"] == 5
    assert payload["regions"]["Luzon"] == {"prices": 4, "ranges": 0}
    assert payload["failures"] == []
    assert (env / "latest_prices_doe.json").exists()
    json.dumps(payload)


def test_request_for_agency_without_bulletins(env):
    payload = handle_request(b'{"agency": "DA"}')
    assert payload["status"] == "NO_BULLETINS"
    assert payload["prices"] == 0
    assert not (env / "latest_prices_da.json").exists()
