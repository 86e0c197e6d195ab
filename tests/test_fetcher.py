import asyncio
from datetime import date

import httpx
import pytest

from presyo.fetcher import (
    FetchError,
    fetch_newest_bulletin,
    find_bulletin_links,
    newest_link,
    save_bulletin,
)

PAGE = """
<html><body>
  <a href="/wp-content/uploads/2025/06/Daily-Price-Index-June-25-2025.pdf">June 25</a>
  <a href="https://www.da.gov.ph/wp-content/uploads/2025/06/Daily-Price-Index-June-26-2025.pdf">June 26</a>
  <a href="/wp-content/uploads/Daily-Price-Index-latest.pdf">undated</a>
  <a href="/about-us/">About</a>
</body></html>
"""

TARGET = "https://www.da.gov.ph/price-monitoring/"


def test_find_bulletin_links_keeps_dated_pdfs():
    links = find_bulletin_links(PAGE)
    assert [link.filename for link in links] == [
        "Daily-Price-Index-June-25-2025.pdf",
        "Daily-Price-Index-June-26-2025.pdf",
    ]
    assert links[0].href == "https://www.da.gov.ph/wp-content/uploads/2025/06/Daily-Price-Index-June-25-2025.pdf"
    assert newest_link(links).date == date(2025, 6, 26)
    assert newest_link([]) is None


def _run(handler):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_newest_bulletin(client, TARGET)
    return asyncio.run(go())


def test_fetch_newest_bulletin():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        if request.url.path == "/price-monitoring/":
            return httpx.Response(200, text=PAGE)
        return httpx.Response(200, content=b"%PDF-1.4")

    link, content = _run(handler)
    assert link.filename == "Daily-Price-Index-June-26-2025.pdf"
    assert content == b"%PDF-1.4"
    assert requested[-1] == link.href


def test_fetch_page_error():
    with pytest.raises(FetchError):
        _run(lambda request: httpx.Response(503))


def test_fetch_page_without_bulletins():
    with pytest.raises(FetchError):
        _run(lambda request: httpx.Response(200, text="<html></html>"))


def test_save_bulletin(tmp_path):
    path = save_bulletin(b"%PDF-1.4", "DPI-06262025.pdf", "da", "ncr", root=tmp_path)
    assert path == tmp_path / "DA" / "ncr" / "DPI-06262025.pdf"
    assert path.read_bytes() == b"%PDF-1.4"
