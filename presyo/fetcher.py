# ==============================================================================
# BULLETIN FETCHER
# ==============================================================================
#
# Finds the newest Daily Price Index PDF on the DA price monitoring page and
# downloads it, optionally saving it under the pdf/<AGENCY>/<region>/
# convention so the orchestrator picks it up on the next run.
#
# ==============================================================================

import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from presyo import config
from presyo.dates import match_date

logger = logging.getLogger(__name__)

PDF_LINK = re.compile(r'(Daily-Price-Index|DPI|Price-Monitoring|Bantay).*?\.pdf$', re.IGNORECASE)


@dataclass(frozen=True)
class BulletinLink:
    href: str
    filename: str
    date: date


class FetchError(Exception):
    """Remote page or bulletin could not be retrieved"""


def find_bulletin_links(html: str, base_url: str = config.BASE_URL) -> List[BulletinLink]:
    """PDF links whose filename carries a resolvable date"""
    soup = BeautifulSoup(html, 'lxml')
    links = []
    for a in soup.find_all('a', href=PDF_LINK):
        href = a.get('href')
        f_name = href.split('/')[-1]
        f_date = match_date(f_name)
        if f_date:
            links.append(BulletinLink(urljoin(base_url, href), f_name, f_date))
    return links


def newest_link(links: List[BulletinLink]) -> Optional[BulletinLink]:
    if not links:
        return None
    return max(links, key=lambda link: link.date)


async def fetch_newest_bulletin(
    client: httpx.AsyncClient,
    target_url: str = config.TARGET_URL,
) -> tuple:
    """
    Returns (BulletinLink, pdf_bytes) for the newest bulletin on the page.

    Process:
    1. Fetch the price monitoring page
    2. Collect PDF links with a date in their filename
    3. Download the newest one
    """
    try:
        resp = await client.get(target_url, headers=config.HEADERS)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Fetch failed: {e}") from e

    link = newest_link(find_bulletin_links(resp.text))
    if link is None:
        raise FetchError("No dated price bulletin PDFs found.")

    logger.info("Downloading: %s", link.href)
    try:
        pdf_resp = await client.get(link.href, headers=config.HEADERS)
        pdf_resp.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to download PDF from {link.href}: {e}") from e

    return link, pdf_resp.content


def save_bulletin(content: bytes, filename: str, agency: str, region_dir: str,
                  root: Optional[Path] = None) -> Path:
    root = config.pdf_dir() if root is None else Path(root)
    target = root / agency.upper() / region_dir / filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info("Saved bulletin to %s", target)
    return target
