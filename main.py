# ==============================================================================
# PRESYO PRICE SERVICE - FASTAPI READ & EXTRACTION API
# ==============================================================================
#
# Serves the JSON artifacts written by the bulletin parser:
#   1. Paginated DA / DOE / DTI prices and price ranges read from output/
#   2. Per-region and per-market range lookups
#   3. Manual upload of a single bulletin (PDF or HTML)
#   4. On-demand scrape of the newest DA bulletin
#
# ==============================================================================

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import httpx
from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from presyo import __version__, config
from presyo.artifacts import PRICES, RANGES, artifact_path, paginate, read_records
from presyo.dates import resolve_date
from presyo.errors import BulletinDecodeError
from presyo.extract import extract_html_content, extract_pdf_content
from presyo.fetcher import FetchError, fetch_newest_bulletin
from presyo.lexicon import canonical_region, normalize_region
from presyo.models import PriceRangeRecord, PriceRecord
from presyo.orchestrator import AGENCIES
from presyo.parsers import parser_for
from presyo.text import normalize

logger = logging.getLogger(__name__)

app = FastAPI(title="Presyo Price Bulletin Service", version=__version__)


# ==============================================================================
# DATA MODELS
# ==============================================================================

class ExtractionResponse(BaseModel):
    """Records parsed from one bulletin"""
    status: str
    date_processed: Optional[str] = None
    original_url: str
    agency: str
    region: str
    prices: List[PriceRecord]
    price_ranges: List[PriceRangeRecord]


class ScrapeRequest(BaseModel):
    """Request body for scraping endpoint"""
    target_url: str = Field(config.TARGET_URL)
    region: str = Field("National", description="Region the bulletin covers")


# ==============================================================================
# HELPERS
# ==============================================================================

def _agency_or_404(agency: str) -> str:
    agency = agency.upper()
    if agency not in AGENCIES:
        raise HTTPException(404, f"Unknown agency: {agency}")
    return agency


def _not_available(agency: str) -> HTTPException:
    return HTTPException(
        404,
        f"{agency} price data not available. Please run the {agency} parser first.",
    )


def _load(path: Path, agency: str) -> list:
    try:
        return read_records(path)
    except FileNotFoundError:
        raise _not_available(agency)


def _parse_text(raw_text: str, agency: str, region: str, filename: str) -> ExtractionResponse:
    parser = parser_for(agency, region)
    date = resolve_date(filename, parser.default_date)
    prices, ranges = parser.parse(normalize(raw_text), region, date, filename=filename)
    return ExtractionResponse(
        status="Success",
        date_processed=date.isoformat(),
        original_url=filename,
        agency=agency,
        region=region,
        prices=prices,
        price_ranges=ranges,
    )


# ==============================================================================
# READ ENDPOINTS
# ==============================================================================

@app.get("/api/v1/prices/{agency}")
def get_prices(agency: str, page: int = Query(1, ge=1), limit: int = Query(50, ge=1)):
    """Latest single-value prices for an agency"""
    agency = _agency_or_404(agency)
    records = _load(artifact_path(config.output_dir(), agency, PRICES), agency)
    return paginate(records, page, limit)


@app.get("/api/v1/prices/{agency}/ranges")
def get_price_ranges(agency: str, page: int = Query(1, ge=1), limit: int = Query(50, ge=1)):
    """Latest price ranges for an agency (max 100 per page)"""
    agency = _agency_or_404(agency)
    records = _load(artifact_path(config.output_dir(), agency, RANGES), agency)
    return paginate(records, page, limit)


@app.get("/api/v1/prices/{agency}/ranges/{region}")
def get_price_ranges_by_region(
    agency: str,
    region: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
):
    """
    Price ranges for one region.

    Reads the per-region artifact; when it is missing, filters the combined
    artifact instead.
    """
    agency = _agency_or_404(agency)
    output_dir = config.output_dir()
    try:
        records = read_records(artifact_path(output_dir, agency, RANGES, region))
    except FileNotFoundError:
        all_records = _load(artifact_path(output_dir, agency, RANGES), agency)
        wanted = {region.lower(), normalize_region(region).lower()}
        records = [r for r in all_records if str(r.get("region", "")).lower() in wanted]
        if not records:
            raise HTTPException(404, f"No data found for region: {region}")
    return paginate(records, page, limit)


@app.get("/api/v1/prices/{agency}/markets/{market}")
def get_price_ranges_by_market(
    agency: str,
    market: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
):
    """Price ranges whose market contains the given name (case-insensitive)"""
    agency = _agency_or_404(agency)
    all_records = _load(artifact_path(config.output_dir(), agency, RANGES), agency)
    needle = market.lower()
    records = [r for r in all_records if r.get("market") and needle in r["market"].lower()]
    if not records:
        raise HTTPException(404, f"No data found for market: {market}")
    return paginate(records, page, limit)


# ==============================================================================
# EXTRACTION ENDPOINTS
# ==============================================================================

@app.post("/api/extract-manual", response_model=ExtractionResponse, response_model_by_alias=True)
async def extract_manual_pdf(
    file: UploadFile = File(...),
    agency: str = Form("DA"),
    region: str = Form("National"),
):
    """
    Manually upload and parse a bulletin (PDF or HTML)

    Useful for:
    - Processing archived bulletins
    - Testing with specific documents
    """
    agency = agency.upper()
    if agency not in AGENCIES:
        raise HTTPException(400, f"Unknown agency: {agency}")

    content = await file.read()
    filename = file.filename or "upload"
    try:
        if file.content_type == 'application/pdf' or filename.lower().endswith('.pdf'):
            text = extract_pdf_content(content)
        elif file.content_type == 'text/html' or filename.lower().endswith(('.html', '.htm')):
            text = extract_html_content(content)
        else:
            raise HTTPException(400, "File must be PDF or HTML")
    except BulletinDecodeError as e:
        raise HTTPException(400, str(e))

    response = _parse_text(text, agency, canonical_region(region), filename)
    response.status = "Success (Manual)"
    return response


@app.post("/api/scrape-new-pdf", response_model=ExtractionResponse, response_model_by_alias=True)
async def scrape_new_pdf_data(request: ScrapeRequest):
    """
    Scrapes the newest Daily Price Index PDF from DA website

    Process:
    1. Fetches HTML from DA price monitoring page
    2. Finds all dated bulletin PDF links
    3. Downloads and parses the newest one
    """
    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as client:
        try:
            link, content = await fetch_newest_bulletin(client, request.target_url)
        except FetchError as e:
            raise HTTPException(502, str(e))

    try:
        text = extract_pdf_content(content)
    except BulletinDecodeError as e:
        raise HTTPException(502, str(e))

    response = _parse_text(text, "DA", canonical_region(request.region), link.filename)
    response.original_url = link.href
    return response


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "message": "Presyo Price Bulletin Service is Running",
        "time": datetime.now().isoformat(timespec="seconds"),
    }


# ==============================================================================
# DEPLOYMENT CONFIGURATION
# ==============================================================================

if __name__ == "__main__":
    import uvicorn

    config.configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
