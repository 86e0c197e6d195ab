# ==============================================================================
# BULLETIN TEXT EXTRACTION
# ==============================================================================
#
# Thin adapters around pypdf (PDF bulletins) and BeautifulSoup (HTML
# bulletins). Anything structurally wrong with the input surfaces as a
# BulletinReadError / BulletinDecodeError so the orchestrator can skip the
# file and carry on with the batch.
#
# ==============================================================================

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

from bs4 import BeautifulSoup
from pypdf import PdfReader

from presyo.errors import BulletinDecodeError, BulletinReadError

logger = logging.getLogger(__name__)

PDF_SUFFIXES = {'.pdf'}
HTML_SUFFIXES = {'.html', '.htm'}
BULLETIN_SUFFIXES = PDF_SUFFIXES | HTML_SUFFIXES

# Elements whose text should start on a fresh line
_BLOCK_TAGS = ['p', 'div', 'br', 'tr', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'table']


def extract_pdf_content(pdf_bytes: bytes) -> str:
    """Extracts raw text from PDF"""
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        text = ""
        for page in reader.pages:
            extracted = page.extract_text()
            if extracted:
                text += f"\n{extracted}\n"
    except Exception as e:
        # pypdf surfaces malformed input as anything from PdfReadError to
        # IndexError, RecursionError or zlib.error
        raise BulletinDecodeError(f"Could not parse PDF: {e}") from e
    logger.debug("Extracted %d characters from %d pages", len(text), len(reader.pages))
    return text


def extract_html_content(html: Union[str, bytes]) -> str:
    """Extracts visible text from an HTML bulletin, one block per line"""
    try:
        soup = BeautifulSoup(html, 'lxml')
    except (ValueError, TypeError) as e:
        raise BulletinDecodeError(f"Could not parse HTML: {e}") from e

    for tag in soup(['script', 'style', 'noscript']):
        tag.decompose()

    for row in soup.find_all('tr'):
        cells = [c.get_text(" ", strip=True) for c in row.find_all(['td', 'th'])]
        row.replace_with(soup.new_string("\n" + " ".join(c for c in cells if c) + "\n"))

    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    return soup.get_text()


def read_bulletin(path: Union[str, Path]) -> str:
    """Reads a bulletin file and returns its raw text"""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise BulletinReadError(f"Could not read bulletin file {path}: {e}") from e

    suffix = path.suffix.lower()
    if suffix in HTML_SUFFIXES:
        return extract_html_content(data)
    if suffix in PDF_SUFFIXES:
        return extract_pdf_content(data)
    raise BulletinDecodeError(f"Unsupported bulletin type: {path.name}")
