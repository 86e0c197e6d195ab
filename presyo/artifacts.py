# ==============================================================================
# JSON ARTIFACTS
# ==============================================================================
#
# latest_prices_<agency>.json              combined single prices
# latest_price_ranges_<agency>.json        combined ranges
# latest_prices_<agency>_<region>.json     per region
# latest_price_ranges_<agency>_<region>.json
#
# ==============================================================================

import json
import logging
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

PRICES = "prices"
RANGES = "price_ranges"

MAX_PAGE_LIMIT = 100


def region_slug(region: str) -> str:
    return re.sub(r'\s+', '_', region.strip().lower())


def artifact_path(output_dir: Path, agency: str, kind: str, region: Optional[str] = None) -> Path:
    name = f"latest_{kind}_{agency.lower()}"
    if region:
        name += f"_{region_slug(region)}"
    return Path(output_dir) / f"{name}.json"


def write_records(path: Path, records: Iterable[BaseModel]) -> int:
    rows = [r.to_json_dict() for r in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved %d entries to %s", len(rows), path)
    return len(rows)


def read_records(path: Path) -> List[Dict[str, Any]]:
    """Raises FileNotFoundError when the parser has not produced the file yet"""
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Artifact root must be a list: {path}")
    return data


# ==============================================================================
# PAGINATION
# ==============================================================================

def paginate(items: List[Any], page: int = 1, limit: int = 50) -> Dict[str, Any]:
    """Response envelope with a page of items and pagination metadata"""
    page = max(1, page)
    limit = max(1, min(limit, MAX_PAGE_LIMIT))
    total = len(items)
    total_pages = math.ceil(total / limit)
    skip = (page - 1) * limit

    return {
        "success": True,
        "message": "Success",
        "data": items[skip:skip + limit],
        "meta": {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": total_pages,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        },
    }
