# ==============================================================================
# DATA MODELS
# ==============================================================================

import math
from datetime import date as Date
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class Source(str, Enum):
    """Government agency that published the bulletin"""
    DA = "DA"
    DTI = "DTI"
    DOE = "DOE"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Dict using the artifact field names (minPrice, hasRange, ...)"""
        return self.model_dump(by_alias=True, mode="json")


class PriceRecord(_Record):
    """Single-value price entry"""
    commodity: str = Field(..., description="Commodity label as printed in the bulletin")
    unit: str = Field("per kg", description="Canonical unit, e.g. 'per kg', 'per liter'")
    price: float = Field(..., description="Price in PHP")
    source: Source
    region: str
    date: Date
    category: Optional[str] = Field(None, description="Commodity category or fuel family")
    has_range: bool = Field(False, alias="hasRange")
    filename: Optional[str] = None

    @model_validator(mode="after")
    def _check_price(self) -> "PriceRecord":
        if not math.isfinite(self.price) or self.price <= 0:
            raise ValueError(f"price must be a finite positive number, got {self.price}")
        return self


class PriceRangeRecord(_Record):
    """Price expressed as a min/max band"""
    commodity: str
    unit: str = "per kg"
    min_price: float = Field(..., alias="minPrice")
    max_price: float = Field(..., alias="maxPrice")
    average_price: float = Field(..., alias="averagePrice")
    source: Source
    region: str
    date: Date
    category: str = "other"
    has_range: bool = Field(True, alias="hasRange")
    filename: Optional[str] = None
    market: Optional[str] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "PriceRangeRecord":
        if not _valid_bounds(self.min_price, self.max_price):
            raise ValueError(f"invalid range {self.min_price}-{self.max_price}")
        return self


def _valid_bounds(min_price: float, max_price: float) -> bool:
    return (
        math.isfinite(min_price)
        and math.isfinite(max_price)
        and 0 < min_price <= max_price
    )


# ==============================================================================
# FACTORIES
# ==============================================================================
#
# Parsers build records through these helpers. An invalid candidate comes
# back as None and is simply not emitted.
#
# ==============================================================================

def make_price(price: float, **fields: Any) -> Optional[PriceRecord]:
    if not math.isfinite(price) or price <= 0:
        return None
    try:
        return PriceRecord(price=price, **fields)
    except ValidationError:
        return None


def make_range(
    min_price: float,
    max_price: float,
    average_price: Optional[float] = None,
    **fields: Any,
) -> Optional[PriceRangeRecord]:
    if not _valid_bounds(min_price, max_price):
        return None
    if average_price is None:
        average_price = (min_price + max_price) / 2
    try:
        return PriceRangeRecord(
            min_price=min_price,
            max_price=max_price,
            average_price=average_price,
            **fields,
        )
    except ValidationError:
        return None
