# catalog/schemas/product.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Stored as NUMERIC(p, 2); rendered as plain JSON numbers
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

_CENTS = Decimal("0.01")


def _coerce_amount(v: Any, field: str) -> Decimal:
    """
    Accepts JSON numbers and numeric strings, returns a Decimal quantized to 2 places.
    Booleans, blanks, NaN/Infinity and anything unparsable are rejected.
    """
    if isinstance(v, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError(f"{field} is required")
    if not isinstance(v, (int, float, str, Decimal)):
        raise ValueError(f"{field} must be a number")
    try:
        d = Decimal(str(v)) if not isinstance(v, Decimal) else v
        if not d.is_finite():
            raise ValueError(f"{field} must be a finite number")
        return d.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"{field} must be a number")


def _strip_required(v: str, field: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field} must not be empty")
    return v


class ProductBase(BaseModel):
    """Fields shared by create, update and read; updates replace all of them."""
    name: str = Field(..., min_length=1, max_length=255)
    collection: str = Field(..., min_length=1, max_length=255)
    scent_family: str = Field(..., min_length=1, max_length=255)
    size_ml: Amount = Field(..., gt=0, max_digits=10, decimal_places=2)
    price_thb: Amount = Field(..., ge=0, max_digits=12, decimal_places=2)
    description: Optional[str] = ""
    image_url: Optional[str] = Field("", max_length=1024)

    # --- Validators ---
    @field_validator("name", "collection", "scent_family")
    @classmethod
    def _text_strip_nonempty(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    @field_validator("size_ml", "price_thb", mode="before")
    @classmethod
    def _amount_coerce(cls, v: Any, info) -> Decimal:
        return _coerce_amount(v, info.field_name)

    @field_validator("description", "image_url")
    @classmethod
    def _optional_text(cls, v: Optional[str]) -> str:
        # missing and null both end up as ""
        if v is None:
            return ""
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Heritage Oud",
                    "collection": "Siam Heritage",
                    "scent_family": "Woody",
                    "size_ml": 50,
                    "price_thb": 3290,
                    "description": "Smoky oud with a jasmine heart",
                    "image_url": "https://example.com/heritage-oud.jpg",
                }
            ]
        }
    )


class ProductCreate(ProductBase):
    """Payload for creating a product."""
    pass


class ProductUpdate(ProductBase):
    """Payload for PUT: a full replacement, every required field must be sent again."""
    pass


class ProductRead(ProductBase):
    """Product as returned by the API."""
    id: int
    model_config = ConfigDict(from_attributes=True)
