"""
Listing models - raw feed field bags and the canonical listing.
"""
from typing import Union

from pydantic import BaseModel, Field, field_validator

# Lowercased tag path -> text, or list of texts for repeated elements.
RawFieldBag = dict[str, Union[str, list[str]]]

PRICE_PLACEHOLDER = "Contact for pricing"


class Listing(BaseModel):
    """
    Canonical property listing.
    This is the internal representation written to the content directory.
    Empty strings mean the feed did not supply a value.
    """
    id: str
    title: str = ""
    description: str = ""
    price: str = PRICE_PLACEHOLDER
    location: str = ""
    country: str = ""
    listing_type: str = ""
    bedrooms: str = ""
    bathrooms: str = ""
    area: str = ""
    year_built: str = ""
    features: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        """Ids are used as file names, so they must be non-empty and contain no spaces."""
        if not v or not v.strip():
            raise ValueError("listing id must not be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"listing id must not contain whitespace: {v!r}")
        return v

    @field_validator("price")
    @classmethod
    def check_price(cls, v: str) -> str:
        return v or PRICE_PLACEHOLDER
