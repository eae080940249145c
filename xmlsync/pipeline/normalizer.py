"""
Field normalizer - converts raw feed field bags to canonical Listings.

Every canonical field is looked up through a chain of tag paths used by the
different feed layouts; the first non-empty value wins.
"""
import hashlib
import json
import re
from typing import Iterable, Optional

from ..models.listing import PRICE_PLACEHOLDER, Listing, RawFieldBag


ID_KEYS = ("propertyid", "property_id", "id", "@id", "@propertyid", "reference", "ref")
TITLE_KEYS = ("description/title", "title", "name", "headline")
DESCRIPTION_KEYS = ("description/description", "description", "details", "body")
PRICE_KEYS = ("price/price", "price/value", "price/amount", "price", "askingprice")
CURRENCY_KEYS = ("price/currency", "currency")
LOCATION_KEYS = ("address/location", "location", "address/city", "city", "town")
COUNTRY_KEYS = ("address/country", "country")
TYPE_KEYS = ("description/propertytype", "propertytype", "property_type", "type")
BEDROOM_KEYS = ("description/bedrooms", "bedrooms", "beds")
BATHROOM_KEYS = ("description/fullbathrooms", "fullbathrooms", "bathrooms", "baths")
YEAR_BUILT_KEYS = ("description/yearbuilt", "yearbuilt", "year_built")
FLOOR_SIZE_KEYS = (
    "description/floorsize/floorsize",
    "floorsize/floorsize",
    "floorsize",
    "floor_size",
)
FLOOR_UNIT_KEYS = (
    "description/floorsize/floorsizeunits",
    "floorsize/floorsizeunits",
    "floorsizeunits",
    "floor_size_units",
)
FEATURE_KEYS = ("description/features/feature", "features/feature", "features")

# Primary list first, then the alternate names seen in flatter feeds
IMAGE_KEYS = (
    "images/image/image",
    "images/image/url",
    "images/image",
    "images",
    "photos/photo",
    "photos",
    "pictures/picture",
    "pictures",
    "image",
    "photo",
    "picture",
    "mainimage",
)

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "€": "€",
    "GBP": "£",
    "£": "£",
}
KNOWN_SYMBOLS = ("$", "€", "£")
DEFAULT_SYMBOL = "$"

CDATA_MARKERS = ("<![CDATA[", "]]>")

_FEATURE_SPLIT_RE = re.compile(r"[,;\n]")
_UNSAFE_ID_RE = re.compile(r"[\s/\\]")


def _values(bag: RawFieldBag, key: str) -> list[str]:
    value = bag.get(key)
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first_value(bag: RawFieldBag, keys: Iterable[str]) -> str:
    """Return the first non-empty trimmed value found under any of ``keys``."""
    for key in keys:
        for value in _values(bag, key):
            text = value.strip()
            if text:
                return text
    return ""


def derive_listing_id(raw_id: str, title: str, bag: Optional[RawFieldBag] = None) -> str:
    """
    Choose the storage id for a listing.

    The feed id wins; otherwise the title with spaces turned into hyphens
    (title casing is kept). When both are missing a digest of the field bag
    keeps the id stable between runs.
    """
    listing_id = raw_id.strip() or title.strip().replace(" ", "-")
    if not listing_id:
        payload = json.dumps(bag or {}, sort_keys=True, ensure_ascii=False)
        listing_id = "listing-" + hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]
    return _UNSAFE_ID_RE.sub("-", listing_id)


def format_price(price: str, currency: str = "") -> str:
    """
    Format a price for display.

    >>> format_price("250000", "EUR")
    '€250000'
    >>> format_price("")
    'Contact for pricing'
    """
    price = price.strip()
    if not price:
        return PRICE_PLACEHOLDER

    # If price already has a symbol, don't add another
    if price.startswith(KNOWN_SYMBOLS):
        return price

    symbol = CURRENCY_SYMBOLS.get(currency.strip().upper(), DEFAULT_SYMBOL)
    return symbol + price


def clean_description(text: str) -> str:
    """Trim and drop CDATA markers that leaked through as literal text."""
    text = text.strip()
    for marker in CDATA_MARKERS:
        text = text.replace(marker, "")
    return text.strip()


def format_area(size: str, unit: str) -> str:
    if size and unit:
        return f"{size} {unit}"
    return ""


def split_features(text: str) -> list[str]:
    """Split a delimited feature string on commas, semicolons and newlines."""
    tokens = (token.strip() for token in _FEATURE_SPLIT_RE.split(text))
    return [token for token in tokens if token]


def extract_features(bag: RawFieldBag) -> list[str]:
    for key in FEATURE_KEYS:
        value = bag.get(key)
        if value is None:
            continue
        if isinstance(value, list):
            features = [item.strip() for item in value if item.strip()]
        else:
            features = split_features(value)
        if features:
            return features
    return []


def dedupe(items: Iterable[str]) -> list[str]:
    """Drop repeated strings, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def collect_images(sources: Iterable[Iterable[str]]) -> list[str]:
    """
    Combine image URLs from several sources.

    Each raw value may hold several whitespace-separated URLs.
    """
    urls = []
    for source in sources:
        for value in source:
            urls.extend(value.split())
    return dedupe(urls)


def extract_images(bag: RawFieldBag) -> list[str]:
    return collect_images(_values(bag, key) for key in IMAGE_KEYS)


def normalize_listing(bag: RawFieldBag) -> Listing:
    """
    Convert a raw field bag to a canonical Listing.

    Never fails: fields that cannot be derived stay empty (or the price
    placeholder).
    """
    title = first_value(bag, TITLE_KEYS)

    return Listing(
        id=derive_listing_id(first_value(bag, ID_KEYS), title, bag),
        title=title,
        description=clean_description(first_value(bag, DESCRIPTION_KEYS)),
        price=format_price(first_value(bag, PRICE_KEYS), first_value(bag, CURRENCY_KEYS)),
        location=first_value(bag, LOCATION_KEYS),
        country=first_value(bag, COUNTRY_KEYS),
        listing_type=first_value(bag, TYPE_KEYS),
        bedrooms=first_value(bag, BEDROOM_KEYS),
        bathrooms=first_value(bag, BATHROOM_KEYS),
        area=format_area(first_value(bag, FLOOR_SIZE_KEYS), first_value(bag, FLOOR_UNIT_KEYS)),
        year_built=first_value(bag, YEAR_BUILT_KEYS),
        features=extract_features(bag),
        images=extract_images(bag),
    )


def normalize_listings(bags: Iterable[RawFieldBag]) -> list[Listing]:
    """
    Normalize a sequence of field bags, keeping feed order.
    """
    return [normalize_listing(bag) for bag in bags]
