"""
Listing store - one markdown file with YAML front matter per listing.
"""
import logging
import time
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import RecordDeleteError, RecordWriteError, StoreScanError
from .models.listing import Listing


logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
EMPTY_BODY = "Premium property listing."


def _optional(value: str) -> Optional[str]:
    return value if value else None


def build_front_matter(listing: Listing, timestamp: Optional[int] = None) -> dict[str, Any]:
    """
    Build the front matter mapping for a listing page.

    Keys keep the names the site templates read. Images and features are
    only present when non-empty; countries, locations and types are one-item
    taxonomy lists used for the site's index pages.
    """
    if timestamp is None:
        timestamp = int(time.time())

    data: dict[str, Any] = {
        "title": _optional(listing.title),
        "description": _optional(listing.description),
        "id": listing.id,
        "price": _optional(listing.price),
        "location": _optional(listing.location),
        "country": _optional(listing.country),
        "listingtype": _optional(listing.listing_type),
        "bedrooms": _optional(listing.bedrooms),
        "bathrooms": _optional(listing.bathrooms),
        "area": _optional(listing.area),
        "yearbuilt": _optional(listing.year_built),
        "date": timestamp,
        "draft": False,
    }

    if listing.images:
        data["images"] = list(listing.images)
    if listing.features:
        data["features"] = list(listing.features)

    # Taxonomies
    if listing.country:
        data["countries"] = [listing.country]
    if listing.location:
        data["locations"] = [listing.location]
    if listing.listing_type:
        data["types"] = [listing.listing_type]

    return data


def render_listing(listing: Listing, timestamp: Optional[int] = None) -> str:
    """Serialize a listing as a markdown page with YAML front matter."""
    front_matter = yaml.safe_dump(
        build_front_matter(listing, timestamp),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )
    body = listing.description or EMPTY_BODY
    return f"{FRONT_MATTER_DELIMITER}\n{front_matter}{FRONT_MATTER_DELIMITER}\n\n{body}"


class ListingStore:
    """
    Directory of listing pages.
    A listing with id ``X`` lives in ``<content_dir>/X<extension>``.
    """

    def __init__(self, content_dir: Path, extension: str = ".md"):
        self.content_dir = Path(content_dir)
        self.extension = extension

    def path_for(self, listing_id: str) -> Path:
        return self.content_dir / f"{listing_id}{self.extension}"

    def scan(self) -> set[str]:
        """
        Return the ids of listings already on disk.

        A missing directory is created and scans as empty.

        Raises:
            StoreScanError: if the directory exists but cannot be listed
        """
        try:
            entries = list(self.content_dir.iterdir())
        except FileNotFoundError:
            logger.info(f"Content directory {self.content_dir} does not exist, creating it")
            try:
                self.content_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreScanError(self.content_dir, e) from e
            return set()
        except OSError as e:
            raise StoreScanError(self.content_dir, e) from e

        existing = set()
        for entry in entries:
            stem = entry.name[: -len(self.extension)]
            if stem and entry.name.endswith(self.extension) and entry.is_file():
                existing.add(stem)
        return existing

    def write(self, listing: Listing, timestamp: Optional[int] = None) -> Path:
        """
        Write (or overwrite) the page for a listing.

        Raises:
            RecordWriteError: on any I/O failure
        """
        path = self.path_for(listing.id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_listing(listing, timestamp), encoding="utf-8")
        except OSError as e:
            raise RecordWriteError(listing.id, path, e) from e
        return path

    def delete(self, listing_id: str) -> Path:
        """
        Remove the page for a listing.

        Raises:
            RecordDeleteError: on any I/O failure
        """
        path = self.path_for(listing_id)
        try:
            path.unlink()
        except OSError as e:
            raise RecordDeleteError(listing_id, path, e) from e
        return path
