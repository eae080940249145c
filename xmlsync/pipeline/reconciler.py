"""
Reconciler - diffs the normalized feed against the listings on disk.
"""
import logging
from typing import Iterable, Optional

from ..errors import RecordDeleteError, RecordWriteError
from ..models.listing import Listing
from ..models.report import ReconciliationResult
from ..storage import ListingStore


logger = logging.getLogger(__name__)


def plan_reconciliation(
    listings: list[Listing],
    existing: Iterable[str],
) -> ReconciliationResult:
    """
    Classify every id as ADD, UPDATE or REMOVE.

    Pure function of the two snapshots; nothing is written. ADD and UPDATE
    follow feed order, REMOVE is sorted.

    Args:
        listings: Listings from the current feed
        existing: Ids already present in the store

    Returns:
        ReconciliationResult with disjoint id lists
    """
    existing_ids = set(existing)
    current_ids: set[str] = set()
    result = ReconciliationResult(total=len(listings))

    for listing in listings:
        if listing.id in current_ids:
            continue
        current_ids.add(listing.id)
        if listing.id in existing_ids:
            result.updated.append(listing.id)
        else:
            result.added.append(listing.id)

    result.removed = sorted(existing_ids - current_ids)
    return result


class Reconciler:
    """
    Applies a reconciliation plan to a listing store.

    Every ADD and UPDATE is an unconditional overwrite. Per-listing I/O
    failures are logged and recorded on the result; they never stop the run.
    """

    def __init__(self, store: ListingStore, dry_run: bool = False):
        self.store = store
        self.dry_run = dry_run

    def reconcile(
        self,
        listings: list[Listing],
        existing: Iterable[str],
        timestamp: Optional[int] = None,
    ) -> ReconciliationResult:
        """
        Sync the store with the current feed.

        Classification is computed in full before the first file is touched.

        Args:
            listings: Listings from the current feed, in feed order
            existing: Ids found by the store scan
            timestamp: Page date to write (defaults to now)

        Returns:
            ReconciliationResult, identical in dry-run and live mode apart
            from the failure lists
        """
        result = plan_reconciliation(listings, existing)
        added = set(result.added)
        seen: set[str] = set()

        for listing in listings:
            if listing.id in seen:
                logger.warning(f"Duplicate id {listing.id} in feed, later entry overwrites earlier one")
            seen.add(listing.id)

            action = "ADD" if listing.id in added else "UPDATE"
            logger.info(f"[{action}] {listing.id}: {listing.title}")

            if self.dry_run:
                continue
            try:
                self.store.write(listing, timestamp)
            except RecordWriteError as e:
                logger.error(str(e))
                if listing.id not in result.write_failures:
                    result.write_failures.append(listing.id)

        for listing_id in result.removed:
            logger.info(f"[REMOVE] {listing_id}")

            if self.dry_run:
                continue
            try:
                self.store.delete(listing_id)
            except RecordDeleteError as e:
                logger.error(str(e))
                result.delete_failures.append(listing_id)

        return result
