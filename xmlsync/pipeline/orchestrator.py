"""
Sync orchestrator - runs fetch, decode, normalize, scan and reconcile.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from ..client.feed import FeedClient
from ..config import SyncConfig
from ..models.report import SyncReport
from ..storage import ListingStore

from .decoder import FeedDecoder
from .normalizer import normalize_listings
from .reconciler import Reconciler


logger = logging.getLogger(__name__)

BANNER_RULE = "=" * 26


def run_sync(
    config: SyncConfig,
    client: Optional[FeedClient] = None,
    store: Optional[ListingStore] = None,
) -> SyncReport:
    """
    Run one full sync.

    Pipeline steps:
    1. Fetch the feed
    2. Decode it into field bags
    3. Normalize the bags into listings
    4. Scan the content directory
    5. Reconcile (write, overwrite, delete)

    Steps 1-4 finish before anything on disk changes. Fetch, parse and scan
    errors propagate to the caller.

    Args:
        config: Resolved run configuration
        client: Feed client (built from config if None)
        store: Listing store (built from config if None)

    Returns:
        SyncReport with the reconciliation result
    """
    client = client or FeedClient(config.feed)
    store = store or ListingStore(config.store.content_dir, config.store.file_extension)

    report = SyncReport(
        run_id=str(uuid.uuid4())[:8],
        started_at=datetime.now(),
        feed_url=config.feed.url,
        content_dir=str(store.content_dir),
        dry_run=config.dry_run,
    )

    logger.info("Estate Index XML Sync Tool")
    logger.info(BANNER_RULE)
    logger.info(f"Feed URL: {config.feed.url}")
    logger.info(f"Content Dir: {store.content_dir}")
    if config.dry_run:
        logger.info("Mode: DRY RUN (no files will be written)")

    # Step 1: Fetch
    data = client.fetch(config.feed.url)
    report.bytes_fetched = len(data)

    # Step 2: Decode
    decoder = FeedDecoder()
    bags = decoder.decode(data)
    report.feed_shape = decoder.shape.value
    report.records_decoded = len(bags)

    # Step 3: Normalize
    listings = normalize_listings(bags)
    logger.info(f"Fetched {len(listings)} listings from feed")

    # Step 4: Scan
    existing = store.scan()
    logger.info(f"Found {len(existing)} existing listing files")

    # Step 5: Reconcile
    reconciler = Reconciler(store, dry_run=config.dry_run)
    report.result = reconciler.reconcile(listings, existing)
    report.completed_at = datetime.now()

    log_summary(report)
    return report


def log_summary(report: SyncReport) -> None:
    result = report.result
    logger.info(BANNER_RULE)
    logger.info("Summary:")
    logger.info(f"  Added:   {len(result.added)}")
    logger.info(f"  Updated: {len(result.updated)}")
    logger.info(f"  Removed: {len(result.removed)}")
    logger.info(f"  Total:   {result.total} listings")
    if result.has_failures:
        logger.warning(
            f"  Failed:  {len(result.write_failures)} writes, "
            f"{len(result.delete_failures)} deletes"
        )
    if report.dry_run:
        logger.info("DRY RUN - No files were written")
    logger.info("Run summary", extra={"fields": report.to_summary()})
