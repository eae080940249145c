"""Pipeline modules for the feed sync."""

from .decoder import FeedDecoder, FeedShape, decode_feed
from .normalizer import normalize_listing, normalize_listings
from .reconciler import Reconciler, plan_reconciliation
from .orchestrator import run_sync

__all__ = [
    "FeedDecoder",
    "FeedShape",
    "decode_feed",
    "normalize_listing",
    "normalize_listings",
    "Reconciler",
    "plan_reconciliation",
    "run_sync",
]
