"""
Pydantic models for the XML sync.
All data contracts are defined here.
"""

from .listing import Listing, RawFieldBag, PRICE_PLACEHOLDER
from .report import ReconciliationResult, SyncReport

__all__ = [
    # Listing
    "Listing",
    "RawFieldBag",
    "PRICE_PLACEHOLDER",
    # Report
    "ReconciliationResult",
    "SyncReport",
]
