"""HTTP client for the listing feed."""

from .feed import FeedClient

__all__ = ["FeedClient"]
