"""
Feed client - one synchronous GET per run.
"""
import logging
from typing import Optional

import requests

from ..config import FeedConfig
from ..errors import FeedFetchError


logger = logging.getLogger(__name__)


class FeedClient:
    """
    Downloads the raw feed document.
    Returns the body as bytes; XML decoding is left to the decoder.
    """

    def __init__(self, config: Optional[FeedConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or FeedConfig()
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.config.user_agent
        self.session = session

    def fetch(self, url: Optional[str] = None) -> bytes:
        """
        Fetch the feed.

        Args:
            url: Feed URL (defaults to the configured one)

        Returns:
            Raw response body

        Raises:
            FeedFetchError: on transport errors or a non-2xx status
        """
        url = url or self.config.url
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise FeedFetchError(url, cause=e) from e

        if not 200 <= response.status_code < 300:
            raise FeedFetchError(url, status_code=response.status_code)

        body = response.content
        logger.debug(f"Fetched {len(body)} bytes from {url}")
        return body
