"""
Configuration and environment handling for the XML sync.
"""
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = (
    "https://www.xml2u.com/Xml/International%20Property%20Alerts_3968/7212_Default.xml"
)
DEFAULT_OVERRIDE_FILE = Path("xml_feed.txt")


class FeedConfig(BaseModel):
    """Where and how to fetch the feed."""
    url: str = Field(default_factory=lambda: os.getenv("XMLSYNC_FEED_URL", DEFAULT_FEED_URL))
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("XMLSYNC_REQUEST_TIMEOUT", "30")),
        description="Seconds before the GET is abandoned",
    )
    user_agent: str = Field(default="estate-index-xmlsync/1.0")
    override_file: Optional[Path] = Field(
        default=DEFAULT_OVERRIDE_FILE,
        description="One-line file whose content replaces the feed URL when present; None disables it",
    )


class StoreConfig(BaseModel):
    """Target directory of listing pages."""
    content_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("XMLSYNC_CONTENT_DIR", "./content/listings"))
    )
    file_extension: str = Field(default=".md")


class SyncConfig(BaseModel):
    """Main configuration."""
    feed: FeedConfig = Field(default_factory=FeedConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    dry_run: bool = Field(default=False)
    json_logs: bool = Field(default_factory=lambda: os.getenv("XMLSYNC_JSON_LOGS", "") == "1")
    report_path: Optional[Path] = Field(default=None, description="Write the run report here as JSON")


def resolve_feed_url(feed_url: str, override_file: Optional[Path] = DEFAULT_OVERRIDE_FILE) -> str:
    """
    Return the feed URL to use for this run.

    A non-empty override file takes precedence over every other source.
    """
    if override_file is None:
        return feed_url
    try:
        candidate = Path(override_file).read_text(encoding="utf-8").strip()
    except OSError:
        return feed_url
    if candidate:
        logger.debug(f"Feed URL overridden by {override_file}")
        return candidate
    return feed_url


def load_config(
    feed_url: Optional[str] = None,
    content_dir: Optional[Path] = None,
    dry_run: bool = False,
    override_file: Optional[Path] = DEFAULT_OVERRIDE_FILE,
    json_logs: Optional[bool] = None,
    report_path: Optional[Path] = None,
) -> SyncConfig:
    """
    Build the run configuration from defaults, environment and explicit values.

    The override file is read here, once, so the pipeline only ever sees the
    final URL.
    """
    config = SyncConfig(dry_run=dry_run, report_path=report_path)

    if feed_url:
        config.feed.url = feed_url
    if content_dir is not None:
        config.store.content_dir = Path(content_dir)
    if json_logs is not None:
        config.json_logs = json_logs

    config.feed.override_file = Path(override_file) if override_file is not None else None
    config.feed.url = resolve_feed_url(config.feed.url, config.feed.override_file)

    return config
