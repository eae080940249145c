"""
Tests for the command-line entry point.
"""
import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from xmlsync.cli import build_parser, main
from xmlsync.errors import FeedFetchError, StoreScanError

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def restore_logging():
    logger = logging.getLogger("xmlsync")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.feed is None
        assert args.dry_run is False
        assert args.json_logs is None
        assert args.override_file == Path("xml_feed.txt")

    def test_flags(self):
        args = build_parser().parse_args(["--feed", "u", "--content", "c", "--dry-run", "--json-logs"])

        assert args.feed == "u"
        assert args.content == Path("c")
        assert args.dry_run is True
        assert args.json_logs is True


class TestMain:
    """Tests for main()."""

    def test_success_writes_report(self, tmp_path):
        """A successful run exits 0 and writes the JSON report."""
        content_dir = tmp_path / "listings"
        report_path = tmp_path / "reports" / "sync.json"
        data = (FIXTURES / "flat_feed.xml").read_bytes()

        with patch("xmlsync.client.feed.FeedClient.fetch", return_value=data):
            code = main([
                "--feed", "https://feeds.example.com/listings.xml",
                "--content", str(content_dir),
                "--no-override",
                "--report", str(report_path),
            ])

        assert code == 0
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["feed_url"] == "https://feeds.example.com/listings.xml"
        assert report["feed_shape"] == "flat"
        assert report["result"]["added"] == ["F-1", "F-2", "F-3"]
        assert (content_dir / "F-1.md").exists()

    @pytest.mark.parametrize(
        "error",
        [
            FeedFetchError("https://feeds.example.com/listings.xml", status_code=404),
            StoreScanError(Path("/nowhere"), PermissionError("denied")),
        ],
    )
    def test_fatal_errors_exit_non_zero(self, tmp_path, error):
        """Fatal errors are logged and turn into exit code 1."""
        with patch("xmlsync.cli.run_sync", side_effect=error):
            code = main(["--content", str(tmp_path), "--no-override"])

        assert code == 1

    def test_dry_run_flag_reaches_pipeline(self, tmp_path):
        """--dry-run leaves the content directory empty."""
        content_dir = tmp_path / "listings"
        data = (FIXTURES / "client_feed.xml").read_bytes()

        with patch("xmlsync.client.feed.FeedClient.fetch", return_value=data):
            code = main(["--content", str(content_dir), "--no-override", "--dry-run"])

        assert code == 0
        assert list(content_dir.iterdir()) == []
