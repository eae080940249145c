"""
Tests for the full sync run.
"""
import logging
from pathlib import Path

import pytest

from xmlsync.config import load_config
from xmlsync.errors import FeedFetchError, FeedParseError
from xmlsync.pipeline.orchestrator import run_sync
from xmlsync.storage import ListingStore

FIXTURES = Path(__file__).parent / "fixtures"


class FakeClient:
    """Returns canned bytes instead of hitting the network."""

    def __init__(self, data: bytes = b"", error: Exception = None):
        self.data = data
        self.error = error
        self.urls: list[str] = []

    def fetch(self, url=None) -> bytes:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.data


@pytest.fixture
def content_dir(tmp_path) -> Path:
    return tmp_path / "content" / "listings"


def _config(content_dir: Path, dry_run: bool = False):
    return load_config(
        feed_url="https://feeds.example.com/listings.xml",
        content_dir=content_dir,
        dry_run=dry_run,
        override_file=None,
    )


class TestRunSync:
    """Tests for run_sync."""

    def test_first_run_adds_everything(self, content_dir):
        """Against an empty store every listing is an ADD."""
        client = FakeClient((FIXTURES / "nested_feed.xml").read_bytes())

        report = run_sync(_config(content_dir), client=client)

        assert client.urls == ["https://feeds.example.com/listings.xml"]
        assert report.feed_shape == "nested"
        assert report.records_decoded == 3
        assert report.bytes_fetched > 0
        assert report.result.added == ["IPA-1001", "Lake-House", "IPA-1003"]
        assert report.result.total == 3
        assert report.completed_at is not None
        assert ListingStore(content_dir).scan() == {"IPA-1001", "Lake-House", "IPA-1003"}

    def test_second_run_updates_and_removes(self, content_dir):
        """Stale pages are removed, current ones updated."""
        store = ListingStore(content_dir)
        store.scan()
        (content_dir / "OLD-1.md").write_text("---\nid: OLD-1\n---\n")
        (content_dir / "C-1.md").write_text("---\nid: C-1\n---\n")

        client = FakeClient((FIXTURES / "client_feed.xml").read_bytes())
        report = run_sync(_config(content_dir), client=client)

        assert report.result.updated == ["C-1"]
        assert report.result.added == ["C-2", "Quiet-Cabin"]
        assert report.result.removed == ["OLD-1"]
        assert store.scan() == {"C-1", "C-2", "Quiet-Cabin"}
        assert "Harbour Loft" in (content_dir / "C-1.md").read_text(encoding="utf-8")

    def test_dry_run_writes_nothing(self, content_dir):
        """Dry run creates the directory but writes no pages."""
        client = FakeClient((FIXTURES / "flat_feed.xml").read_bytes())

        report = run_sync(_config(content_dir, dry_run=True), client=client)

        assert report.dry_run is True
        assert report.result.counts == {"added": 3, "updated": 0, "removed": 0, "total": 3}
        assert list(content_dir.iterdir()) == []

    def test_fetch_error_propagates(self, content_dir):
        """A fetch failure aborts before the store is scanned."""
        client = FakeClient(error=FeedFetchError("https://feeds.example.com/listings.xml", status_code=500))

        with pytest.raises(FeedFetchError):
            run_sync(_config(content_dir), client=client)

        assert not content_dir.exists()

    def test_parse_error_leaves_store_untouched(self, content_dir):
        """Malformed feeds never delete existing pages."""
        content_dir.mkdir(parents=True)
        (content_dir / "keep.md").write_text("x")

        with pytest.raises(FeedParseError):
            run_sync(_config(content_dir), client=FakeClient(b"<properties><property>"))

        assert (content_dir / "keep.md").exists()

    def test_logs_actions_and_summary(self, content_dir, caplog):
        """The run log lists every action and the final counts."""
        caplog.set_level(logging.INFO, logger="xmlsync")
        client = FakeClient((FIXTURES / "flat_feed.xml").read_bytes())

        run_sync(_config(content_dir), client=client)

        assert "[ADD] F-1: Harbour Loft" in caplog.text
        assert "Fetched 3 listings from feed" in caplog.text
        assert "Added:   3" in caplog.text

    def test_summary_record_carries_fields(self, content_dir, caplog):
        """The closing summary record holds the counts as structured fields."""
        caplog.set_level(logging.INFO, logger="xmlsync")
        client = FakeClient((FIXTURES / "flat_feed.xml").read_bytes())

        report = run_sync(_config(content_dir), client=client)

        record = next(r for r in caplog.records if r.getMessage() == "Run summary")
        assert record.fields["run_id"] == report.run_id
        assert record.fields["added"] == 3
        assert record.fields["failures"] == 0
