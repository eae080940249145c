"""
Command-line entry point for the XML sync.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_OVERRIDE_FILE, load_config
from .errors import FATAL_ERRORS
from .log import configure_logging
from .pipeline.orchestrator import run_sync


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xmlsync",
        description="Sync property listings from an XML feed into a content directory.",
    )
    parser.add_argument("--feed", help="XML feed URL")
    parser.add_argument("--content", type=Path, help="Content directory")
    parser.add_argument("--dry-run", action="store_true", help="Dry run mode")
    parser.add_argument(
        "--override-file",
        type=Path,
        default=DEFAULT_OVERRIDE_FILE,
        help="File whose content replaces the feed URL when present (default: %(default)s)",
    )
    parser.add_argument("--no-override", action="store_true", help="Ignore the override file")
    parser.add_argument("--report", type=Path, help="Write the run report as JSON to this path")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Log one JSON object per line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run a sync and return the process exit code."""
    args = build_parser().parse_args(argv)

    config = load_config(
        feed_url=args.feed,
        content_dir=args.content,
        dry_run=args.dry_run,
        override_file=None if args.no_override else args.override_file,
        json_logs=args.json_logs,
        report_path=args.report,
    )
    configure_logging(json_logs=config.json_logs, verbose=args.verbose)

    try:
        report = run_sync(config)
    except FATAL_ERRORS as e:
        logger.error(f"Sync aborted: {e}")
        return 1

    if config.report_path:
        config.report_path.parent.mkdir(parents=True, exist_ok=True)
        config.report_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Report written to {config.report_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
