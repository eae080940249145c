#!/usr/bin/env python
"""
Run script for the XML sync.
Use: python run_sync.py --dry-run
Or: xmlsync --content ./content/listings
"""
import sys

from xmlsync.cli import main


if __name__ == "__main__":
    sys.exit(main())
