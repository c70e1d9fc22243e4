#!/usr/bin/env python3
"""Ghostty window tracker - run the tracker and its query API.

Usage:
    python run.py
    # Or: ghostty-tracker serve

The API listens on 127.0.0.1, from port 49876 upward; the bound port is
written to ~/.ghostty-api-port.
"""

import sys

from ghostty_tracker.cli import main

if __name__ == "__main__":
    sys.exit(main())
