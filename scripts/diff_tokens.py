#!/usr/bin/env python3
"""
Reconcile a local token file against a remote variable snapshot.

Usage:
    python scripts/diff_tokens.py LOCAL REMOTE [--config CONFIG_PATH] [--json]
        [--include-deletes] [--no-preserve-unmanaged]

Exits 0 when in sync, 1 when changes are pending, 2 on error, so it can gate
a CI job or a scheduled check.
"""

import sys

from tokensync.cli import main

if __name__ == "__main__":
    sys.exit(main())
