#!/usr/bin/env python3
"""Local CLI entrypoint to run the license scan from a checkout.

Usage:
  python scripts/scan.py [--config bundle-license.json] [--bundle dist/app.js] MODULE...

This calls the same entrypoint as the ``bundle-license`` console script.
"""

from __future__ import annotations

from bundle_license.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
