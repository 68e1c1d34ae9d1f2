"""Command line entrypoint: scan bundled modules, add the banner and export third parties."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .banner import BannerError
from .config import ConfigError, load_options
from .core import LicensePlugin
from .log import setup_logging
from .options import OptionsError
from .validators.license import LicenseViolationError

STDIN_ARG = "-"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON or YAML options file (default: bundle-license.json)",
    )
    parser.add_argument("--cwd", type=str, default=None, help="Project root directory")
    parser.add_argument("--bundle", type=Path, default=None, help="Bundle to prepend the banner to")
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Where to write the bundle with its banner (default: overwrite --bundle)",
    )
    parser.add_argument("--debug", action="store_true", help="Print debug traces")
    parser.add_argument(
        "modules",
        nargs="*",
        help=f"Bundled module paths; {STDIN_ARG!r} reads them one per line from stdin",
    )
    return parser.parse_args(argv)


def _module_ids(args: list[str]) -> list[str]:
    ids: list[str] = []
    for arg in args:
        if arg == STDIN_ARG:
            ids.extend(line.strip() for line in sys.stdin if line.strip())
        else:
            ids.append(arg)
    return ids


def run(args: argparse.Namespace) -> LicensePlugin:
    options = load_options(args.config)
    if args.cwd is not None:
        options["cwd"] = args.cwd
    if args.debug:
        options["debug"] = True

    plugin = LicensePlugin(options)
    plugin.scan_dependencies(_module_ids(args.modules))

    if args.bundle is not None:
        code = args.bundle.read_text(encoding="utf-8")
        out = args.out or args.bundle
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(plugin.prepend_banner(code), encoding="utf-8")

    plugin.scan_third_parties()
    return plugin


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    try:
        plugin = run(args)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read package.json: {exc}", file=sys.stderr)
        return 1
    except (ConfigError, OptionsError, BannerError, LicenseViolationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"Found {len(plugin.dependencies)} dependencies")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
