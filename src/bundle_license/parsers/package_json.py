"""Read package.json manifests and their sibling license/notice files."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

PACKAGE_JSON = "package.json"
LICENSE_PREFIXES = ("license", "licence")
NOTICE_PREFIXES = ("notice",)

_MAX_NAME_LENGTH = 214
_NAME_PATTERN = re.compile(r"^(?:@[a-z0-9~-][a-z0-9._~-]*/)?[a-z0-9~-][a-z0-9._~-]*$")

# Characters that cannot follow the prefix in a matched file name.
_FORBIDDEN = "#%&*:<>?/\\{|}"
_SUFFIX = f"[^{re.escape(_FORBIDDEN)}]*"


def read_package_json(directory: Path) -> dict[str, Any] | None:
    """Return the parsed ``package.json`` in ``directory``, or None if absent.

    Malformed JSON is not handled here: ``json.JSONDecodeError`` propagates.
    """
    path = directory / PACKAGE_JSON
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def is_valid_package_name(name: Any) -> bool:
    if not isinstance(name, str) or not name:
        return False
    if len(name) > _MAX_NAME_LENGTH:
        return False
    return bool(_NAME_PATTERN.fullmatch(name))


def is_package_boundary(pkg: Mapping[str, Any]) -> bool:
    """Tell whether a manifest describes a real package.

    Manifests that only declare e.g. ``"type": "module"`` for a sub directory
    are skipped so the walk continues to the enclosing package.
    """
    has_identity = is_valid_package_name(pkg.get("name")) and bool(pkg.get("version"))
    has_license = bool(pkg.get("license") or pkg.get("licenses"))
    return has_identity or has_license


def _prefix_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(f"{re.escape(prefix)}{_SUFFIX}", re.IGNORECASE)


def find_sibling_file(directory: Path, prefixes: Iterable[str]) -> Path | None:
    """Find a file directly in ``directory`` whose name starts with one of ``prefixes``.

    Matching is case-insensitive and ignores the extension, so ``LICENSE``,
    ``License.md`` and ``licence.txt`` all match ``license``/``licence``.
    """
    try:
        candidates = sorted(p for p in directory.iterdir() if p.is_file())
    except OSError:
        return None

    for prefix in prefixes:
        pattern = _prefix_pattern(prefix)
        for candidate in candidates:
            if pattern.fullmatch(candidate.name):
                return candidate
    return None


def read_sibling_file(directory: Path, prefixes: Iterable[str]) -> str | None:
    path = find_sibling_file(directory, prefixes)
    if path is None:
        return None
    return path.read_text(encoding="utf-8", errors="replace")
