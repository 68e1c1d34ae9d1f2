"""Package discovery for bundled modules.

Each module is mapped to the nearest enclosing package by walking its
directory tree upwards. Resolved directories are cached so that sibling
modules resolve without touching the filesystem again.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .log import logger, prefixed
from .models import Dependency
from .parsers.package_json import (
    LICENSE_PREFIXES,
    NOTICE_PREFIXES,
    is_package_boundary,
    read_package_json,
    read_sibling_file,
)

INTERNAL_MODULE_PREFIX = "\0"
VIRTUAL_MODULE_PREFIX = "virtual:"


class DependencyScanner:
    """Resolve module paths to package metadata and collect it in a registry.

    Params:
        cwd: project root; the upward walk never goes above it and only
            reports it when ``include_self`` is set
        include_self: treat the project's own package as a dependency
        multiple_versions: key the registry by ``name@version`` instead of name
        debug: emit trace messages
    """

    def __init__(
        self,
        cwd: Path | str,
        include_self: bool = False,
        multiple_versions: bool = False,
        debug: bool = False,
    ) -> None:
        self.cwd = Path(os.path.abspath(cwd))
        self.include_self = include_self
        self.multiple_versions = multiple_versions
        self._debug = debug

        # directory -> package descriptor, or None when no package was found
        self.cache: dict[Path, dict[str, Any] | None] = {}
        self.dependencies: dict[str, Dependency] = {}

    def debug(self, msg: str) -> None:
        if self._debug:
            logger.debug(prefixed(msg))

    def scan_dependencies(self, module_ids: Iterable[str]) -> None:
        for module_id in module_ids:
            self.scan_dependency(module_id)

    def scan_dependency(self, module_id: str) -> None:
        if module_id.startswith(INTERNAL_MODULE_PREFIX):
            module_id = module_id[len(INTERNAL_MODULE_PREFIX):]
            self.debug(f"scanning internal module {module_id}")

        if module_id.startswith(VIRTUAL_MODULE_PREFIX):
            self.debug(f"skipping virtual module {module_id}")
            return

        self.debug(f"scanning {module_id}")

        directory = Path(os.path.abspath(os.path.dirname(module_id)))
        pkg: dict[str, Any] | None = None
        scanned: list[Path] = []
        visited: set[Path] = set()

        while True:
            is_self = directory == self.cwd
            if is_self and not self.include_self:
                break

            if directory in self.cache:
                pkg = self.cache[directory]
                if pkg is not None:
                    self.debug(f"found package.json in cache (package: {pkg.get('name')})")
                    self.add_dependency(pkg)
                break

            scanned.append(directory)
            visited.add(directory)

            candidate = self._load_package(directory)
            if candidate is not None and is_package_boundary(candidate):
                self.debug(f"found package.json at: {directory}, read it")
                pkg = self._with_sibling_texts(candidate, directory, is_self)
                self.add_dependency(pkg)
                break

            if is_self:
                break

            parent = directory.parent
            if parent == directory or parent in visited:
                break
            directory = parent

        for scanned_dir in scanned:
            self.cache[scanned_dir] = pkg

    def _load_package(self, directory: Path) -> dict[str, Any] | None:
        return read_package_json(directory)

    def _with_sibling_texts(
        self, pkg: Mapping[str, Any], directory: Path, is_self: bool
    ) -> dict[str, Any]:
        descriptor = dict(pkg)

        license_text = read_sibling_file(directory, LICENSE_PREFIXES)
        if license_text is not None:
            descriptor["licenseText"] = license_text

        notice_text = read_sibling_file(directory, NOTICE_PREFIXES)
        if notice_text is not None:
            descriptor["noticeText"] = notice_text

        if is_self:
            descriptor["self"] = True

        return descriptor

    def add_dependency(self, pkg: Mapping[str, Any]) -> None:
        """Register ``pkg`` unless a package with the same identity is already known."""
        dependency = Dependency.from_package(pkg)
        self.dependencies.setdefault(dependency.identity(self.multiple_versions), dependency)
