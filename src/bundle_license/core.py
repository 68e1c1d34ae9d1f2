"""License plugin: ties option handling, package discovery, banner and export together."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from .banner import EOL, read_banner, render_banner
from .discovery import DependencyScanner
from .models import Dependency
from .options import license_plugin_options
from .parsers.package_json import read_package_json
from .report import export_third_party
from .validators.license import check_dependencies


class LicensePlugin:
    """Collect the packages a bundle is built from and report on them.

    Usage::

        plugin = LicensePlugin({"banner": "Bundle of {{ pkg.name }}", "third_party": {...}})
        plugin.scan_dependencies(module_ids)
        code = plugin.prepend_banner(code)
        plugin.scan_third_parties()
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self._options = license_plugin_options(options)
        self._cwd = Path(os.path.abspath(self._options.get("cwd") or os.getcwd()))
        self._debug = self._options.get("debug") is True
        self._pkg = read_package_json(self._cwd) or {}

        third_party = self._options.get("third_party")
        include_self = False
        multiple_versions = False
        if isinstance(third_party, Mapping):
            include_self = third_party.get("include_self") is True
            multiple_versions = third_party.get("multiple_versions") is True

        self._scanner = DependencyScanner(
            self._cwd,
            include_self=include_self,
            multiple_versions=multiple_versions,
            debug=self._debug,
        )

    @property
    def options(self) -> dict[str, Any]:
        return self._options

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def pkg(self) -> dict[str, Any]:
        return self._pkg

    @property
    def scanner(self) -> DependencyScanner:
        return self._scanner

    @property
    def dependencies(self) -> list[Dependency]:
        return list(self._scanner.dependencies.values())

    def debug(self, msg: str) -> None:
        self._scanner.debug(msg)

    def scan_dependency(self, module_id: str) -> None:
        self._scanner.scan_dependency(module_id)

    def scan_dependencies(self, module_ids: Iterable[str]) -> None:
        self._scanner.scan_dependencies(module_ids)

    def add_dependency(self, pkg: Mapping[str, Any]) -> None:
        self._scanner.add_dependency(pkg)

    def prepend_banner(self, code: str) -> str:
        """Return ``code`` preceded by the rendered banner, if one is configured."""
        banner = self._options.get("banner")
        source = read_banner(banner)
        if source is None:
            return code

        self.debug("prepend banner")

        comment_style = None
        data: Any = {}
        if isinstance(banner, Mapping):
            comment_style = banner.get("comment_style")
            data = banner.get("data") or {}
            if callable(data):
                data = data()

        context = {
            "pkg": self._pkg,
            "dependencies": self.dependencies,
            "data": data,
            "now": datetime.now(),
        }

        text = render_banner(source, context, comment_style)
        return f"{text}{EOL}{code}"

    def scan_third_parties(self) -> list[Dependency]:
        """Check and export the collected dependencies.

        Returns the dependencies that were reported, after private packages
        have been filtered out (unless ``include_private`` is set).
        """
        third_party = self._options.get("third_party")
        if not third_party:
            return []

        include_private = isinstance(third_party, Mapping) and (
            third_party.get("include_private") is True
        )
        dependencies = [
            dependency
            for dependency in self.dependencies
            if include_private or not dependency.private
        ]

        if callable(third_party):
            third_party(dependencies)
            return dependencies

        allow = third_party.get("allow")
        if allow:
            self.debug("checking dependencies license")
            check_dependencies(dependencies, allow)

        output = third_party.get("output")
        if output:
            self.debug("exporting third-party summary")
            export_third_party(dependencies, output, debug=self._debug)

        return dependencies


def license_plugin(options: Mapping[str, Any] | None = None) -> LicensePlugin:
    return LicensePlugin(options)
