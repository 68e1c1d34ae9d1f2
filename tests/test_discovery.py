"""Tests for upward package discovery and the directory cache."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from bundle_license.discovery import DependencyScanner


# ── End to end ───────────────────────────────────────────────────────────


class TestScanDependency:
    def test_finds_enclosing_package(self, project, make_module):
        scanner = DependencyScanner(project)
        module_id = make_module(project, "node_modules", "fake-package", "src", "index.js")

        scanner.scan_dependency(module_id)

        assert list(scanner.dependencies) == ["fake-package"]
        dependency = scanner.dependencies["fake-package"]
        assert dependency.version == "1.0.0"
        assert dependency.license == "MIT"
        assert dependency.private is True
        assert dependency.license_text == "MIT License"
        assert dependency.author.name == "Mickael Jeanroy"
        assert dependency.is_self is False

    def test_caches_every_visited_directory(self, project, make_module):
        scanner = DependencyScanner(project)
        package_dir = project / "node_modules" / "fake-package"
        scanner.scan_dependency(make_module(package_dir, "src", "lib", "index.js"))

        assert set(scanner.cache) == {package_dir / "src" / "lib", package_dir / "src", package_dir}
        cached = scanner.cache[package_dir / "src" / "lib"]
        assert cached["name"] == "fake-package"
        assert cached["licenseText"] == "MIT License"
        assert all(value is cached for value in scanner.cache.values())

    def test_sibling_module_is_resolved_from_cache(self, project, make_module):
        scanner = DependencyScanner(project)
        package_dir = project / "node_modules" / "fake-package"
        scanner.scan_dependency(make_module(package_dir, "src", "index.js"))

        with patch.object(scanner, "_load_package", wraps=scanner._load_package) as spy:
            scanner.scan_dependency(make_module(package_dir, "src", "other.js"))

        spy.assert_not_called()
        assert list(scanner.dependencies) == ["fake-package"]

    def test_scanning_twice_is_idempotent(self, project, make_module):
        scanner = DependencyScanner(project)
        module_id = make_module(project, "node_modules", "fake-package", "index.js")

        scanner.scan_dependencies([module_id, module_id])
        first = scanner.dependencies["fake-package"]
        scanner.scan_dependency(module_id)

        assert len(scanner.dependencies) == 1
        assert scanner.dependencies["fake-package"] is first

    def test_type_only_manifest_is_skipped(self, project, make_package, make_module):
        package_dir = project / "node_modules" / "fake-package"
        make_package(package_dir / "esm", type="module")
        scanner = DependencyScanner(project)

        scanner.scan_dependency(make_module(package_dir, "esm", "index.js"))

        assert list(scanner.dependencies) == ["fake-package"]
        assert scanner.cache[package_dir / "esm"]["name"] == "fake-package"

    def test_malformed_manifest_raises(self, project, make_module):
        broken = project / "node_modules" / "broken"
        broken.mkdir(parents=True)
        (broken / "package.json").write_text("{", encoding="utf-8")
        scanner = DependencyScanner(project)

        with pytest.raises(json.JSONDecodeError):
            scanner.scan_dependency(make_module(broken, "index.js"))


# ── Project root ─────────────────────────────────────────────────────────


class TestProjectRoot:
    def test_walk_stops_at_cwd(self, project, make_module):
        scanner = DependencyScanner(project)
        with patch.object(scanner, "_load_package", wraps=scanner._load_package) as spy:
            scanner.scan_dependency(make_module(project, "src", "main.js"))

        assert scanner.dependencies == {}
        assert [call.args[0] for call in spy.call_args_list] == [project / "src"]
        assert scanner.cache == {project / "src": None}

    def test_include_self(self, project, make_module):
        scanner = DependencyScanner(project, include_self=True)
        scanner.scan_dependency(make_module(project, "src", "main.js"))

        assert list(scanner.dependencies) == ["project"]
        assert scanner.dependencies["project"].is_self is True

    def test_relative_cwd_is_made_absolute(self, project, make_module, monkeypatch):
        monkeypatch.chdir(project.parent)
        scanner = DependencyScanner("project")
        scanner.scan_dependency(make_module(project, "node_modules", "fake-package", "a.js"))
        assert scanner.cwd.is_absolute()
        assert scanner.cwd.name == "project"
        assert list(scanner.dependencies) == ["fake-package"]


# ── Registry ─────────────────────────────────────────────────────────────


class TestRegistry:
    @pytest.fixture
    def two_versions(self, project, make_package, make_module):
        make_package(project / "node_modules" / "a", name="a", version="1.0.0", license="MIT")
        make_package(
            project / "node_modules" / "b" / "node_modules" / "a",
            name="a",
            version="2.0.0",
            license="ISC",
        )
        return [
            make_module(project, "node_modules", "a", "index.js"),
            make_module(project, "node_modules", "b", "node_modules", "a", "index.js"),
        ]

    def test_first_writer_wins(self, project, two_versions):
        scanner = DependencyScanner(project)
        scanner.scan_dependencies(two_versions)

        assert list(scanner.dependencies) == ["a"]
        assert scanner.dependencies["a"].version == "1.0.0"

    def test_multiple_versions(self, project, two_versions):
        scanner = DependencyScanner(project, multiple_versions=True)
        scanner.scan_dependencies(two_versions)

        assert list(scanner.dependencies) == ["a@1.0.0", "a@2.0.0"]
        assert scanner.dependencies["a@2.0.0"].license == "ISC"

    def test_add_dependency_directly(self, project):
        scanner = DependencyScanner(project)
        scanner.add_dependency({"name": "manual", "version": "1.0.0"})
        scanner.add_dependency({"name": "manual", "version": "2.0.0"})
        assert scanner.dependencies["manual"].version == "1.0.0"


# ── Module ids ───────────────────────────────────────────────────────────


class TestModuleIds:
    def test_virtual_module_is_skipped(self, project):
        scanner = DependencyScanner(project)
        with patch.object(scanner, "_load_package") as spy:
            scanner.scan_dependency("virtual:entry")

        spy.assert_not_called()
        assert scanner.cache == {}

    def test_internal_prefix_is_stripped(self, project, make_module):
        scanner = DependencyScanner(project)
        module_id = make_module(project, "node_modules", "fake-package", "index.js")

        scanner.scan_dependency("\0" + module_id)

        assert list(scanner.dependencies) == ["fake-package"]

    def test_debug_traces(self, project, make_module, caplog):
        scanner = DependencyScanner(project, debug=True)
        module_id = make_module(project, "node_modules", "fake-package", "index.js")

        with caplog.at_level(logging.DEBUG, logger="bundle_license"):
            scanner.scan_dependencies([module_id, module_id])

        messages = [record.getMessage() for record in caplog.records]
        assert f"[bundle-license] -- scanning {module_id}" in messages
        assert any("found package.json in cache" in m for m in messages)

    def test_no_traces_without_debug(self, project, make_module, caplog):
        scanner = DependencyScanner(project)
        with caplog.at_level(logging.DEBUG, logger="bundle_license"):
            scanner.scan_dependency(make_module(project, "node_modules", "fake-package", "a.js"))
        assert caplog.records == []
