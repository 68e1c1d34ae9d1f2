from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def make_package():
    """Write a package.json (and optional sibling files) under a directory."""

    def _make(directory: Path, files: dict[str, str] | None = None, **pkg) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(pkg), encoding="utf-8")
        for name, content in (files or {}).items():
            (directory / name).write_text(content, encoding="utf-8")
        return directory

    return _make


@pytest.fixture
def project(tmp_path, make_package):
    """A project root with one third-party package installed in node_modules."""
    root = make_package(tmp_path / "project", name="project", version="0.0.1", license="MIT")
    make_package(
        root / "node_modules" / "fake-package",
        files={"LICENSE.md": "MIT License"},
        name="fake-package",
        version="1.0.0",
        license="MIT",
        description="Fake package used in tests",
        author={"name": "Mickael Jeanroy", "email": "mickael.jeanroy@gmail.com"},
        private=True,
    )
    return root


@pytest.fixture
def make_module():
    """Create a source file and return its path as a module id."""

    def _make(root: Path, *parts: str) -> str:
        path = root.joinpath(*parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export default {};\n", encoding="utf-8")
        return str(path)

    return _make
