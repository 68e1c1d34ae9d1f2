"""Dependency model built from a package descriptor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .person import Person

EOL = "\n"
UNLICENSED = "UNLICENSED"


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _normalize_license(pkg: Mapping[str, Any]) -> str | None:
    license_ = pkg.get("license")

    # Legacy manifests sometimes use {"type": "MIT", "url": "..."}.
    if isinstance(license_, Mapping):
        license_ = license_.get("type")

    if not license_ and pkg.get("licenses"):
        # The deprecated `licenses` array maps to an SPDX "OR" expression.
        types = [
            str(entry.get("type") if isinstance(entry, Mapping) else entry)
            for entry in _as_list(pkg["licenses"])
        ]
        license_ = f"({' OR '.join(types)})"

    return license_ or None


def _normalize_repository(value: Any) -> dict[str, Any] | None:
    if not value:
        return None
    if isinstance(value, str):
        return {"url": value, "type": None}
    return {"url": value.get("url"), "type": value.get("type")}


@dataclass
class Dependency:
    """Normalised license metadata of one package."""

    name: str | None
    version: str | None = None
    license: str | None = None
    description: str | None = None
    repository: dict[str, Any] | None = None
    homepage: str | None = None
    private: bool = False
    license_text: str | None = None
    notice_text: str | None = None
    author: Person | None = None
    contributors: list[Person] = field(default_factory=list)
    maintainers: list[Any] = field(default_factory=list)
    is_self: bool = False

    @classmethod
    def from_package(cls, pkg: Mapping[str, Any]) -> Dependency:
        author = pkg.get("author")
        return cls(
            name=pkg.get("name") or None,
            version=pkg.get("version") or None,
            license=_normalize_license(pkg),
            description=pkg.get("description") or None,
            repository=_normalize_repository(pkg.get("repository")),
            homepage=pkg.get("homepage") or None,
            private=bool(pkg.get("private", False)),
            license_text=pkg.get("licenseText") or None,
            notice_text=pkg.get("noticeText") or None,
            author=Person.from_value(author) if author else None,
            contributors=[Person.from_value(c) for c in _as_list(pkg.get("contributors")) if c],
            maintainers=_as_list(pkg.get("maintainers")),
            is_self=bool(pkg.get("self", False)),
        )

    def identity(self, multiple_versions: bool = False) -> str:
        """Registry key: the name, or ``name@version`` when versions are kept apart."""
        if multiple_versions:
            return f"{self.name}@{self.version}"
        return f"{self.name}"

    def text(self) -> str:
        lines = [
            f"Name: {self.name}",
            f"Version: {self.version or ''}",
            f"License: {self.license or UNLICENSED}",
            f"Private: {'true' if self.private else 'false'}",
        ]

        if self.description:
            lines.append(f"Description: {self.description}")
        if self.repository:
            lines.append(f"Repository: {self.repository.get('url')}")
        if self.homepage:
            lines.append(f"Homepage: {self.homepage}")
        if self.author:
            lines.append(f"Author: {self.author.text()}")
        if self.contributors:
            lines.append("Contributors:")
            lines.extend(f"  {contributor.text()}" for contributor in self.contributors)

        if self.license_text:
            lines.extend(["", "License Copyright:", "===", "", self.license_text])
        if self.notice_text:
            lines.extend(["", "Notice:", "===", "", self.notice_text])

        return EOL.join(lines)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.version,
            "license": self.license,
            "description": self.description,
            "repository": self.repository,
            "homepage": self.homepage,
            "private": self.private,
            "licenseText": self.license_text,
            "noticeText": self.notice_text,
            "author": self.author.to_dict() if self.author else None,
            "contributors": [contributor.to_dict() for contributor in self.contributors],
            "maintainers": list(self.maintainers),
            "self": self.is_self,
        }
