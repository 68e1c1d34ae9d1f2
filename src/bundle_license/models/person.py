"""Person model used for package authors and contributors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_FIELDS = ("name", "email", "url")


@dataclass(frozen=True)
class Person:
    """Identity parsed from ``NAME <EMAIL> (URL)`` or a structured object."""

    name: str | None = None
    email: str | None = None
    url: str | None = None

    def text(self) -> str:
        text = f"{self.name or ''}"
        if self.email:
            text += f" <{self.email}>"
        if self.url:
            text += f" ({self.url})"
        return text

    def to_dict(self) -> dict[str, str | None]:
        return {"name": self.name, "email": self.email, "url": self.url}

    @classmethod
    def parse(cls, value: str) -> Person:
        """Parse ``NAME <EMAIL> (URL)``; email and url are optional."""
        captured: dict[str, str] = {}
        current = "name"
        for character in value:
            if character == "<":
                current = "email"
            elif character == "(":
                current = "url"
            elif character not in (")", ">"):
                captured[current] = captured.get(current, "") + character

        fields = {key: (captured.get(key) or "").strip() or None for key in _FIELDS}
        return cls(**fields)

    @classmethod
    def from_value(cls, value: str | Mapping[str, Any]) -> Person:
        if isinstance(value, str):
            return cls.parse(value)
        return cls(**{key: value.get(key) or None for key in _FIELDS})
