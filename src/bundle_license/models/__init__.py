"""Data models for collected third-party metadata."""

from __future__ import annotations

from .dependency import UNLICENSED, Dependency
from .person import Person

__all__ = [
    "Dependency",
    "Person",
    "UNLICENSED",
]
