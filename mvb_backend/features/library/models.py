"""
Value types produced by the library pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CatalogRecord:
    """Catalog metadata for one title. Every field may be blank."""

    title: str = ""
    overview: str = ""
    poster: str = ""
    year: str = ""
    # Whether the catalog actually supplied this record; never serialized.
    matched: bool = field(default=False, compare=False)

    @classmethod
    def degraded(cls, title: str) -> "CatalogRecord":
        """Title passthrough with every other field blank."""
        return cls(title=title or "")


@dataclass(frozen=True)
class MovieRecord:
    file: str
    title: str
    overview: str = ""
    poster: str = ""
    year: str = ""
    duration: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "title": self.title,
            "overview": self.overview,
            "poster": self.poster,
            "year": self.year,
            "duration": self.duration,
        }
