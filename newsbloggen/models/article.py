from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Source:
    """A citation attached to a drafted article."""

    label: str
    locator: str = ""


@dataclass(frozen=True, slots=True)
class Article:
    title: str
    body: str
    tags: Tuple[str, ...] = field(default_factory=tuple)
    sources: Tuple[Source, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Article title must not be empty")
        # Lists from parsed payloads are frozen into tuples
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "sources", tuple(self.sources))
