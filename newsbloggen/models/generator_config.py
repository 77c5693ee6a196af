"""Configuration collected by the generator step and its closed value sets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class _LabelledEnum(str, Enum):
    @classmethod
    def parse(cls, value: "str | _LabelledEnum"):
        """Accept a member, its label, or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        wanted = str(value).strip().lower()
        for member in cls:
            if wanted in (member.value.lower(), member.name.lower()):
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid {cls.__name__.lower()} '{value}'. Allowed: {allowed}")


class Period(_LabelledEnum):
    PAST_24_HOURS = "Past 24 Hours"
    PAST_WEEK = "Past Week"
    PAST_MONTH = "Past Month"


class Tone(_LabelledEnum):
    ACADEMIC = "Academic"
    CASUAL = "Casual"
    ENTHUSIASTIC = "Enthusiastic"

    @property
    def descriptor(self) -> str:
        return _TONE_DESCRIPTORS[self]


class Length(_LabelledEnum):
    SHORT = "Short"
    STANDARD = "Standard"
    DEEP = "Deep"

    @property
    def descriptor(self) -> str:
        return _LENGTH_DESCRIPTORS[self]


_TONE_DESCRIPTORS = {
    Tone.ACADEMIC: "Professional Academic",
    Tone.CASUAL: "General Public/Casual",
    Tone.ENTHUSIASTIC: "Marketing/Enthusiastic",
}

_LENGTH_DESCRIPTORS = {
    Length.SHORT: "Short (500 words)",
    Length.STANDARD: "Standard (500-1000 words)",
    Length.DEEP: "Deep Dive (1000-2000 words)",
}


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    keywords: str
    period: Period = Period.PAST_24_HOURS
    tone: Tone = Tone.ACADEMIC
    length: Length = Length.STANDARD

    def __post_init__(self) -> None:
        keywords = (self.keywords or "").strip()
        if not keywords:
            raise ValueError("Please enter at least one keyword.")
        object.__setattr__(self, "keywords", keywords)
        object.__setattr__(self, "period", Period.parse(self.period))
        object.__setattr__(self, "tone", Tone.parse(self.tone))
        object.__setattr__(self, "length", Length.parse(self.length))
