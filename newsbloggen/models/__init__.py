"""Typed models used across the application."""

from .article import Article, Source
from .content import ContentModel
from .conversation import ConversationEntry, EntryKind, Speaker
from .generator_config import GeneratorConfig, Length, Period, Tone
from .revision import RevisionKind, RevisionOutcome, RevisionRequest

__all__ = [
    "Article",
    "Source",
    "ContentModel",
    "ConversationEntry",
    "EntryKind",
    "Speaker",
    "GeneratorConfig",
    "Length",
    "Period",
    "Tone",
    "RevisionKind",
    "RevisionOutcome",
    "RevisionRequest",
]
