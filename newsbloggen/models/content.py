from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from ..markup import extract_media_refs, is_well_formed, repair_markup
from ..utils.logging import get_logger
from .article import Article
from .conversation import ConversationEntry, EntryKind, Speaker

logger = get_logger("nbg.models.content")


def _well_formed(body: str) -> str:
    if is_well_formed(body):
        return body
    repaired = repair_markup(body)
    if extract_media_refs(repaired) != extract_media_refs(body):
        logger.warning("Repairing body markup would alter media locators; storing it unrepaired")
        return body
    logger.warning("Body markup was not well-formed; repaired (%d -> %d chars)", len(body), len(repaired))
    return repaired


class ContentModel:
    """Holds the article under edit and the chat that accompanies it."""

    def __init__(self) -> None:
        self._article: Optional[Article] = None
        self._entries: List[ConversationEntry] = []

    @property
    def article(self) -> Optional[Article]:
        return self._article

    @property
    def conversation(self) -> Tuple[ConversationEntry, ...]:
        return tuple(self._entries)

    def set_article(self, article: Article) -> Article:
        self._article = replace(article, body=_well_formed(article.body))
        return self._article

    def append_entry(self, speaker: Speaker, text: str, kind: EntryKind = "message") -> ConversationEntry:
        entry = ConversationEntry(speaker=speaker, text=text, kind=kind)
        self._entries.append(entry)
        return entry

    def replace_body(self, body: str) -> str:
        if self._article is None:
            raise RuntimeError("No article to revise")
        self._article = replace(self._article, body=_well_formed(body))
        return self._article.body

    def snapshot(self) -> Optional[Article]:
        # Article is frozen, so the current instance is already a safe snapshot
        return self._article
