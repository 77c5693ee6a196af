from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

Speaker = Literal["user", "assistant"]
EntryKind = Literal["message", "warning", "error"]

SPEAKERS = {"user", "assistant"}
ENTRY_KINDS = {"message", "warning", "error"}


@dataclass(frozen=True, slots=True)
class ConversationEntry:
    """One message in the editor chat.

    ``kind`` lets the UI style assistant replies: a ``warning`` entry is how a
    detected media loss is surfaced, an ``error`` entry reports a failed
    revision.
    """

    speaker: Speaker
    text: str
    kind: EntryKind = "message"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.speaker not in SPEAKERS:
            raise ValueError(f"Invalid speaker '{self.speaker}'")
        if self.kind not in ENTRY_KINDS:
            raise ValueError(f"Invalid entry kind '{self.kind}'")
