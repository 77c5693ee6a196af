from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class RevisionKind(str, Enum):
    DRAFT = "draft"
    REFINE = "refine"
    TRANSLATE = "translate"


@dataclass(frozen=True, slots=True)
class RevisionRequest:
    """A gateway call currently owned by the orchestrator.

    Payload keys: ``config`` for drafts, ``body`` plus ``instruction`` for
    refinements, ``body`` plus ``language`` for translations.
    """

    kind: RevisionKind
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RevisionOutcome:
    kind: RevisionKind
    succeeded: bool
    lost_media: FrozenSet[str] = frozenset()
    error: Optional[str] = None
    cancelled: bool = False
