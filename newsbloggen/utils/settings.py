from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


@dataclass(slots=True)
class GatewaySettings:
    backend: str = field(default_factory=lambda: os.getenv("PROCESSING_BACKEND", "gemini"))
    timeout: int = field(default_factory=lambda: int(os.getenv("AI_TIMEOUT", "120")))
    draft_temperature: float = field(default_factory=lambda: _env_float("AI_DRAFT_TEMPERATURE", "0.7"))
    edit_temperature: float = field(default_factory=lambda: _env_float("AI_EDIT_TEMPERATURE", "0.2"))
    progress_interval: float = field(default_factory=lambda: _env_float("PROGRESS_INTERVAL", "0.8"))
