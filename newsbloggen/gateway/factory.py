from __future__ import annotations

from typing import Optional

from ..utils.settings import GatewaySettings
from .base import GenerationGateway


def create_gateway(*, backend: Optional[str] = None, settings: Optional[GatewaySettings] = None) -> GenerationGateway:
    """Create a generation gateway from PROCESSING_BACKEND or an explicit value.

    Supported values: "gemini" (default) or "ollama".
    """
    settings = settings or GatewaySettings()
    selected = (backend or settings.backend).lower()

    if selected == "gemini":
        from .gemini import GeminiGateway  # lazy import

        return GeminiGateway(settings)
    if selected == "ollama":
        from .ollama import OllamaGateway  # lazy import

        return OllamaGateway(settings)

    raise ValueError(
        f"Unsupported PROCESSING_BACKEND '{selected}'. Use 'gemini' or 'ollama'."
    )
