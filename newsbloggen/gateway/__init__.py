"""Generation gateway: draft, refine and translate via an external model (Gemini, Ollama)."""

from .base import GenerationGateway, PromptGateway
from .factory import create_gateway

__all__ = ["GenerationGateway", "PromptGateway", "create_gateway"]
