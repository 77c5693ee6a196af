from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests

from ..errors import SchemaError, ServiceError
from ..utils.settings import GatewaySettings
from .base import PromptGateway


class OllamaGateway(PromptGateway):
    """HTTP client for Ollama's generate API.

    Environment:
      - OLLAMA_HOST (default: http://localhost:11434)
      - OLLAMA_MODEL (default: llama3.1:8b-instruct)
    """

    def __init__(self, settings: Optional[GatewaySettings] = None) -> None:
        super().__init__(settings)
        self.host = os.environ.get("OLLAMA_HOST", "http://localhost:11434").rstrip("/")
        self.model = os.environ.get("OLLAMA_MODEL", "llama3.1:8b-instruct")

    def _generate(
        self,
        prompt: str,
        *,
        temperature: float,
        json_schema: Optional[Dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        url = f"{self.host}/api/generate"
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        if json_schema is not None:
            # Ollama only constrains to valid JSON; the schema lives in the prompt
            payload["format"] = "json"
        try:
            resp = requests.post(url, json=payload, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ServiceError(f"Ollama request failed: {exc}") from exc
        try:
            data = resp.json()
        except ValueError as exc:
            raise SchemaError("Ollama returned a non-JSON reply") from exc
        if not isinstance(data, dict):
            raise SchemaError("Unexpected reply shape from AI")
        # Ollama returns {'response': '...'}
        text = (data.get("response") or "").strip()
        if not text:
            raise SchemaError("No response from AI")
        return text
