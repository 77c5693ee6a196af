from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests

from ..errors import SchemaError, ServiceError
from ..utils.logging import get_logger
from ..utils.settings import GatewaySettings
from .base import PromptGateway

logger = get_logger("nbg.gateway.gemini")


class GeminiGateway(PromptGateway):
    """HTTP client for Gemini via Google AI Studio API.

    Environment:
      - GOOGLE_API_KEY (required; GEMINI_API_KEY or API_KEY also accepted)
      - GEMINI_MODEL (default: gemini-2.5-flash)
    """

    def __init__(self, settings: Optional[GatewaySettings] = None) -> None:
        super().__init__(settings)
        self.api_key = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        if not self.api_key:
            raise RuntimeError("GOOGLE_API_KEY is required for Gemini backend")
        self.model = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

    def _generate(
        self,
        prompt: str,
        *,
        temperature: float,
        json_schema: Optional[Dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        # Google AI Studio text generation endpoint
        url = (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            f"{self.model}:generateContent"
        )
        generation_config: Dict[str, Any] = {"temperature": temperature}
        if json_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = json_schema
        payload = {
            "contents": [
                {
                    "parts": [{"text": prompt}],
                }
            ],
            "generationConfig": generation_config,
        }
        try:
            resp = requests.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            # Never let the API key in the query string reach the logs
            status = getattr(getattr(exc, "response", None), "status_code", None)
            raise ServiceError(f"Gemini request failed ({type(exc).__name__}, status={status})") from exc
        try:
            data = resp.json()
        except ValueError as exc:
            raise SchemaError("Gemini returned a non-JSON reply") from exc
        if not isinstance(data, dict):
            raise SchemaError("Unexpected reply shape from AI")

        # Extract text from the first candidate
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            raise SchemaError(f"No response from AI (blockReason={feedback.get('blockReason')})")
        parts = candidates[0].get("content", {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts).strip()
        if not text:
            raise SchemaError(f"No response from AI (finishReason={candidates[0].get('finishReason')})")
        logger.debug("Gemini reply: %d chars", len(text))
        return text
