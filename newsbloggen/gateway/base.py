from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..cancellation import CancellationToken
from ..models import Article, GeneratorConfig
from ..utils.logging import get_logger
from ..utils.settings import GatewaySettings
from .parsing import parse_draft_response, parse_markup_response
from .prompts import DRAFT_SCHEMA, build_draft_prompt, build_refine_prompt, build_translate_prompt
from .retry import with_retries

logger = get_logger("nbg.gateway")


class GenerationGateway(ABC):
    """Boundary to the external generation service: draft, refine, translate.

    Every operation returns a validated value or raises ``GenerationFailure``.
    Implementations keep no session state between calls.
    """

    @abstractmethod
    def draft(self, config: GeneratorConfig, *, token: Optional[CancellationToken] = None) -> Article:
        """Return a new article for the given configuration."""

    @abstractmethod
    def refine(self, body: str, instruction: str, *, token: Optional[CancellationToken] = None) -> str:
        """Return the full replacement body after applying ``instruction``."""

    @abstractmethod
    def translate(self, body: str, target_language: str, *, token: Optional[CancellationToken] = None) -> str:
        """Return ``body`` with its visible text translated to ``target_language``."""


class PromptGateway(GenerationGateway):
    """Gateway built on a single text-generation primitive."""

    def __init__(self, settings: Optional[GatewaySettings] = None) -> None:
        self.settings = settings or GatewaySettings()

    @abstractmethod
    def _generate(
        self,
        prompt: str,
        *,
        temperature: float,
        json_schema: Optional[Dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        """Send ``prompt`` and return the raw reply text.

        Raises ServiceError on transport failures and SchemaError when the
        reply carries no text.
        """

    def draft(self, config: GeneratorConfig, *, token: Optional[CancellationToken] = None) -> Article:
        prompt = build_draft_prompt(config)

        def call() -> Article:
            raw = self._generate(
                prompt,
                temperature=self.settings.draft_temperature,
                json_schema=DRAFT_SCHEMA,
                timeout=self.settings.timeout,
            )
            return parse_draft_response(raw)

        logger.info("Requesting draft for keywords=%r period=%s", config.keywords, config.period.value)
        return with_retries(call, token=token)

    def refine(self, body: str, instruction: str, *, token: Optional[CancellationToken] = None) -> str:
        prompt = build_refine_prompt(body, instruction)

        def call() -> str:
            raw = self._generate(prompt, temperature=self.settings.edit_temperature, timeout=self.settings.timeout)
            return parse_markup_response(raw)

        logger.info("Requesting refinement (%d chars)", len(body))
        return with_retries(call, token=token)

    def translate(self, body: str, target_language: str, *, token: Optional[CancellationToken] = None) -> str:
        prompt = build_translate_prompt(body, target_language)

        def call() -> str:
            raw = self._generate(prompt, temperature=self.settings.edit_temperature, timeout=self.settings.timeout)
            return parse_markup_response(raw)

        logger.info("Requesting translation to %s (%d chars)", target_language, len(body))
        return with_retries(call, token=token)
