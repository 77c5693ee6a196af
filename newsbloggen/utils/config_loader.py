from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from ..models import GeneratorConfig, Length, Period, Tone


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing required fields."""


DEFAULT_LANGUAGES = ["English", "Korean", "Japanese", "Chinese (Simplified)", "Spanish"]

GENERATOR_FIELDS = {"keywords", "period", "tone", "length"}


@dataclass(slots=True)
class SessionConfig:
    """Defaults for a session: an optional pre-filled generator form and the translation menu."""

    generator: Optional[GeneratorConfig] = None
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))


def _validate_generator_dict(entry: dict) -> None:
    """Validate the ``generator`` mapping from YAML.

    Required fields: keywords (non-empty str).
    Optional fields: period, tone, length, each from its closed set.
    """
    unknown = set(entry) - GENERATOR_FIELDS
    if unknown:
        raise ConfigError(f"Unknown generator fields: {sorted(unknown)}")

    keywords = entry.get("keywords")
    if not isinstance(keywords, str) or not keywords.strip():
        raise ConfigError("'generator.keywords' must be a non-empty string")

    for name, enum_cls in (("period", Period), ("tone", Tone), ("length", Length)):
        if entry.get(name) is None:
            continue
        try:
            enum_cls.parse(entry[name])
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc


def _coerce_generator(entry: dict) -> GeneratorConfig:
    return GeneratorConfig(
        keywords=str(entry["keywords"]).strip(),
        period=Period.parse(entry.get("period") or Period.PAST_24_HOURS),
        tone=Tone.parse(entry.get("tone") or Tone.ACADEMIC),
        length=Length.parse(entry.get("length") or Length.STANDARD),
    )


def load_session_config(path: Path | str) -> SessionConfig:
    """Load ``generator.yaml`` into a typed ``SessionConfig``.

    YAML structure:
      - Top-level mapping
      - Key ``generator`` (optional): mapping with
          - keywords: string (required)
          - period: 'Past 24 Hours' | 'Past Week' | 'Past Month' (optional)
          - tone: 'Academic' | 'Casual' | 'Enthusiastic' (optional)
          - length: 'Short' | 'Standard' | 'Deep' (optional)
      - Key ``languages`` (optional): list[string] offered for translation

    Unknown top-level keys are ignored for forward compatibility.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Top level of the configuration must be a mapping")

    config = SessionConfig()

    generator_raw = data.get("generator")
    if generator_raw is not None:
        if not isinstance(generator_raw, dict):
            raise ConfigError(f"'generator' must be a mapping, got: {type(generator_raw)}")
        _validate_generator_dict(generator_raw)
        config.generator = _coerce_generator(generator_raw)

    languages_raw = data.get("languages")
    if languages_raw is not None:
        if not isinstance(languages_raw, list) or not all(isinstance(x, str) and x.strip() for x in languages_raw):
            raise ConfigError("'languages' must be a list of non-empty strings if provided")
        config.languages = [x.strip() for x in languages_raw]

    return config
