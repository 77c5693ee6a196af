"""Tests for YAML session configuration and environment settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from newsbloggen.models import Length, Period, Tone
from newsbloggen.utils.config_loader import DEFAULT_LANGUAGES, ConfigError, load_session_config
from newsbloggen.utils.settings import GatewaySettings


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "generator.yaml"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
class TestLoadSessionConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            "generator:\n"
            "  keywords: AI Technology\n"
            "  period: Past Week\n"
            "  tone: Enthusiastic\n"
            "  length: Short\n"
            "languages: [English, French]\n",
        )
        config = load_session_config(path)

        assert config.generator.keywords == "AI Technology"
        assert config.generator.period is Period.PAST_WEEK
        assert config.generator.tone is Tone.ENTHUSIASTIC
        assert config.generator.length is Length.SHORT
        assert config.languages == ["English", "French"]

    def test_optional_fields_default(self, tmp_path: Path) -> None:
        config = load_session_config(write(tmp_path, "generator:\n  keywords: 반도체\n"))

        assert config.generator.period is Period.PAST_24_HOURS
        assert config.generator.tone is Tone.ACADEMIC
        assert config.generator.length is Length.STANDARD
        assert config.languages == DEFAULT_LANGUAGES

    def test_empty_file(self, tmp_path: Path) -> None:
        config = load_session_config(write(tmp_path, ""))
        assert config.generator is None
        assert config.languages == DEFAULT_LANGUAGES

    def test_repository_sample_is_valid(self) -> None:
        sample = Path(__file__).resolve().parent.parent / "config" / "generator.yaml"
        assert load_session_config(sample).generator.keywords == "AI Technology"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_session_config(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "text",
        [
            "generator: [1, 2]\n",
            "generator:\n  period: Past Week\n",
            "generator:\n  keywords: AI\n  tone: Grumpy\n",
            "generator:\n  keywords: AI\n  colour: blue\n",
            "languages: English\n",
            "languages: ['', French]\n",
            "- just\n- a list\n",
            "generator: {keywords: [unclosed\n",
        ],
    )
    def test_invalid_files(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(ConfigError):
            load_session_config(write(tmp_path, text))


@pytest.mark.unit
def test_gateway_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PROCESSING_BACKEND", "ollama")
    monkeypatch.setenv("AI_TIMEOUT", "30")
    monkeypatch.setenv("PROGRESS_INTERVAL", "0.1")

    settings = GatewaySettings()

    assert settings.backend == "ollama"
    assert settings.timeout == 30
    assert settings.progress_interval == pytest.approx(0.1)
