"""Shared fixtures: a scriptable in-memory gateway and sample articles."""

from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Tuple

import pytest

from newsbloggen.cancellation import CancellationToken
from newsbloggen.gateway import GenerationGateway
from newsbloggen.models import Article, GeneratorConfig, Length, Period, Source, Tone
from newsbloggen.orchestrator import RevisionOrchestrator

IMG1 = "https://image.pollinations.ai/prompt/seoul%20office?width=1280&height=720&nologo=true&seed=11"
IMG2 = "https://image.pollinations.ai/prompt/robot%20lab?width=1280&height=720&nologo=true&seed=22"
IMG3 = "https://image.pollinations.ai/prompt/city%20night?width=1280&height=720&nologo=true&seed=33"
IMG4 = "https://image.pollinations.ai/prompt/chip%20factory?width=1280&height=720&nologo=true&seed=44"


def body_with(*images: str, text: str = "AI 기술 동향") -> str:
    imgs = "".join(f'<img src="{src}" alt="이미지" />' for src in images)
    return f"<h2>{text}</h2><p>국내 뉴스 요약</p>{imgs}<h2>해외 사례/트렌드</h2><p>Global case studies</p>"


class FakeGateway(GenerationGateway):
    """Returns scripted results; a result may be a value, an exception or a callable.

    Setting ``gate`` makes every call block until the event is set, which lets
    tests observe the orchestrator while a request is in flight.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.draft_result: Any = None
        self.refine_result: Any = None
        self.translate_result: Any = None
        self.gate: Optional[threading.Event] = None
        self.started = threading.Event()

    def _resolve(self, result: Any, *args: Any) -> Any:
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            return result(*args)
        return result

    def draft(self, config: GeneratorConfig, *, token: Optional[CancellationToken] = None) -> Article:
        self.calls.append(("draft", config))
        return self._resolve(self.draft_result, config)

    def refine(self, body: str, instruction: str, *, token: Optional[CancellationToken] = None) -> str:
        self.calls.append(("refine", body, instruction))
        return self._resolve(self.refine_result, body, instruction)

    def translate(self, body: str, target_language: str, *, token: Optional[CancellationToken] = None) -> str:
        self.calls.append(("translate", body, target_language))
        return self._resolve(self.translate_result, body, target_language)

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


@pytest.fixture
def sample_config() -> GeneratorConfig:
    return GeneratorConfig(
        keywords="AI Technology",
        period=Period.PAST_24_HOURS,
        tone=Tone.ACADEMIC,
        length=Length.STANDARD,
    )


@pytest.fixture
def sample_article() -> Article:
    return Article(
        title="AI 기술, 오늘의 핵심 뉴스",
        body=body_with(IMG1, IMG2, IMG3),
        tags=("#AI", "#기술", "#트렌드", "#글로벌", "#분석"),
        sources=(
            Source("연합뉴스 AI 보도", "https://news.naver.com/1"),
            Source("한국경제 AI 산업", "https://news.naver.com/2"),
            Source("Bloomberg: AI race", "https://bloomberg.com/ai"),
            Source("TechCrunch: Chips", "https://techcrunch.com/chips"),
        ),
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def orchestrator(gateway: FakeGateway):
    orch = RevisionOrchestrator(gateway, progress_interval=0.0)
    yield orch
    if gateway.gate is not None:
        gateway.gate.set()
    orch.close()


@pytest.fixture
def drafted(orchestrator: RevisionOrchestrator, gateway: FakeGateway, sample_config, sample_article):
    """An orchestrator whose session already holds the sample article."""
    gateway.draft_result = sample_article
    orchestrator.submit_config(sample_config).result(timeout=5)
    gateway.calls.clear()
    gateway.started.clear()
    return orchestrator


def gated(gateway: FakeGateway) -> threading.Event:
    gateway.gate = threading.Event()
    gateway.started.clear()
    return gateway.gate


def constant(value: str) -> Callable[..., str]:
    return lambda *_: value
