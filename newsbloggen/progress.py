"""Progress reporting for long-running draft requests.

The percentages are simulated: they advance on a timer while the draft call
is outstanding and are stopped explicitly when the call resolves, so the
stream never claims completion before the gateway does.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .utils.logging import get_logger

logger = get_logger("nbg.progress")


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    percent: int
    message: str
    done: bool = False
    failed: bool = False


ProgressCallback = Callable[[ProgressEvent], None]


def draft_steps(keywords: str) -> List[Tuple[int, str]]:
    return [
        (10, "Connecting to Naver News API..."),
        (30, f'Searching for "{keywords}"...'),
        (50, "Extracting multimedia content..."),
        (70, "Synthesizing AI draft..."),
    ]


class ProgressStream:
    def __init__(
        self,
        steps: Sequence[Tuple[int, str]],
        subscribers: Sequence[ProgressCallback],
        *,
        interval: float = 0.8,
    ) -> None:
        self._steps = list(steps)
        self._subscribers = list(subscribers)
        self._interval = interval
        self._stop = threading.Event()
        self._emit_lock = threading.Lock()
        self._finished = False
        self._thread: threading.Thread | None = None

    def _emit(self, event: ProgressEvent) -> None:
        for callback in self._subscribers:
            try:
                callback(event)
            except Exception:  # noqa: BLE001 - a broken subscriber must not stop the draft
                logger.exception("Progress subscriber failed")

    def _run(self) -> None:
        for percent, message in self._steps:
            if self._stop.wait(self._interval):
                return
            with self._emit_lock:
                if self._finished:
                    return
                self._emit(ProgressEvent(percent=percent, message=message))

    def start(self) -> None:
        if not self._subscribers or self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="draft-progress", daemon=True)
        self._thread.start()

    def finish(self, *, success: bool, message: str = "") -> None:
        """Stop the simulated steps and publish the terminal event once."""
        self._stop.set()
        with self._emit_lock:
            if self._finished:
                return
            self._finished = True
            if success:
                self._emit(ProgressEvent(percent=100, message=message or "Draft ready.", done=True))
            else:
                self._emit(ProgressEvent(percent=0, message=message or "Draft failed.", done=True, failed=True))
