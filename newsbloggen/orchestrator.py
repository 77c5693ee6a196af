from __future__ import annotations

import threading
from concurrent.futures import Future
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Tuple

from .cancellation import CancellationToken
from .errors import FailureReason, GenerationFailure, OperationCancelled, RevisionRejected
from .gateway import GenerationGateway
from .markup import extract_media_refs
from .models import (
    Article,
    ContentModel,
    ConversationEntry,
    GeneratorConfig,
    RevisionKind,
    RevisionOutcome,
    RevisionRequest,
)
from .progress import ProgressCallback, ProgressStream, draft_steps
from .utils.logging import get_logger

logger = get_logger("nbg.orchestrator")

DRAFTED_MESSAGE = "I've drafted the post based on your keywords. What would you like to improve?"
REFINED_MESSAGE = "I've updated the draft based on your feedback."
REFINE_FAILED_MESSAGE = "Sorry, I encountered an error updating the draft"
TRANSLATE_FAILED_MESSAGE = "Translation failed"
CANCELLED_MESSAGE = "Cancelled the pending request. The draft was left unchanged."
UNDO_MESSAGE = "Restored the previous version of the draft."
DRAFT_FAILED_MESSAGE = "Failed to generate content. Please try again or check your API key."
EXPORTED_MESSAGE = "Export complete: {path}"

_REASON_TEXT = {
    FailureReason.SERVICE_ERROR: "the AI service could not be reached",
    FailureReason.SCHEMA_ERROR: "the AI response could not be used",
}


class OrchestratorState(str, Enum):
    IDLE = "idle"
    AWAITING_DRAFT = "awaiting_draft"
    AWAITING_REFINE = "awaiting_refine"
    AWAITING_TRANSLATE = "awaiting_translate"


_AWAITING = {
    RevisionKind.DRAFT: OrchestratorState.AWAITING_DRAFT,
    RevisionKind.REFINE: OrchestratorState.AWAITING_REFINE,
    RevisionKind.TRANSLATE: OrchestratorState.AWAITING_TRANSLATE,
}


def _media_loss_message(lost: FrozenSet[str]) -> str:
    listed = ", ".join(sorted(lost))
    return (
        f"Warning: {len(lost)} embedded image(s) from the previous version are missing after this update: "
        f"{listed}. You can undo the last change if this was not intended."
    )


def _failure_message(prefix: str, exc: Exception) -> str:
    if isinstance(exc, GenerationFailure):
        return f"{prefix} ({_REASON_TEXT[exc.reason]})."
    return f"{prefix}."


class RevisionOrchestrator:
    """Sequences gateway calls against one article and its conversation.

    At most one gateway call is outstanding at a time. Submissions made while
    a call is in flight raise ``RevisionRejected`` without reaching the
    gateway. Each submit method returns a ``Future`` right away; gateway
    calls run on their own daemon threads.

    Refine and translate results are checked against the media references
    that were in the body before the call. A loss is reported as a warning
    entry in the conversation and never blocks the update.
    """

    def __init__(
        self,
        gateway: GenerationGateway,
        *,
        content: Optional[ContentModel] = None,
        progress_interval: float = 0.8,
    ) -> None:
        self.gateway = gateway
        self.content = content or ContentModel()
        self.progress_interval = progress_interval
        self._closed = False
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._state = OrchestratorState.IDLE
        self._in_flight: Optional[RevisionRequest] = None
        self._token: Optional[CancellationToken] = None
        self._progress: Optional[ProgressStream] = None
        self._previous_body: Optional[str] = None
        self._progress_subscribers: List[ProgressCallback] = []

    # Read access

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def in_flight(self) -> Optional[RevisionRequest]:
        return self._in_flight

    @property
    def article(self) -> Optional[Article]:
        return self.content.article

    @property
    def conversation(self) -> Tuple[ConversationEntry, ...]:
        return self.content.conversation

    @property
    def can_undo(self) -> bool:
        return self._previous_body is not None

    def on_progress(self, callback: ProgressCallback) -> Callable[[], None]:
        """Subscribe to draft progress events; returns an unsubscribe function."""
        self._progress_subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._progress_subscribers:
                self._progress_subscribers.remove(callback)

        return unsubscribe

    # State guard; callers hold self._lock

    def _begin(self, request: RevisionRequest) -> CancellationToken:
        if self._closed:
            raise RuntimeError("Orchestrator is closed")
        if self._state is not OrchestratorState.IDLE:
            current = self._in_flight.kind.value if self._in_flight else self._state.value
            logger.info("Rejected %s request: %s request in flight", request.kind.value, current)
            raise RevisionRejected(f"A {current} request is still in progress; wait for it to finish.")
        token = CancellationToken()
        self._state = _AWAITING[request.kind]
        self._in_flight = request
        self._token = token
        logger.info("State idle -> %s", self._state.value)
        return token

    def _finish(self, token: CancellationToken) -> bool:
        """Return to idle if ``token`` still owns the in-flight slot."""
        if self._token is not token:
            return False
        logger.info("State %s -> idle", self._state.value)
        self._state = OrchestratorState.IDLE
        self._in_flight = None
        self._token = None
        self._progress = None
        self._worker = None
        return True

    def _submit(self, token: CancellationToken, fn, *args) -> Future:
        """Run ``fn`` on a fresh daemon thread and expose it as a ``Future``.

        A cancelled call may keep blocking inside the HTTP client until its
        timeout; it owns its thread, so it never holds up the next request
        or interpreter exit.
        """
        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                with self._lock:
                    self._finish(token)
                return
            try:
                result = fn(*args)
            except BaseException as exc:  # handed to the caller through the future
                future.set_exception(exc)
            else:
                future.set_result(result)

        worker = threading.Thread(target=run, name="revision", daemon=True)
        with self._lock:
            if self._token is token:
                self._worker = worker
        worker.start()
        return future

    # Draft

    def submit_config(self, config: GeneratorConfig) -> "Future[Article]":
        """Request the initial draft.

        The returned future raises the ``GenerationFailure`` when drafting
        fails; the conversation is not touched in that case and the same
        configuration may be submitted again.
        """
        with self._lock:
            if self.content.article is not None:
                raise RevisionRejected("This session already has a draft; start a new session to draft again.")
            token = self._begin(RevisionRequest(RevisionKind.DRAFT, {"config": config}))
            progress = ProgressStream(
                draft_steps(config.keywords),
                self._progress_subscribers,
                interval=self.progress_interval,
            )
            self._progress = progress
        progress.start()
        return self._submit(token, self._run_draft, config, token, progress)

    def _run_draft(self, config: GeneratorConfig, token: CancellationToken, progress: ProgressStream) -> Article:
        try:
            article = self.gateway.draft(config, token=token)
        except OperationCancelled:
            progress.finish(success=False, message="Draft cancelled.")
            with self._lock:
                self._finish(token)
            raise
        except Exception as exc:
            if isinstance(exc, GenerationFailure):
                logger.warning("Draft failed (%s): %s", exc.reason.value, exc)
            else:
                logger.exception("Draft failed unexpectedly")
            progress.finish(success=False, message=DRAFT_FAILED_MESSAGE)
            with self._lock:
                self._finish(token)
            raise

        with self._lock:
            if token.cancelled or self._token is not token:
                logger.info("Discarding draft result of a cancelled request")
                cancelled = True
            else:
                cancelled = False
                stored = self.content.set_article(article)
                self.content.append_entry("assistant", DRAFTED_MESSAGE)
                self._finish(token)
        if cancelled:
            progress.finish(success=False, message="Draft cancelled.")
            raise OperationCancelled("Draft was cancelled")
        progress.finish(success=True)
        logger.info(
            "Draft ready: title=%r tags=%d sources=%d media=%d",
            stored.title,
            len(stored.tags),
            len(stored.sources),
            len(extract_media_refs(stored.body)),
        )
        return stored

    # Refine / translate

    def submit_instruction(self, text: str) -> "Future[RevisionOutcome]":
        instruction = (text or "").strip()
        if not instruction:
            raise ValueError("Instruction must not be empty")
        with self._lock:
            article = self._require_article()
            token = self._begin(
                RevisionRequest(RevisionKind.REFINE, {"body": article.body, "instruction": instruction})
            )
            self.content.append_entry("user", text)
        return self._submit(
            token,
            self._run_revision,
            RevisionKind.REFINE,
            article.body,
            lambda: self.gateway.refine(article.body, instruction, token=token),
            token,
            REFINED_MESSAGE,
            REFINE_FAILED_MESSAGE,
        )

    def submit_translation(self, language: str) -> "Future[RevisionOutcome]":
        target = (language or "").strip()
        if not target:
            raise ValueError("Target language must not be empty")
        with self._lock:
            article = self._require_article()
            token = self._begin(
                RevisionRequest(RevisionKind.TRANSLATE, {"body": article.body, "language": target})
            )
            self.content.append_entry("assistant", f"Translating content to {target}...")
        return self._submit(
            token,
            self._run_revision,
            RevisionKind.TRANSLATE,
            article.body,
            lambda: self.gateway.translate(article.body, target, token=token),
            token,
            f"Translation to {target} complete.",
            TRANSLATE_FAILED_MESSAGE,
        )

    def _require_article(self) -> Article:
        article = self.content.article
        if article is None:
            raise RevisionRejected("There is no draft to revise yet.")
        return article

    def _run_revision(
        self,
        kind: RevisionKind,
        body: str,
        call: Callable[[], str],
        token: CancellationToken,
        success_text: str,
        failure_prefix: str,
    ) -> RevisionOutcome:
        before = extract_media_refs(body)
        try:
            new_body = call()
        except OperationCancelled:
            with self._lock:
                self._finish(token)
            return RevisionOutcome(kind, succeeded=False, cancelled=True)
        except Exception as exc:
            if isinstance(exc, GenerationFailure):
                logger.warning("%s failed (%s): %s", kind.value.capitalize(), exc.reason.value, exc)
            else:
                logger.exception("%s failed unexpectedly", kind.value.capitalize())
            with self._lock:
                if not self._finish(token):
                    return RevisionOutcome(kind, succeeded=False, cancelled=True)
                self.content.append_entry("assistant", _failure_message(failure_prefix, exc), kind="error")
            return RevisionOutcome(kind, succeeded=False, error=str(exc))

        with self._lock:
            if token.cancelled or self._token is not token:
                logger.info("Discarding %s result of a cancelled request", kind.value)
                return RevisionOutcome(kind, succeeded=False, cancelled=True)
            stored = self.content.replace_body(new_body)
            lost = before - extract_media_refs(stored)
            if lost:
                logger.warning("%s dropped %d media reference(s): %s", kind.value.capitalize(), len(lost), sorted(lost))
                self.content.append_entry("assistant", _media_loss_message(lost), kind="warning")
            self.content.append_entry("assistant", success_text)
            self._previous_body = body
            self._finish(token)
        return RevisionOutcome(kind, succeeded=True, lost_media=frozenset(lost))

    # Cancellation and undo

    def cancel(self) -> bool:
        """Abandon the in-flight request; its result is discarded when it arrives."""
        with self._lock:
            token = self._token
            request = self._in_flight
            if token is None or request is None:
                return False
            token.cancel()
            progress = self._progress
            self._finish(token)
            if request.kind is not RevisionKind.DRAFT:
                self.content.append_entry("assistant", CANCELLED_MESSAGE)
        if progress is not None:
            progress.finish(success=False, message="Draft cancelled.")
        logger.info("Cancelled in-flight %s request", request.kind.value)
        return True

    def undo(self) -> bool:
        """Restore the body from before the last successful refine/translate."""
        with self._lock:
            if self._state is not OrchestratorState.IDLE:
                raise RevisionRejected("Cannot undo while a request is in progress.")
            if self._previous_body is None:
                return False
            self.content.replace_body(self._previous_body)
            self._previous_body = None
            self.content.append_entry("assistant", UNDO_MESSAGE)
        logger.info("Restored previous body")
        return True

    def announce(self, text: str) -> ConversationEntry:
        """Post an assistant message that is not tied to a gateway call."""
        with self._lock:
            return self.content.append_entry("assistant", text)

    def close(self, *, wait: bool = True) -> None:
        """Refuse further submissions; optionally wait for the live request.

        Requests that were cancelled are not waited for.
        """
        with self._lock:
            self._closed = True
            worker = self._worker if self._token is not None else None
        if wait and worker is not None and worker is not threading.current_thread():
            worker.join()

    def __enter__(self) -> "RevisionOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
