"""Tests for the gateway retry wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from newsbloggen.cancellation import CancellationToken
from newsbloggen.errors import OperationCancelled, SchemaError, ServiceError
from newsbloggen.gateway.retry import with_retries


@pytest.fixture(autouse=True)
def _clear_retry_env(monkeypatch) -> None:
    monkeypatch.delenv("AI_RETRIES", raising=False)
    monkeypatch.delenv("AI_BACKOFF", raising=False)


@pytest.mark.unit
class TestWithRetries:
    def test_returns_first_success(self) -> None:
        fn = MagicMock(return_value="ok")
        assert with_retries(fn) == "ok"
        fn.assert_called_once()

    def test_retries_generation_failures(self) -> None:
        fn = MagicMock(side_effect=[ServiceError("down"), SchemaError("bad"), "ok"])
        with patch("newsbloggen.gateway.retry.time.sleep") as sleep:
            assert with_retries(fn, retries=2, backoff=2.0) == "ok"
        assert fn.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_raises_last_failure_when_exhausted(self) -> None:
        fn = MagicMock(side_effect=ServiceError("still down"))
        with patch("newsbloggen.gateway.retry.time.sleep"):
            with pytest.raises(ServiceError, match="still down"):
                with_retries(fn, retries=1)
        assert fn.call_count == 2

    def test_other_exceptions_are_not_retried(self) -> None:
        fn = MagicMock(side_effect=KeyError("bug"))
        with pytest.raises(KeyError):
            with_retries(fn)
        fn.assert_called_once()

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("AI_RETRIES", "0")
        fn = MagicMock(side_effect=ServiceError("down"))
        with pytest.raises(ServiceError):
            with_retries(fn, retries=5)
        fn.assert_called_once()

    def test_invalid_env_is_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("AI_RETRIES", "many")
        fn = MagicMock(side_effect=[ServiceError("down"), "ok"])
        with patch("newsbloggen.gateway.retry.time.sleep"):
            assert with_retries(fn, retries=1) == "ok"

    def test_cancelled_token_stops_before_calling(self) -> None:
        token = CancellationToken()
        token.cancel()
        fn = MagicMock(return_value="ok")
        with pytest.raises(OperationCancelled):
            with_retries(fn, token=token)
        fn.assert_not_called()

    def test_cancellation_during_backoff(self) -> None:
        token = CancellationToken()

        def fail_and_cancel():
            token.cancel()
            raise ServiceError("down")

        fn = MagicMock(side_effect=fail_and_cancel)
        with pytest.raises(OperationCancelled):
            with_retries(fn, retries=3, backoff=10.0, token=token)
        fn.assert_called_once()
