"""Tests for cancellable background tasks."""

import threading

import pytest

from car_bnb.infrastructure import background


class TestTask:
    def test_wait_returns_result(self) -> None:
        task = background.submit(lambda a, b: a + b, 2, 3)
        assert task.wait() == 5

    def test_wait_propagates_errors(self) -> None:
        def boom():
            raise RuntimeError("boom")

        task = background.submit(boom)
        with pytest.raises(RuntimeError):
            task.wait()

    def test_cancelled_result_is_dropped(self) -> None:
        release = threading.Event()
        task = background.submit(release.wait, 5)

        task.cancel()
        release.set()
        with pytest.raises(background.TaskCancelled):
            task.wait()

    def test_cancel_after_completion_still_drops(self) -> None:
        task = background.submit(lambda: "done")
        task.future.result(timeout=5)

        task.cancel()
        with pytest.raises(background.TaskCancelled):
            task.wait()

    def test_shared_token(self) -> None:
        token = background.CancelToken()
        task = background.submit(lambda: 1, token=token)
        assert task.token is token
        token.cancel()
        assert token.is_cancelled
