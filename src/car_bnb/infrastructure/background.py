"""
Run slow network calls off the prompt thread, with a cancel token.

submit() hands a call to a small shared thread pool and returns a Task. The
caller either waits for the result or cancels the task's token; once cancelled
the result is dropped, so a flow that has moved on never sees a late result.
"""
import concurrent.futures
import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_executor = concurrent.futures.ThreadPoolExecutor(max_workers=4, thread_name_prefix='car-bnb-bg')


class TaskCancelled(Exception):
    pass


class CancelToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class Task:
    def __init__(self, future: concurrent.futures.Future, token: CancelToken, name: str):
        self.future = future
        self.token = token
        self.name = name

    def cancel(self):
        logger.info("Cancelling task %s", self.name)
        self.token.cancel()
        self.future.cancel()  # Only succeeds if the call has not started yet.

    """
    Block until the call finishes and return its result.

    Raises TaskCancelled if the token was cancelled, whether before or after the
    call completed. Exceptions raised by the call itself propagate unchanged.
    Polls so that Ctrl+C in the main thread is delivered promptly.
    """
    def wait(self, poll_seconds: float = 0.1) -> Any:
        while True:
            if self.token.is_cancelled:
                raise TaskCancelled(self.name)
            try:
                result = self.future.result(timeout=poll_seconds)
            except concurrent.futures.TimeoutError:
                continue
            except concurrent.futures.CancelledError:
                raise TaskCancelled(self.name)

            if self.token.is_cancelled:
                raise TaskCancelled(self.name)
            return result


def submit(fn: Callable, *args, token: Optional[CancelToken] = None, **kwargs) -> Task:
    token = token or CancelToken()
    name = getattr(fn, '__name__', repr(fn))
    future = _executor.submit(fn, *args, **kwargs)
    return Task(future, token, name)
