"""Serialized main context and cancellation primitives."""

from __future__ import annotations

from concurrent.futures import Future, InvalidStateError, ThreadPoolExecutor
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def pending_future() -> Future:
    """Return a future that only its producer can resolve.

    The future is already marked running, so ``Future.cancel`` on the
    consumer side is a no-op; cancellation goes through ``CancellationToken``.
    """
    future: Future = Future()
    future.set_running_or_notify_cancel()
    return future


def resolve_once(future: Future, value: Any) -> bool:
    if future.done():
        return False
    try:
        future.set_result(value)
    except InvalidStateError:
        # resolved concurrently by another thread
        return False
    return True


class MainContext:
    """Single worker executor that all UI-visible mutations run on."""

    def __init__(self, name: str = "grabber-main") -> None:
        self.name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._timers: Dict[threading.Timer, Future] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn`` on the main context; raises ``RuntimeError`` once closed."""
        return self._executor.submit(fn, *args, **kwargs)

    def post(self, fn: Callable[..., Any], *args: Any) -> bool:
        """Like ``submit`` but returns ``False`` instead of raising once closed."""
        try:
            self.submit(fn, *args)
        except RuntimeError:
            return False
        return True

    def call_later(self, delay: float, fn: Callable[..., Any], *args: Any) -> Future:
        """Run ``fn`` on the main context after ``delay`` seconds.

        The returned future resolves to ``None`` if the context closes first.
        """
        if delay <= 0:
            return self.submit(fn, *args)

        result = pending_future()

        def _fire() -> None:
            with self._lock:
                self._timers.pop(timer, None)
                closed = self._closed
            if closed:
                resolve_once(result, None)
                return
            try:
                inner = self.submit(fn, *args)
            except RuntimeError:
                resolve_once(result, None)
                return
            inner.add_done_callback(lambda done: _chain(done, result))

        timer = threading.Timer(delay, _fire)
        timer.daemon = True
        with self._lock:
            if self._closed:
                raise RuntimeError(f"{self.name} is closed")
            self._timers[timer] = result
        timer.start()
        return result

    def close(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
            timers, self._timers = self._timers, {}
        for timer, result in timers.items():
            timer.cancel()
            resolve_once(result, None)
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "MainContext":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _chain(source: Future, target: Future) -> None:
    if target.done():
        return
    error = source.exception()
    if error is not None:
        target.set_exception(error)
    else:
        target.set_result(source.result())


class CancellationToken:
    """One-way flag that runs registered callbacks when cancelled."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            _run_callback(callback)

    def add_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        _run_callback(callback)

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)


def _run_callback(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Cancellation callback %r failed", callback)
