"""Graceful shutdown: run registered close functions once, concurrently."""

from __future__ import annotations

import queue
import signal
import threading
import time
from typing import Any, Callable, Protocol

from rocketfactory.logger import NoopLogger, get_logger

SHUTDOWN_TIMEOUT = 5.0

CloseFunc = Callable[[], None]

_FINISHED = object()


class _Logger(Protocol):
    def info(self, msg: str, **kwargs: Any) -> None: ...

    def error(self, msg: str, **kwargs: Any) -> None: ...


class Closer:
    """Collects close functions and runs them all exactly once."""

    def __init__(self, logger: _Logger | None = None, signals: tuple[int, ...] = ()) -> None:
        if logger is None:
            logger = get_logger() or NoopLogger()
        self._logger: _Logger = logger
        self._lock = threading.Lock()
        self._started = False
        self._done = threading.Event()
        self._funcs: list[CloseFunc] = []
        if signals:
            self.handle_signals(*signals)

    def set_logger(self, logger: _Logger) -> None:
        self._logger = logger

    def handle_signals(self, *signals: int) -> None:
        """Run close_all when one of the signals arrives (main thread only)."""
        previous = {sig: signal.getsignal(sig) for sig in signals}

        def restore() -> None:
            for sig, handler in previous.items():
                signal.signal(sig, signal.SIG_DFL if handler is None else handler)

        def on_signal(signum: int, _frame: Any) -> None:
            restore()
            if self._done.is_set():
                signal.raise_signal(signum)
                return
            self._logger.info("Received system signal, starting graceful shutdown...")
            threading.Thread(target=self._shutdown_on_signal, daemon=True).start()

        for sig in signals:
            signal.signal(sig, on_signal)

    def _shutdown_on_signal(self) -> None:
        try:
            self.close_all(SHUTDOWN_TIMEOUT)
        except Exception as exc:
            self._logger.error("Failed to close resources", error=str(exc))

    def add_named(self, name: str, func: CloseFunc) -> None:
        """Register a close function whose progress is logged under a name."""

        def named() -> None:
            start = time.monotonic()
            self._logger.info(f"Closing {name}...")
            try:
                func()
            except Exception as exc:
                duration = time.monotonic() - start
                self._logger.error(f"Failed to close {name}: {exc} (took {duration:.3f}s)")
                raise
            duration = time.monotonic() - start
            self._logger.info(f"{name} closed successfully in {duration:.3f}s")

        self.add(named)

    def add(self, *args: CloseFunc) -> None:
        with self._lock:
            self._funcs.extend(args)

    def close_all(self, timeout: float | None = None) -> None:
        """Run every registered function; raise the first failure or TimeoutError.

        Only the first call does any work; later calls wait for it to finish.
        """
        with self._lock:
            already_started = self._started
            if not already_started:
                self._started = True
                funcs, self._funcs = self._funcs, []
        if already_started:
            self._done.wait()
            return
        try:
            self._run(funcs, timeout)
        finally:
            self._done.set()

    def _run(self, funcs: list[CloseFunc], timeout: float | None) -> None:
        if not funcs:
            self._logger.info("No functions to close.")
            return

        self._logger.info("Starting graceful shutdown...")
        results: queue.Queue[Any] = queue.Queue()

        def invoke(func: CloseFunc) -> None:
            try:
                func()
            except Exception as exc:
                results.put(exc)

        threads = [threading.Thread(target=invoke, args=(f,), daemon=True) for f in reversed(funcs)]
        for thread in threads:
            thread.start()

        def watch() -> None:
            for thread in threads:
                thread.join()
            results.put(_FINISHED)

        threading.Thread(target=watch, daemon=True).start()

        deadline = None if timeout is None else time.monotonic() + timeout
        first: BaseException | None = None
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                item = results.get(timeout=remaining)
            except queue.Empty:
                expired = TimeoutError("shutdown timed out before all resources were closed")
                self._logger.info("Shutdown deadline expired while closing", error=str(expired))
                if first is None:
                    first = expired
                break
            if item is _FINISHED:
                self._logger.info("All resources closed successfully")
                break
            self._logger.error("Error while closing", error=str(item))
            if first is None:
                first = item

        if first is not None:
            raise first


_global_closer = Closer(NoopLogger())


def add_named(name: str, func: CloseFunc) -> None:
    _global_closer.add_named(name, func)


def add(*args: CloseFunc) -> None:
    _global_closer.add(*args)


def close_all(timeout: float | None = None) -> None:
    _global_closer.close_all(timeout)


def set_logger(logger: _Logger) -> None:
    _global_closer.set_logger(logger)


def configure(*args: int) -> None:
    """Make the global closer shut down on the given signals."""
    _global_closer.handle_signals(*args)