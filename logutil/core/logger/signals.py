"""
Runtime level control through OS signals.

SIGUSR1 raises verbosity (debug), SIGUSR2 lowers it (error):

    kill -USR1 <pid>   # debug
    kill -USR2 <pid>   # error

The signal handler only enqueues the signal number; a daemon worker thread
applies level changes in arrival order. stop() restores the previous signal
handlers and joins the worker.
"""
from __future__ import annotations

import logging
import queue
import signal
import threading
from typing import TYPE_CHECKING, Any, Mapping, Optional

from logutil.core.logger.levels import level_name

if TYPE_CHECKING:
    from logutil.core.logger.setup import LoggerHandle

logger = logging.getLogger(__name__)

RAISE_VERBOSITY: Optional[int] = getattr(signal, "SIGUSR1", None)
LOWER_VERBOSITY: Optional[int] = getattr(signal, "SIGUSR2", None)

_STOP = object()


def default_transitions() -> dict[int, int]:
    """SIGUSR1 -> DEBUG, SIGUSR2 -> ERROR (empty where those signals don't exist)."""
    transitions: dict[int, int] = {}
    if RAISE_VERBOSITY is not None:
        transitions[RAISE_VERBOSITY] = logging.DEBUG
    if LOWER_VERBOSITY is not None:
        transitions[LOWER_VERBOSITY] = logging.ERROR
    return transitions


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


class LevelSignalController:
    """Background listener that sets a handle's level when a signal arrives."""

    def __init__(
        self,
        handle: LoggerHandle,
        transitions: Optional[Mapping[int, int]] = None,
    ) -> None:
        self.handle = handle
        self.transitions: dict[int, int] = (
            dict(transitions) if transitions is not None else default_transitions()
        )
        self._queue: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._previous: dict[int, Any] = {}
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> LevelSignalController:
        """Install signal handlers and start the worker. Calling twice is a no-op."""
        with self._lock:
            if self._thread is not None:
                return self
            self._install_handlers()
            self._thread = threading.Thread(
                target=self._run, name="logutil-level-signals", daemon=True
            )
            self._thread.start()
        return self

    def notify(self, signum: int) -> None:
        """Queue a level change as if `signum` had been delivered."""
        self._queue.put(signum)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Restore previous signal handlers and stop the worker."""
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._restore_handlers()
            self._queue.put(_STOP)
            thread.join(timeout)
            self._thread = None

    def _on_signal(self, signum: int, frame: Any) -> None:
        # Runs in the main thread between bytecodes; SimpleQueue.put is reentrant
        self._queue.put(signum)

    def _install_handlers(self) -> None:
        if not self.transitions:
            logger.warning("SIGUSR1/SIGUSR2 not available, level signals disabled")
            return
        if threading.current_thread() is not threading.main_thread():
            logger.warning("Level signals must be installed from the main thread; only notify() will work")
            return
        for signum in self.transitions:
            try:
                self._previous[signum] = signal.signal(signum, self._on_signal)
            except (OSError, ValueError) as exc:
                logger.warning("Could not watch %s: %s", _signal_name(signum), exc)

    def _restore_handlers(self) -> None:
        for signum, previous in list(self._previous.items()):
            try:
                signal.signal(signum, previous)
            except (OSError, ValueError) as exc:
                logger.warning("Could not restore handler for %s: %s", _signal_name(signum), exc)
                continue
            del self._previous[signum]

    def _run(self) -> None:
        while True:
            signum = self._queue.get()
            if signum is _STOP:
                return
            level = self.transitions.get(signum)
            if level is None:
                continue
            self.handle.set_level(level)
            logger.info("Log level set to %s by %s", level_name(level), _signal_name(signum))


def start_level_signals(
    handle: LoggerHandle,
    transitions: Optional[Mapping[int, int]] = None,
) -> LevelSignalController:
    """Start a controller for `handle` and attach it as handle.signal_controller."""
    if handle.signal_controller is not None:
        handle.signal_controller.stop()
    controller = LevelSignalController(handle, transitions).start()
    handle.signal_controller = controller
    return controller
