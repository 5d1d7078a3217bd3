"""
Run an action with a cleanup that survives SIGINT.

``run_guarded(action=..., cleanup=...)`` runs ``action`` and guarantees
``cleanup`` runs exactly once afterwards, whether the action returns,
raises, or the process receives an interrupt part way through. On an
interrupt the cleanup runs first, then the signal is re-delivered to the
handler that was installed before the guard, so default termination
behaviour is kept.
"""

import os
import signal
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator

from inline_values.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_KEYS = ("action", "cleanup")


class GuardConfigurationError(ValueError):
    """Raised when run_guarded is called with missing or unknown keys."""
    pass


class HardCoreEnsure:
    """
    Guarded invocation of an action with a once-only cleanup.

    The previous SIGINT handler is held by the instance for the duration
    of one call and restored before the cleanup runs.
    """

    def __init__(self, options: Dict[str, Any]):
        self._options = dict(options)
        self._validate_options()
        self._cleanup_invoked = False
        self._old_handler: Any = None
        self._trapped = False

    def call(self) -> None:
        """Run the action, then the cleanup exactly once."""
        try:
            with self._interrupt_trap():
                self._options["action"]()
        finally:
            self._invoke_cleanup()

    @contextmanager
    def _interrupt_trap(self) -> Iterator[None]:
        self._trap_sigint()
        try:
            yield
        finally:
            self._restore_handler()

    def _trap_sigint(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, SIGINT handler not installed")
            return

        old_handler = signal.getsignal(signal.SIGINT)
        if old_handler == signal.SIG_IGN:
            # the process already ignores interrupts, keep it that way
            return

        self._old_handler = old_handler
        signal.signal(signal.SIGINT, self._handle_interrupt)
        self._trapped = True

    def _handle_interrupt(self, signum: int, frame: Any) -> None:
        logger.info("Interrupt received, running cleanup before re-raising")
        self._invoke_cleanup()
        os.kill(os.getpid(), signal.SIGINT)

    def _restore_handler(self) -> None:
        if not self._trapped:
            return
        # handlers installed outside Python report as None
        previous = self._old_handler if self._old_handler is not None else signal.SIG_DFL
        signal.signal(signal.SIGINT, previous)
        self._trapped = False

    def _invoke_cleanup(self) -> None:
        # Uninstall first: once our handler is gone no interrupt can re-enter here.
        self._restore_handler()
        if self._cleanup_invoked:
            return
        self._cleanup_invoked = True
        self._options["cleanup"]()

    def _validate_options(self) -> None:
        for key in REQUIRED_KEYS:
            if key not in self._options:
                raise GuardConfigurationError(f"Must pass the '{key}' key")

        unknown_keys = [key for key in self._options if key not in REQUIRED_KEYS]
        if len(unknown_keys) == 1:
            raise GuardConfigurationError(f"Unknown key: {unknown_keys[0]!r}")
        if unknown_keys:
            names = ", ".join(repr(key) for key in unknown_keys)
            raise GuardConfigurationError(f"Unknown keys: {names}")


def run_guarded(**options: Callable[[], Any]) -> None:
    """
    Run ``action`` and guarantee ``cleanup`` runs exactly once.

    Args:
        action: Callable to run
        cleanup: Callable run once after the action, or on SIGINT

    Raises:
        GuardConfigurationError: If a key is missing or unknown
    """
    HardCoreEnsure(options).call()
