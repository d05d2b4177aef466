import signal
import threading
from typing import Optional

from .errors import OperationCancelled


class OperationContext:
    """Cancellation flag and call timeout shared by every endpoint call of a run."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._reason = ""
        self._previous_sigterm = None
        self._handler_installed = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "cancelado") -> None:
        if not self._cancelled.is_set():
            self._reason = reason
            self._cancelled.set()

    def check(self) -> None:
        if self._cancelled.is_set():
            raise OperationCancelled(f"Operacion cancelada: {self._reason}")

    def install_signal_handlers(self) -> bool:
        # Signal handlers can only be set from the main thread.
        if threading.current_thread() is not threading.main_thread():
            return False

        # Raising from the handler interrupts the blocking SOAP call on the main thread.
        def _handler(signum, _frame):
            name = signal.Signals(signum).name
            self.cancel(name)
            raise OperationCancelled(f"Operacion cancelada: {name}")

        self._previous_sigterm = signal.signal(signal.SIGTERM, _handler)
        self._handler_installed = True
        return True

    def restore_signal_handlers(self) -> None:
        if not self._handler_installed:
            return
        previous = self._previous_sigterm
        signal.signal(signal.SIGTERM, previous if previous is not None else signal.SIG_DFL)
        self._previous_sigterm = None
        self._handler_installed = False
