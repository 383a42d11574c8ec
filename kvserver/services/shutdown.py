from threading import Event, Lock


class ShutdownSignal:
    """One-shot broadcast flag. Firing it more than once is a no-op."""

    def __init__(self) -> None:
        self._event = Event()
        self._lock = Lock()

    def fire(self) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    @property
    def is_fired(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)
