"""Process-wide liveness flag read by the health endpoint."""

import threading


class LivenessFlag:
    """Boolean readiness cell flipped by server startup and shutdown.

    The flag starts not ready. Reads and writes go through a `threading.Event`,
    so request threads and the signal handler never observe a torn value.
    """

    def __init__(self) -> None:
        self._ready = threading.Event()

    def mark_ready(self) -> None:
        """Report the process as accepting traffic."""

        self._ready.set()

    def mark_draining(self) -> None:
        """Report the process as no longer accepting traffic."""

        self._ready.clear()

    def is_ready(self) -> bool:
        """Return whether the process currently accepts traffic.

        Returns:
            bool: True between startup and the first shutdown signal.
        """

        return self._ready.is_set()
