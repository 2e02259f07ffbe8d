"""
Subscription handle returned by every listener registration.
"""

from typing import Callable, Optional


class Subscription:
    """
    Handle for a registered listener.

    close() removes the listener exactly once; further calls are no-ops.
    Usable as a context manager.
    """

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe: Optional[Callable[[], None]] = unsubscribe

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def close(self) -> None:
        """Remove the listener."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
