"""
Session Store - Single owner of the current session.

View code reads the session here. Only the session resolvers and the
unauthorized handler write it.
"""

import logging
from typing import Callable, List, Optional
from hr_portal.domain.session import Session
from hr_portal.ports.subscription import Subscription


logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Session], Optional[Session]], None]


class SessionStore:
    """
    Process-wide session holder with change notification.

    Every replacement bumps 'generation'. Async work captures the generation
    at dispatch and checks is_current() before applying its result, so a
    response that lands after logout (or after another login) is dropped.

    Example:
        store = SessionStore()
        with store.subscribe(lambda old, new: print(old, "->", new)):
            store.replace(session)
    """

    def __init__(self):
        self._session: Optional[Session] = None
        self._generation = 0
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        """True if no session change happened since 'generation' was read."""
        return generation == self._generation

    def replace(self, session: Optional[Session]) -> None:
        """
        Publish a new session (or None for signed out).

        Listeners run synchronously, in subscription order, with
        (previous, current).
        """
        previous = self._session
        self._session = session
        self._generation += 1

        logger.debug(
            "Session changed: %s -> %s (generation %d)",
            previous.user_id if previous else None,
            session.user_id if session else None,
            self._generation,
        )

        for listener in list(self._listeners):
            listener(previous, session)

    def clear(self) -> None:
        """Drop the current session, if any."""
        if self._session is not None:
            self.replace(None)

    def subscribe(self, listener: SessionListener) -> Subscription:
        """
        Register a change listener.

        Returns:
            Handle that removes the listener when closed
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(unsubscribe)
