"""
View Router - Role-gated navigation state.

States are view keys partitioned by role, plus "unauthenticated" (None).
The router reconciles on every session change so that the active view
always belongs to the session's role partition.
"""

import logging
from typing import List, Optional
from hr_portal.domain.session import Session
from hr_portal.domain.views import View, NavItem
from hr_portal.sdk.store import SessionStore


logger = logging.getLogger(__name__)


def visible_views(session: Optional[Session]) -> List[View]:
    """
    Views a session may see, in navigation order.

    Admins see the whole admin partition. Employees see their dashboard plus
    one view per granted permission.
    """
    if session is None:
        return []

    return [
        view for view in View.partition(session.role)
        if view.required_permission is None or session.can(view.required_permission)
    ]


class ViewRouter:
    """
    Role-gated view state machine.

    Transitions:
    - sign-out -> unauthenticated (active is None)
    - sign-in -> the role's landing view
    - session whose role partition excludes the active view -> landing view
    - employee losing the permission of the active view -> landing view
    - navigate() -> any view currently shown in navigation()
    """

    def __init__(self, store: SessionStore):
        """
        Initialize router and subscribe to session changes.

        Args:
            store: Session store to follow
        """
        self._store = store
        self._active: Optional[View] = None
        self._subscription = store.subscribe(self._on_session_change)
        self._reconcile(None, store.session)

    @property
    def active(self) -> Optional[View]:
        """Active view, or None when signed out."""
        if self._store.session is None:
            return None
        return self._active

    def navigation(self) -> List[NavItem]:
        """Navigation controls for the current session. Hidden views are unreachable."""
        return [NavItem.for_view(view) for view in visible_views(self._store.session)]

    def navigate(self, view: View) -> bool:
        """
        Switch the active view.

        Args:
            view: Target view key

        Returns:
            True if switched, False if the view is not visible to the session
        """
        view = View(view)
        if view not in visible_views(self._store.session):
            logger.debug("Navigation to %s rejected", view.value)
            return False

        self._active = view
        return True

    def _on_session_change(self, previous: Optional[Session], current: Optional[Session]) -> None:
        self._reconcile(previous, current)

    def _reconcile(self, previous: Optional[Session], current: Optional[Session]) -> None:
        if current is None:
            self._active = None
            return

        if previous is None or self._active is None:
            self._active = View.default_for(current.role)
            return

        if self._active not in visible_views(current):
            logger.debug(
                "Active view %s not allowed for %s, redirecting",
                self._active.value,
                current.role.value,
            )
            self._active = View.default_for(current.role)

    def close(self) -> None:
        """Stop following session changes."""
        self._subscription.close()
