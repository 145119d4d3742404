"""Authentication status observed by a search session.

The session never logs users in or out; it only reads the current status
and listens for changes through an explicit subscription handle.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

AuthListener = Callable[[bool], None]


class Subscription:
    """Handle returned by ``subscribe``. ``unsubscribe`` is idempotent."""

    def __init__(self, owner: "AuthState", listener: AuthListener):
        self._owner = owner
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._owner._remove(self._listener)


class AuthStatusProvider(Protocol):
    def get_current_auth_status(self) -> bool: ...

    def subscribe(self, listener: AuthListener) -> Subscription: ...


class AuthState:
    """In-process broadcast of the authentication status.

    Listeners are called synchronously, in subscription order, whenever the
    value changes. Setting the same value again notifies nobody.
    """

    def __init__(self, authenticated: bool = False):
        self._authenticated = authenticated
        self._listeners: list[AuthListener] = []

    def get_current_auth_status(self) -> bool:
        return self._authenticated

    def subscribe(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def set(self, authenticated: bool) -> None:
        if authenticated == self._authenticated:
            return
        self._authenticated = authenticated
        logger.debug("Auth status changed to %s", authenticated)
        # Copy: a listener may unsubscribe while being notified.
        for listener in list(self._listeners):
            try:
                listener(authenticated)
            except Exception:
                logger.exception("Auth listener %r failed", listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _remove(self, listener: AuthListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass
