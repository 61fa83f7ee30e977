"""
Session State - the signed-in identity on the client side.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

SessionListener = Callable[["SessionState"], None]


class SessionState:
    """
    Current user id, e-mail and bearer token.

    Listeners subscribed with :meth:`subscribe` are called after every change
    of identity (sign-in, sign-out, switching user), never for a no-op update.
    One instance is created by the caller and passed to whatever needs it.
    """

    def __init__(self):
        self.user_id: Optional[str] = None
        self.email: Optional[str] = None
        self.access_token: Optional[str] = None
        self._listeners: List[SessionListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register ``listener``.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, user_id: str, email: str, access_token: str) -> None:
        """Replace the identity and notify listeners if anything changed."""
        if (user_id, email, access_token) == (self.user_id, self.email, self.access_token):
            return
        self.user_id, self.email, self.access_token = user_id, email, access_token
        self._notify()

    def clear(self) -> None:
        """Forget the identity (sign-out)."""
        if not self.is_authenticated and self.user_id is None:
            return
        self.user_id = self.email = self.access_token = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
