"""Auth state notifications.

Session-scoped publisher of "who is signed in". Subscribers (the cart
store) are told the principal ID on sign-in and None on sign-out.
"""
import inspect
from typing import Awaitable, Callable, List, Optional, Union

from core.logging import get_logger

logger = get_logger(__name__)

SessionHandler = Callable[[Optional[str]], Union[Awaitable[None], None]]


class AuthStateNotifier:
    """Publishes session mode changes to registered handlers."""

    def __init__(self) -> None:
        self._handlers: List[SessionHandler] = []
        self.principal_id: Optional[str] = None

    def on_session_mode_change(self, handler: SessionHandler) -> Callable[[], None]:
        """Register a handler; returns a function that unregisters it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def notify(self, principal_id: Optional[str]) -> None:
        """Tell every handler, in registration order, about the new principal.

        Handler exceptions propagate to the caller.
        """
        self.principal_id = principal_id
        logger.debug("Session mode changed: %s", "signed in" if principal_id else "guest")
        for handler in list(self._handlers):
            result = handler(principal_id)
            if inspect.isawaitable(result):
                await result

    async def sign_in(self, principal_id: str) -> None:
        await self.notify(principal_id)

    async def sign_out(self) -> None:
        await self.notify(None)
