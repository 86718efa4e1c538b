"""
Client-side session context.

Holds the bearer token and the logged-in profile. Populated on login, cleared
on logout or when the server answers 401; ``on_logout`` is where a UI would
navigate back to its login view.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..logging_config import get_logger

logger = get_logger("bank_portal.client.session")


class ClientSession:
    def __init__(self, on_logout: Optional[Callable[[], None]] = None):
        self.token: Optional[str] = None
        self.role: Optional[str] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.on_logout = on_logout

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str, role: str, profile: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.role = role
        self.profile = profile
        logger.info("Session started role=%s", role)

    def clear(self) -> None:
        self.token = None
        self.role = None
        self.profile = None

    def logout(self) -> None:
        """
        Drop credentials and hand control back to the login view.
        """
        self.clear()
        logger.info("Session ended")
        if self.on_logout is not None:
            self.on_logout()
