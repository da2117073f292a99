from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from todolist.logging_utils import logger

DELETE_FAILED_NOTICE = "Account deletion failed"


class AuthProvider(Protocol):
    """The external authentication service the signed in user belongs to"""

    def sign_out(self) -> None: ...

    def delete_current_user(self, on_complete: Callable[[bool], None]) -> None:
        """Start deleting the current user. `on_complete` receives True on success."""
        ...


class AccountActions:
    """
    Sign out and account deletion.

    Both end by calling `on_signed_out`, which is expected to leave the to-do
    screen. A failed deletion only produces a notice: there is no retry and the
    local list is left as it is.
    """

    def __init__(
        self,
        provider: AuthProvider,
        *,
        on_signed_out: Callable[[], None],
        notify: Callable[[str], None],
    ) -> None:
        self.provider = provider
        self.on_signed_out = on_signed_out
        self.notify = notify

    def sign_out(self) -> None:
        self.provider.sign_out()
        logger.info("Signed out.")
        self.on_signed_out()

    def delete_account(self) -> None:
        try:
            self.provider.delete_current_user(self._on_delete_complete)
        except Exception as e:
            logger.error(f"Account deletion could not be started: {e}")
            self._on_delete_complete(False)

    def _on_delete_complete(self, success: bool) -> None:
        if success:
            logger.info("Account deleted.")
            self.on_signed_out()
        else:
            logger.error("Account deletion failed.")
            self.notify(DELETE_FAILED_NOTICE)
