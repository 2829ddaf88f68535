"""Identity provider for a till operated by one configured user."""

from __future__ import annotations

from pos.application.ports import IdentityProvider


class StaticIdentityProvider(IdentityProvider):

    def __init__(self, user_id: int) -> None:
        self._user_id = user_id

    def current_user_id(self) -> int:
        return self._user_id
