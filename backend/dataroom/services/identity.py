"""Identity adapter.

MVP single-user mode: every action is attributed to DEFAULT_USER_ID unless
another user id is supplied.
"""

from dataroom.settings import DEFAULT_USER_ID


class StaticIdentity:
    """Identity that always reports the same user (None = signed out)."""

    def __init__(self, user_id: str | None = DEFAULT_USER_ID):
        self._user_id = user_id

    def current_user_id(self) -> str | None:
        return self._user_id
