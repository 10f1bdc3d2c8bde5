from typing import Callable, Optional


class Session:
    """Holds the bearer token for one signed-in user.

    Passed to ApiClient at construction. ``on_invalidated`` runs whenever the
    token is dropped (logout or a 401). It may run on a worker thread, so UI
    code should only record the event there and react to it later through
    ``pop_expired``.
    """

    def __init__(self, token: Optional[str] = None, on_invalidated: Optional[Callable[[], None]] = None):
        self._token = token
        self._on_invalidated = on_invalidated
        self._expired = False

    @property
    def token(self) -> Optional[str]:
        return self._token

    def is_authenticated(self) -> bool:
        return bool(self._token)

    def store(self, token: str) -> None:
        self._token = token
        self._expired = False

    def invalidate(self, expired: bool = True) -> None:
        """Drop the token; ``expired`` is False for a deliberate logout."""
        self._token = None
        self._expired = expired
        if self._on_invalidated is not None:
            self._on_invalidated()

    def pop_expired(self) -> bool:
        expired, self._expired = self._expired, False
        return expired

    def auth_headers(self) -> dict:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}
