from typing import Optional


class FintrackError(Exception):
    pass


class ApiError(FintrackError):
    """Transport failure or a non-2xx answer from the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class AuthenticationError(ApiError):
    pass


def user_message(exc: BaseException, fallback: str = "Failed to load dashboard data") -> str:
    """One line for the error banner: backend detail first, then the message."""
    detail = getattr(exc, "detail", None)
    if detail:
        return str(detail)
    return str(exc) or fallback
