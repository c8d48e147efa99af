"""
Error types raised at the Supabase boundary.
"""


class BackendError(Exception):
    """A table operation was rejected by the backend."""

    def __init__(self, message: str = "", code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class AuthFailure(BackendError):
    """An auth operation (sign in, sign up, sign out) failed."""


def error_message(error: BaseException, default: str) -> str:
    """
    User-visible text for a failure.

    Falls back to ``default`` when the error carries no message.
    """
    message = getattr(error, "message", None) or str(error)
    return message or default
