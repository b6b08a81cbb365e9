"""Exceptions raised at the backend-as-a-service boundary."""


class BackendError(Exception):
    """Raised when the backend collaborator rejects or fails a request."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)
