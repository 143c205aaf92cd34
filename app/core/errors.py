"""Errors raised by clients of external model services."""


class UpstreamError(Exception):
    """An external model service (embeddings, completions) failed.

    Carries the upstream message and, when the failure came from an HTTP
    response, its status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message
