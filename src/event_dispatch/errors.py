"""
Error taxonomy for event dispatch.

- HTTPError: the gateway answered with a non-success status
- RetryError: the invocation failed and should be redelivered later
- ConfigurationError: the destination is misconfigured; retrying cannot help
- InvalidEventError: the input is not an event object; retrying cannot help
"""


class DispatchError(Exception):
    """Base class for all dispatch errors."""


class HTTPError(DispatchError):
    """Non-success HTTP response from the storage gateway."""

    def __init__(self, message: str, status: int, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        text = super().__str__()
        if self.body:
            return f"{text}: {self.body}"
        return text


class RetryError(DispatchError):
    """
    Retryable failure of a whole invocation.

    Wraps the original cause (transport error or HTTPError). The caller is
    expected to re-run the invocation with the same event.
    """

    retryable = True

    def __init__(self, cause: BaseException | str):
        message = cause if isinstance(cause, str) else f"{type(cause).__name__}: {cause}"
        super().__init__(message)
        self.cause = cause if isinstance(cause, BaseException) else None


class ConfigurationError(DispatchError):
    """Fatal configuration problem, surfaced before any delivery."""

    retryable = False


class UnknownLayoutError(ConfigurationError, ValueError):
    """The configured data layout does not exist."""

    def __init__(self, kind: object, available: list[str] | None = None):
        self.kind = kind
        self.available = available or []
        message = f"Unknown data layout '{kind}'"
        if self.available:
            message += f". Valid layouts are: {self.available}"
        super().__init__(message)


class InvalidEventError(DispatchError, ValueError):
    """The incoming event is not a JSON object and cannot be laid out."""

    retryable = False
