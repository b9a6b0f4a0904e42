class SavingsCoachError(Exception):
    """Base error for the chat pipeline. Rendered as ``{"error": ...}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(SavingsCoachError):
    status_code = 401


class ContextUnavailableError(SavingsCoachError):
    pass


class UpstreamCompletionError(SavingsCoachError):
    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class ExtractionParseError(SavingsCoachError):
    """Raised inside the extractor only; never reaches the caller."""


class PersistenceWriteError(SavingsCoachError):
    def __init__(self, step: str, cause: Exception):
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause
