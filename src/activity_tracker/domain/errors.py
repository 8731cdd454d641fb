"""Error types shared across the tracker."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class NotProvisionedError(TrackerError):
    """Raised when an expected table or view does not exist in the store."""

    def __init__(self, table: str, code: str | None = None) -> None:
        super().__init__(f"Table '{table}' is not provisioned")
        self.table = table
        self.code = code


class StoreError(TrackerError):
    """Raised for any other persistence failure."""


class ValidationError(TrackerError):
    """Raised when user input is rejected before persistence."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class AIError(TrackerError):
    """Base class for AI adapter failures."""


class AINotConfiguredError(AIError):
    """Raised when no AI credential is configured."""


class AIResponseError(AIError):
    """Raised when the AI response has no recognizable payload."""


class AIUnavailableError(AIError):
    """Raised for network, timeout or quota failures of the AI endpoint."""
