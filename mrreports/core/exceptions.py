"""
Core exception hierarchy for Mediumroast Reports.

All custom exceptions inherit from MediumroastError for consistent error handling.
"""

from typing import Optional


class MediumroastError(Exception):
    """Base exception for all Mediumroast Reports errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | Context: {self.context}"
        return self.message


# Input Errors
class NotFoundError(MediumroastError):
    """A referenced company, interaction or study does not exist."""

    def __init__(self, object_type: str, name: str, operation: Optional[str] = None):
        self.object_type = object_type
        self.name = name
        self.operation = operation
        message = f"{object_type} '{name}' not found"
        context = {"operation": operation} if operation else None
        super().__init__(message, context)


class MalformedInputError(MediumroastError):
    """An input document is missing a required field or has an invalid value."""
    pass


# Remote Errors
class RemoteError(MediumroastError):
    """Error communicating with a remote store (GitHub, S3)."""

    retryable = False


class RemoteConflictError(RemoteError):
    """Version token mismatch on a conditional write."""

    retryable = True

    def __init__(self, path: str, sha: Optional[str] = None):
        self.path = path
        self.sha = sha
        super().__init__(
            f"Version conflict writing {path}",
            {"sha": sha} if sha else None,
        )


class PartialBatchFailure(MediumroastError):
    """One or more writes in a report batch failed."""

    def __init__(self, result):
        self.result = result
        failed = sorted(result.failed)
        super().__init__(
            f"{len(failed)} of {len(failed) + len(result.written)} report writes failed",
            {"failed": failed},
        )


# Output Errors
class RenderError(MediumroastError):
    """Error rendering or saving a report document."""
    pass


class ArchiveError(MediumroastError):
    """Error creating or extracting a ZIP package."""
    pass


# Configuration Errors
class ConfigurationError(MediumroastError):
    """Configuration error."""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""
    pass
