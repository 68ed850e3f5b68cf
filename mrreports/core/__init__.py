"""
Core domain layer for Mediumroast Reports.

This module provides:
- Exception hierarchy for consistent error handling
- Storage protocols for report persistence
- Shared type definitions

Usage:
    from mrreports.core import MediumroastError, NotFoundError, ReportStore
    from mrreports.core.base_types import Rank
"""

from .exceptions import (
    ArchiveError,
    ConfigurationError,
    MalformedInputError,
    MediumroastError,
    MissingConfigError,
    NotFoundError,
    PartialBatchFailure,
    RemoteConflictError,
    RemoteError,
    RenderError,
)
from .repository import (
    ObjectSource,
    RemoteFile,
    ReportFile,
    ReportStore,
)

__all__ = [
    # Exceptions
    "ArchiveError",
    "ConfigurationError",
    "MalformedInputError",
    "MediumroastError",
    "MissingConfigError",
    "NotFoundError",
    "PartialBatchFailure",
    "RemoteConflictError",
    "RemoteError",
    "RenderError",
    # Storage
    "ObjectSource",
    "RemoteFile",
    "ReportFile",
    "ReportStore",
]
