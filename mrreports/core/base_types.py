"""
Shared type aliases and type definitions for Mediumroast Reports.

Centralizes commonly used types for consistency across modules.
"""

from typing import Literal, TypeAlias, Union

# Box-plot rank buckets
Rank: TypeAlias = Literal["High", "Medium", "Low"]

# Report payloads are markdown text or rendered document bytes
ReportContent: TypeAlias = Union[str, bytes]

# Git blob SHA used as the version token for conditional writes
VersionToken: TypeAlias = str
