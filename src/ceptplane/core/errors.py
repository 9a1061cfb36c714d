"""CeptPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Tree
- 7xxx: Report
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Tree (3xxx)
    TREE_DUPLICATE_ID = 3001
    TREE_UNKNOWN_ID = 3002
    TREE_INVALID_ROOT = 3003

    # Report (7xxx)
    REPORT_MALFORMED = 7001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CeptPlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CeptPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class TreeError(CeptPlaneError):
    """Test tree consistency errors."""

    @classmethod
    def duplicate_id(cls, node_id: str) -> "TreeError":
        return cls(
            code=ErrorCode.TREE_DUPLICATE_ID,
            message=f"Test node id already in use: {node_id}",
            details={"node_id": node_id},
        )

    @classmethod
    def unknown_id(cls, node_id: str) -> "TreeError":
        return cls(
            code=ErrorCode.TREE_UNKNOWN_ID,
            message=f"No test node with id: {node_id}",
            details={"node_id": node_id},
        )

    @classmethod
    def invalid_root(cls, node_id: str, kind: str) -> "TreeError":
        return cls(
            code=ErrorCode.TREE_INVALID_ROOT,
            message=f"Only project nodes can be roots, got {kind}: {node_id}",
            details={"node_id": node_id, "kind": kind},
        )


class ReportError(CeptPlaneError):
    """Result report errors. Never propagated past a run."""

    @classmethod
    def malformed(cls, reason: str, path: str | None = None) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_MALFORMED,
            message=f"Could not parse report: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(CeptPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
