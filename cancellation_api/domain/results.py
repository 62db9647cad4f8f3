# SPDX-License-Identifier: Apache-2.0

"""
Result types shared by the domain modules.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')

# Failure kinds carried by WorkflowResult
INVALID = "invalid"
CONFLICT = "conflict"
NOT_FOUND = "not_found"


@dataclass
class ValidationResult:
    """Result of a business rule validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: List[str], warnings: Optional[List[str]] = None) -> "ValidationResult":
        return cls(is_valid=len(errors) == 0, errors=errors, warnings=warnings or [])

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


@dataclass
class WorkflowResult(Generic[T]):
    """Result of a domain operation that produces a new value."""
    success: bool
    value: Optional[T] = None
    error_message: Optional[str] = None
    validation_errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error_kind: Optional[str] = None

    @classmethod
    def failed(
        cls,
        message: str,
        errors: Optional[List[str]] = None,
        kind: str = INVALID
    ) -> "WorkflowResult[Any]":
        return cls(
            success=False,
            error_message=message,
            validation_errors=errors or [],
            error_kind=kind
        )
