"""Errors raised by the validation core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Machine readable kind of a validation failure."""

    INVALID_PROTOCOL = "invalid_protocol"
    COMMAND_INJECTION = "command_injection"
    MALFORMED_SSH = "malformed_ssh"
    MALFORMED_URL = "malformed_url"
    PATH_TRAVERSAL = "path_traversal"
    ABSOLUTE_PATH = "absolute_path"
    HIDDEN_PATH = "hidden_path"
    INVALID_CHARACTERS = "invalid_characters"
    SCHEMA_VIOLATION = "schema_violation"
    INVALID_SOURCE = "invalid_source"
    OUTSIDE_ROOT = "outside_root"


class SkillValidationError(ValueError):
    """An untrusted input was rejected."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        """Initialize the error.

        Args:
            kind: What kind of check failed.
            message: Human readable description of the failure.
        """
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!s}, message={self.message!r})"


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    """A single frontmatter field that failed validation."""

    field: str
    """Dotted location of the field, empty for the whole document."""

    message: str

    def __str__(self) -> str:
        return f"{self.field or '<frontmatter>'}: {self.message}"


class FrontmatterValidationError(SkillValidationError):
    """SKILL.md frontmatter does not match the schema."""

    def __init__(self, violations: list[SchemaViolation]) -> None:
        """Initialize the error with every violation found."""
        details = "; ".join(str(v) for v in violations)
        super().__init__(
            ErrorKind.SCHEMA_VIOLATION, f"Invalid SKILL.md frontmatter: {details}"
        )
        self.violations = violations
