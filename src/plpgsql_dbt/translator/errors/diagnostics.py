"""Diagnostics collected while translating PL/pgSQL files."""

from dataclasses import dataclass
from enum import Enum

from plpgsql_dbt.translator.errors.codes import ErrorCode


class Severity(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    """The file was not translated."""

    WARNING = "warning"
    """A statement was translated with a loss, the macro was still written."""


@dataclass
class Diagnostic:
    """A located message about one source file.

    Lines are 1-indexed, columns 0-indexed. Tree positions carry no column,
    so diagnostics built from them point at column 0.
    """

    severity: Severity
    message: str
    file: str
    line: int
    column: int = 0
    code: ErrorCode | None = None
    help_text: str | None = None

    @classmethod
    def error(  # noqa: PLR0913
        cls,
        message: str,
        file: str,
        line: int,
        column: int = 0,
        *,
        code: ErrorCode | None = None,
        help_text: str | None = None,
    ) -> "Diagnostic":
        """Create an error diagnostic."""
        return cls(Severity.ERROR, message, file, line, column, code, help_text)

    @classmethod
    def warning(  # noqa: PLR0913
        cls,
        message: str,
        file: str,
        line: int,
        column: int = 0,
        *,
        code: ErrorCode | None = None,
        help_text: str | None = None,
    ) -> "Diagnostic":
        """Create a warning diagnostic."""
        return cls(Severity.WARNING, message, file, line, column, code, help_text)

    @property
    def location(self) -> dict[str, object]:
        """Source location as a JSON-ready mapping."""
        return {"file": self.file, "line": self.line, "column": self.column}

    def to_dict(self) -> dict[str, object]:
        """Convert to a dictionary for JSON output.

        ``code`` and ``help`` keys appear only when set.
        """
        optional = {
            "code": self.code.value if self.code is not None else None,
            "help": self.help_text,
        }
        return {
            "severity": self.severity.value,
            "message": self.message,
            "location": self.location,
            **{key: value for key, value in optional.items() if value is not None},
        }
