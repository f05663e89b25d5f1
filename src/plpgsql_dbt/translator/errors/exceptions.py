"""Exceptions raised while translating PL/pgSQL functions.

Any of these aborts the translation of the current procedure only; the
caller decides whether the rest of the batch goes on.
"""

from plpgsql_dbt.translator.errors.codes import ErrorCode


class TranslationError(Exception):
    """Base exception for translator errors."""

    code: ErrorCode = ErrorCode.E0003

    def __init__(
        self,
        message: str,
        *,
        filename: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize translation error.

        Args:
            message: Error message.
            filename: Optional source filename.
            line: Optional source line of the offending construct.

        """
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.line = line


class PlpgsqlSyntaxError(TranslationError):
    """Raised when the PL/pgSQL source cannot be parsed."""

    code = ErrorCode.E0002

    def __init__(
        self,
        message: str,
        *,
        filename: str | None = None,
        line: int | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        """Initialize syntax error.

        Args:
            message: Error message.
            filename: Source filename.
            line: Source line where parsing failed, if known.
            parse_error: Underlying parser exception.

        """
        super().__init__(message, filename=filename, line=line)
        self.parse_error = parse_error


class MissingFieldError(TranslationError):
    """Base for a statement lacking a field its kind requires."""

    code = ErrorCode.E0001

    def __init__(
        self,
        kind: str,
        field: str,
        *,
        filename: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize missing field error.

        Args:
            kind: Kind tag of the malformed statement.
            field: Name of the missing field.
            filename: Source filename.
            line: Source line of the statement, if known.

        """
        super().__init__(
            f"missing required field '{field}' in {kind}",
            filename=filename,
            line=line,
        )
        self.kind = kind
        self.field = field


class MalformedTreeError(MissingFieldError):
    """Raised when a raw parse tree statement lacks a required field."""


class MalformedNodeError(MissingFieldError):
    """Raised when a typed statement node lacks a required field."""
