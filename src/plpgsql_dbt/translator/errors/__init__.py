"""Error handling and diagnostics for the PL/pgSQL to dbt translator.

Provide error codes, diagnostic messages, rustc-style formatting, and the
exceptions that abort translation of a procedure.
"""

from plpgsql_dbt.translator.errors.codes import ErrorCode
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic, Severity
from plpgsql_dbt.translator.errors.exceptions import (
    MalformedNodeError,
    MalformedTreeError,
    MissingFieldError,
    PlpgsqlSyntaxError,
    TranslationError,
)
from plpgsql_dbt.translator.errors.reporter import DiagnosticReporter

__all__ = [
    "Diagnostic",
    "DiagnosticReporter",
    "ErrorCode",
    "MalformedNodeError",
    "MalformedTreeError",
    "MissingFieldError",
    "PlpgsqlSyntaxError",
    "Severity",
    "TranslationError",
]
