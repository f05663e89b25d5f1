"""Error code definitions for the PL/pgSQL to dbt translator.

Provide standardized error codes for categorizing translation errors
and the warnings raised for statements that could not be translated
faithfully.
"""

from enum import Enum

from plpgsql_dbt.log import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Translator diagnostic codes.

    - E00xx: Errors that abort translation of a procedure
    - W00xx: Warnings about statements translated with a loss
    """

    E0001 = "E0001"
    """Statement node is missing a required field."""

    E0002 = "E0002"
    """PL/pgSQL source could not be parsed."""

    E0003 = "E0003"
    """Source does not define any function."""

    W0001 = "W0001"
    """Assignment expression is not of the form `name := value`."""

    W0002 = "W0002"
    """CASE arm has no `IN (...)` value list."""

    W0003 = "W0003"
    """Statement kind has no translation."""

    W0004 = "W0004"
    """Source defines more than one function."""


# Message templates for each code
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E0001: "missing required field '{field}' in {kind}",
    ErrorCode.E0002: "invalid PL/pgSQL: {message}",
    ErrorCode.E0003: "no function found in {name}",
    ErrorCode.W0001: "assignment '{expr}' is not of the form 'name := value'",
    ErrorCode.W0002: "CASE arm '{expr}' has no IN (...) value list",
    ErrorCode.W0003: "unsupported statement type '{kind}'",
    ErrorCode.W0004: "{count} functions defined, only the first is translated",
}


def format_error_message(code: ErrorCode, **kwargs: str) -> str:
    """Format an error message with the given parameters.

    Args:
        code: The error code.
        **kwargs: Parameters to substitute in the message template.

    Returns:
        Formatted error message string.

    """
    template = ERROR_MESSAGES.get(code, "unknown error")
    try:
        return template.format(**kwargs)
    except KeyError as e:
        logger.warning("Missing parameter for error message: %s", e)
        return template
