"""PL/pgSQL parser adapter.

Wrap pglast's binding of libpg_query to turn PL/pgSQL source into the
raw function tree consumed by the transformer.
"""

import json
from typing import Any

from pglast import parse_plpgsql
from pglast.parser import ParseError

from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.errors.exceptions import PlpgsqlSyntaxError

logger = get_logger(__name__)

RawTree = list[dict[str, Any]]
"""Parser output: one ``{"PLpgSQL_function": ...}`` entry per function."""


def _error_line(source: str, parse_error: ParseError) -> int | None:
    """Convert the character offset carried by a ParseError into a line."""
    location = parse_error.args[1] if len(parse_error.args) > 1 else None
    if not isinstance(location, int) or location <= 0:
        return None
    return source.count("\n", 0, location - 1) + 1


def parse_plpgsql_source(source: str, filename: str | None = None) -> RawTree:
    """Parse PL/pgSQL function definitions.

    Args:
        source: SQL text holding one or more CREATE FUNCTION statements.
        filename: Source filename for error messages.

    Returns:
        The raw function trees in source order.

    Raises:
        PlpgsqlSyntaxError: If the source cannot be parsed.

    """
    logger.debug("Parsing PL/pgSQL source %s", filename or "<string>")
    try:
        tree = parse_plpgsql(source)
    except ParseError as e:
        message = str(e.args[0]) if e.args else str(e)
        logger.debug("Parse error in %s: %s", filename, message)
        raise PlpgsqlSyntaxError(
            message,
            filename=filename,
            line=_error_line(source, e),
            parse_error=e,
        ) from e
    return list(tree)


def dump_tree(tree: RawTree) -> str:
    """Render the raw tree verbatim for debugging.

    Args:
        tree: Parser output.

    Returns:
        Indented JSON text of the complete tree.

    """
    return json.dumps(tree, indent=2, ensure_ascii=False)
