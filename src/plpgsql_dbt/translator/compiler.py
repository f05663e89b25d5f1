"""Main translation pipeline for PL/pgSQL functions.

Provide the primary functions turning PL/pgSQL source, or its already
parsed tree, into dbt macro text.
"""

from dataclasses import dataclass, field

from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.ast.nodes import Procedure
from plpgsql_dbt.translator.ast.transformer import transform_function
from plpgsql_dbt.translator.codegen.generator import MacroGenerator
from plpgsql_dbt.translator.codegen.ids import StatementIdCounter
from plpgsql_dbt.translator.errors.codes import ErrorCode, format_error_message
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic
from plpgsql_dbt.translator.errors.exceptions import TranslationError
from plpgsql_dbt.translator.parser import RawTree, dump_tree, parse_plpgsql_source

logger = get_logger(__name__)


@dataclass
class TranslationResult:
    """Outcome of translating one source file."""

    name: str
    """Macro name."""

    macro: str
    """Generated macro text."""

    procedure: Procedure
    """Typed procedure the macro was generated from."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    """Warnings raised while translating."""

    tree_dump: str | None = None
    """Verbatim parse tree dump, when requested."""


def translate_tree(
    tree: RawTree,
    name: str,
    *,
    counter: StatementIdCounter,
    filename: str | None = None,
) -> TranslationResult:
    """Translate an already parsed PL/pgSQL tree.

    Only the first function of the tree is translated; the macro is named
    after the source file, so further functions would collide.

    Args:
        tree: Parser output.
        name: Macro name.
        counter: Run-wide id counter for anonymous executions.
        filename: Source filename for diagnostics.

    Returns:
        The translation result.

    Raises:
        TranslationError: If the tree holds no function.
        MalformedTreeError: If a statement lacks a field its kind requires.
        MalformedNodeError: If a typed node lacks a required field.

    """
    source_name = filename or name
    if not tree:
        raise TranslationError(
            format_error_message(ErrorCode.E0003, name=source_name),
            filename=filename,
        )

    diagnostics: list[Diagnostic] = []
    if len(tree) > 1:
        message = format_error_message(ErrorCode.W0004, count=str(len(tree)))
        logger.warning("%s: %s", source_name, message)
        diagnostics.append(
            Diagnostic.warning(
                message=message,
                file=source_name,
                line=1,
                code=ErrorCode.W0004,
                help_text="split the functions into one file each",
            ),
        )

    procedure = transform_function(tree[0], name, filename=source_name)
    macro, warnings = MacroGenerator(counter).generate(procedure, source_name)
    diagnostics.extend(warnings)

    logger.debug(
        "Translated %s: %d lines, %d diagnostics",
        source_name,
        macro.count("\n") + 1,
        len(diagnostics),
    )
    return TranslationResult(
        name=name,
        macro=macro,
        procedure=procedure,
        diagnostics=diagnostics,
    )


def translate_source(
    source: str,
    name: str,
    *,
    counter: StatementIdCounter,
    filename: str | None = None,
    include_tree: bool = False,
) -> TranslationResult:
    """Parse and translate PL/pgSQL source.

    Args:
        source: SQL text with the function definition.
        name: Macro name.
        counter: Run-wide id counter for anonymous executions.
        filename: Source filename for diagnostics.
        include_tree: Attach the verbatim tree dump to the result.

    Returns:
        The translation result.

    Raises:
        PlpgsqlSyntaxError: If the source cannot be parsed.
        TranslationError: If translation fails.

    """
    tree = parse_plpgsql_source(source, filename)
    result = translate_tree(tree, name, counter=counter, filename=filename)
    if include_tree:
        result.tree_dump = dump_tree(tree)
    return result


def error_to_diagnostic(error: TranslationError, filename: str) -> Diagnostic:
    """Convert a translation error into an error diagnostic.

    Args:
        error: The exception that aborted translation.
        filename: Source filename used when the error has none.

    Returns:
        Diagnostic instance.

    """
    return Diagnostic.error(
        message=error.message,
        file=error.filename or filename,
        line=error.line or 1,
        code=error.code,
    )
