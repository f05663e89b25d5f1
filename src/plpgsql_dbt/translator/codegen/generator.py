"""Macro generator for PL/pgSQL procedures.

Assemble a complete dbt macro from a typed procedure: the macro header,
one initialization per declared variable, the translated body, and the
closing directive.
"""

from collections.abc import Sequence

from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.ast.nodes import DeclaredVariable, Procedure, StatementNode
from plpgsql_dbt.translator.codegen.emitter import CodeEmitter
from plpgsql_dbt.translator.codegen.ids import StatementIdCounter
from plpgsql_dbt.translator.codegen.visitors.statements import compile_statements
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic

logger = get_logger(__name__)

BODY_INDENT = 2
"""Indentation of the macro body."""

EMPTY_DEFAULT = "''"
"""Initial value of declared variables without a default."""


def assemble(  # noqa: PLR0913
    name: str,
    variables: Sequence[DeclaredVariable],
    body: Sequence[StatementNode],
    *,
    counter: StatementIdCounter,
    filename: str = "<tree>",
    diagnostics: list[Diagnostic] | None = None,
) -> str:
    """Assemble the text of a dbt macro.

    Args:
        name: Macro name.
        variables: Declared variables in declaration order.
        body: Root statements of the procedure.
        counter: Run-wide id counter for anonymous executions.
        filename: Source filename used in diagnostics.
        diagnostics: Optional list collecting translation warnings.

    Returns:
        The macro text, lines joined by newlines.

    """
    emitter = CodeEmitter()
    emitter.emit(f"{{% macro {name}() %}}")

    for variable in variables:
        default = variable.default if variable.default is not None else EMPTY_DEFAULT
        emitter.emit(f"{{% set {variable.name} = {default} %}}", BODY_INDENT)
    emitter.emit_blank()

    emitter.extend(
        compile_statements(
            body,
            BODY_INDENT,
            counter=counter,
            filename=filename,
            diagnostics=diagnostics,
        ),
    )
    emitter.emit("{% endmacro %}")

    logger.debug("Assembled macro %s: %d lines", name, emitter.get_line_count())
    return emitter.get_code()


class MacroGenerator:
    """Generate dbt macros from typed procedures.

    A generator owns the id counter of one translation run, so every
    macro it produces draws from the same id sequence.
    """

    def __init__(self, counter: StatementIdCounter | None = None) -> None:
        """Initialize the macro generator.

        Args:
            counter: Id counter to share; a fresh one is created when omitted.

        """
        self._counter = counter if counter is not None else StatementIdCounter()

    @property
    def counter(self) -> StatementIdCounter:
        """Id counter used by this generator."""
        return self._counter

    def generate(
        self,
        procedure: Procedure,
        filename: str = "<tree>",
    ) -> tuple[str, list[Diagnostic]]:
        """Generate the macro for a procedure.

        Args:
            procedure: Typed procedure.
            filename: Source filename used in diagnostics.

        Returns:
            Tuple of (macro text, translation warnings).

        """
        logger.debug("Generating macro %s from %s", procedure.name, filename)
        diagnostics: list[Diagnostic] = []
        code = assemble(
            procedure.name,
            procedure.variables,
            procedure.body,
            counter=self._counter,
            filename=filename,
            diagnostics=diagnostics,
        )
        return code, diagnostics
