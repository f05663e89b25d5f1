"""Statement visitor for dbt macro generation.

Translate PL/pgSQL statement nodes into Jinja directives understood by
dbt. Each statement becomes zero or more lines; nested bodies are visited
recursively with a deeper indent.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.ast.nodes import (
    ERROR_LEVEL,
    WARNING_LEVEL,
    Assign,
    Block,
    Case,
    DynamicExecute,
    ExecuteSql,
    ForInQuery,
    If,
    Raise,
    Return,
    ReturnNext,
    StatementNode,
    Unrecognized,
    kind_of,
)
from plpgsql_dbt.translator.codegen.emitter import CodeEmitter
from plpgsql_dbt.translator.errors.codes import ErrorCode, format_error_message
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic
from plpgsql_dbt.translator.errors.exceptions import MalformedNodeError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from plpgsql_dbt.translator.codegen.ids import StatementIdCounter

logger = get_logger(__name__)

BODY_INDENT = 2
"""Extra indent for branch bodies and lines nested in a guard."""

LOOP_BODY_INDENT = 4
"""Extra indent for loop bodies, nested under both the guard and the loop."""

ASSIGNMENT_PATTERN = re.compile(r"(\w+)\s*:=\s*(.+)")
IN_LIST_PATTERN = re.compile(r"IN\s*\(\s*([^)]+)\s*\)")

TRUNCATE_PATTERN = "TRUNCATE TABLE"
INSERT_PATTERN = "INSERT INTO"

LOOP_RESULT_NAME = "records"
LOOP_ROW_NAME = "rec"
INTO_RESULT_NAME = "results"


def escape_double_quotes(text: str) -> str:
    """Escape double quotes for use inside a double-quoted Jinja string."""
    return text.replace('"', '\\"')


def parse_assignment(expr: str) -> tuple[str, str] | None:
    """Split an assignment expression into target name and value.

    Args:
        expr: Expression text such as ``x := y + 1``.

    Returns:
        ``(name, value)``, or None when the text has no ``name := value`` shape.

    """
    match = ASSIGNMENT_PATTERN.search(expr)
    if match is None:
        return None
    return match.group(1), match.group(2)


def extract_in_list(expr: str) -> str | None:
    """Extract the value list of an ``IN (...)`` test.

    Args:
        expr: CASE arm expression, e.g. ``"__Case__Variable_1__" IN ('A','B')``.

    Returns:
        The parenthesized contents, or None when there is no ``IN (...)``.

    """
    match = IN_LIST_PATTERN.search(expr)
    if match is None:
        return None
    return match.group(1)


class StatementVisitor:
    """Generate Jinja lines for PL/pgSQL statements.

    The visitor holds no formatting state: every visit receives its indent
    explicitly. Its only shared state is the id counter used to name
    anonymous ``statement`` call blocks.
    """

    def __init__(
        self,
        emitter: CodeEmitter,
        counter: StatementIdCounter,
        *,
        filename: str = "<tree>",
        diagnostics: list[Diagnostic] | None = None,
    ) -> None:
        """Initialize the statement visitor.

        Args:
            emitter: Line emitter receiving the output.
            counter: Run-wide id counter for anonymous executions.
            filename: Source filename used in diagnostics.
            diagnostics: Optional list collecting translation warnings.

        """
        self._emitter = emitter
        self._counter = counter
        self._filename = filename
        self._diagnostics = diagnostics if diagnostics is not None else []
        self._stmt_dispatch: dict[type, Callable[[Any, int], None]] = {
            Raise: self._visit_raise,
            ForInQuery: self._visit_for_in_query,
            Return: self._visit_return,
            ReturnNext: self._visit_return_next,
            Block: self._visit_block,
            ExecuteSql: self._visit_execute_sql,
            DynamicExecute: self._visit_dynamic_execute,
            Assign: self._visit_assign,
            If: self._visit_if,
            Case: self._visit_case,
            Unrecognized: self._visit_unrecognized,
        }

    @property
    def handled_types(self) -> frozenset[type]:
        """Statement classes this visitor has a handler for."""
        return frozenset(self._stmt_dispatch)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Warnings collected so far."""
        return self._diagnostics

    def visit_statements(self, statements: Sequence[StatementNode], indent: int) -> None:
        """Visit statements in order at the given indent."""
        for stmt in statements:
            self.visit_statement(stmt, indent)

    def visit_statement(self, stmt: StatementNode, indent: int) -> None:
        """Visit a single statement.

        Args:
            stmt: Statement node to translate.
            indent: Indentation of the emitted lines.

        Raises:
            TypeError: If ``stmt`` is not a statement node.

        """
        handler = self._stmt_dispatch.get(type(stmt))
        if handler is None:
            msg = f"not a statement node: {type(stmt).__name__}"
            raise TypeError(msg)
        handler(stmt, indent)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require(self, node: StatementNode, field: str) -> str:
        value = getattr(node, field)
        if value is None:
            raise MalformedNodeError(
                kind_of(node),
                field,
                filename=self._filename,
                line=node.meta.line if node.meta else None,
            )
        return str(value)

    def _warn(
        self,
        code: ErrorCode,
        node: Any,  # noqa: ANN401
        *,
        help_text: str,
        **kwargs: str,
    ) -> None:
        message = format_error_message(code, **kwargs)
        line = node.meta.line if node.meta else 1
        logger.warning("%s:%d: %s", self._filename, line, message)
        self._diagnostics.append(
            Diagnostic.warning(
                message=message,
                file=self._filename,
                line=line,
                code=code,
                help_text=help_text,
            ),
        )

    def _emit_statement_call(self, prefix: str, sql: str, indent: int) -> None:
        statement_id = self._counter.next_id(prefix)
        self._emitter.emit(f"{{% call statement('{statement_id}') %}}", indent)
        self._emitter.emit(f"{sql};", indent)
        self._emitter.emit("{% endcall %}", indent)

    # -------------------------------------------------------------------------
    # Statement handlers
    # -------------------------------------------------------------------------

    def _visit_raise(self, node: Raise, indent: int) -> None:
        msg = escape_double_quotes(self._require(node, "message"))
        if node.level >= ERROR_LEVEL:
            self._emitter.emit(
                f'{{{{ exceptions.raise_compiler_error("{msg}") }}}}',
                indent,
            )
        elif node.level >= WARNING_LEVEL:
            self._emitter.emit(f'{{{{ exceptions.warn("{msg}") }}}}', indent)
        else:
            self._emitter.emit(f'{{{{ log("{msg}", info=true) }}}}', indent)

    def _visit_for_in_query(self, node: ForInQuery, indent: int) -> None:
        sql = escape_double_quotes(self._require(node, "query").strip())
        self._emitter.emit(
            f'{{% set {LOOP_RESULT_NAME} = run_query("{sql}") %}}',
            indent,
        )
        self._emitter.emit("{% if execute %}", indent)
        self._emitter.emit(
            f"{{% for {LOOP_ROW_NAME} in {LOOP_RESULT_NAME}.rows() %}}",
            indent + BODY_INDENT,
        )
        self.visit_statements(node.body, indent + LOOP_BODY_INDENT)
        self._emitter.emit("{% endfor %}", indent + BODY_INDENT)
        self._emitter.emit("{% endif %}", indent)

    def _visit_return(self, node: Return, indent: int) -> None:
        if node.expr:
            self._emitter.emit(f"{{% do return({node.expr.strip()}) %}}", indent)
        else:
            self._emitter.emit("{% do return() %}", indent)

    def _visit_return_next(self, node: ReturnNext, indent: int) -> None:  # noqa: ARG002
        self._emitter.emit("{% do return_next() %}", indent)

    def _visit_block(self, node: Block, indent: int) -> None:
        # Blocks only group statements, they add no indentation
        self.visit_statements(node.body, indent)

    def _visit_execute_sql(self, node: ExecuteSql, indent: int) -> None:
        sql = self._require(node, "query").strip()
        if node.into is None:
            self._emit_statement_call("exec", sql, indent)
            return

        self._emitter.emit(
            f'{{% set {INTO_RESULT_NAME} = run_query("{escape_double_quotes(sql)}") %}}',
            indent,
        )
        self._emitter.emit("{% if execute %}", indent)
        for idx, target in enumerate(node.into):
            self._emitter.emit(
                f"{{% set {target} = {INTO_RESULT_NAME}.columns[{idx}].values()[0] %}}",
                indent + BODY_INDENT,
            )
        self._emitter.emit("{% endif %}", indent)

    def _visit_dynamic_execute(self, node: DynamicExecute, indent: int) -> None:
        raw = self._require(node, "query").strip()
        if TRUNCATE_PATTERN in raw:
            self._emitter.emit("{{ truncate_table(to_table) }}", indent)
        elif INSERT_PATTERN in raw:
            self._emitter.emit("{{ insert_table_from_trace(to_table) }}", indent)
        else:
            self._emit_statement_call("dyn", raw, indent)

    def _visit_assign(self, node: Assign, indent: int) -> None:
        expr = self._require(node, "expr").strip()
        assignment = parse_assignment(expr)
        if assignment is None:
            self._warn(
                ErrorCode.W0001,
                node,
                expr=expr,
                help_text="the statement was dropped from the generated macro",
            )
            return
        name, value = assignment
        self._emitter.emit(f"{{% set {name} = {value} %}}", indent)

    def _visit_if(self, node: If, indent: int) -> None:
        self._emitter.emit(f"{{% if {self._require(node, 'cond')} %}}", indent)
        self.visit_statements(node.then_body, indent + BODY_INDENT)
        for arm in node.elsif_arms:
            self._emitter.emit(f"{{% elif {arm.cond} %}}", indent)
            self.visit_statements(arm.body, indent + BODY_INDENT)
        if node.else_body:
            self._emitter.emit("{% else %}", indent)
            self.visit_statements(node.else_body, indent + BODY_INDENT)
        self._emitter.emit("{% endif %}", indent)

    def _visit_case(self, node: Case, indent: int) -> None:
        subject = self._require(node, "subject").strip()
        if not node.arms:
            # No WHEN to test, the ELSE branch always runs
            if node.has_else:
                self.visit_statements(node.else_body, indent)
            return
        for idx, arm in enumerate(node.arms):
            values = extract_in_list(arm.expr)
            if values is None:
                self._warn(
                    ErrorCode.W0002,
                    arm,
                    expr=arm.expr,
                    help_text="the whole expression is used as the value list",
                )
                values = arm.expr
            keyword = "if" if idx == 0 else "elif"
            self._emitter.emit(f"{{% {keyword} {subject} in ({values}) %}}", indent)
            self.visit_statements(arm.body, indent + BODY_INDENT)
        if node.has_else:
            self._emitter.emit("{% else %}", indent)
            self.visit_statements(node.else_body, indent + BODY_INDENT)
        self._emitter.emit("{% endif %}", indent)

    def _visit_unrecognized(self, node: Unrecognized, indent: int) -> None:
        self._warn(
            ErrorCode.W0003,
            node,
            kind=node.kind,
            help_text="a comment was emitted in place of the statement",
        )
        self._emitter.emit_comment(f"unsupported stmt type: {node.kind}", indent)


def compile_statements(
    statements: Sequence[StatementNode],
    indent: int,
    *,
    counter: StatementIdCounter,
    filename: str = "<tree>",
    diagnostics: list[Diagnostic] | None = None,
) -> list[str]:
    """Compile a statement sequence into Jinja lines.

    Args:
        statements: Statements in source order.
        indent: Indentation of the top-level lines.
        counter: Run-wide id counter, advanced once per anonymous execution.
        filename: Source filename used in diagnostics.
        diagnostics: Optional list collecting translation warnings.

    Returns:
        The generated lines, already indented.

    """
    emitter = CodeEmitter()
    visitor = StatementVisitor(
        emitter,
        counter,
        filename=filename,
        diagnostics=diagnostics,
    )
    visitor.visit_statements(statements, indent)
    return emitter.get_lines()
