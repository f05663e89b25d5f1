"""AST transformer for PL/pgSQL parse trees.

Transform the libpg_query PL/pgSQL JSON tree (as returned by pglast) into
typed statement nodes. Every statement in the tree is a single-key dict
whose key is the statement kind; expressions are wrapped in
``{"PLpgSQL_expr": {"query": ...}}``. Empty lists are omitted from the
tree, so missing bodies are read as empty.
"""

from collections.abc import Callable
from typing import Any

from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.ast.nodes import (
    ERROR_LEVEL,
    WARNING_LEVEL,
    Assign,
    Block,
    Case,
    CaseArm,
    DeclaredVariable,
    DynamicExecute,
    ElsIfArm,
    ExecuteSql,
    ForInQuery,
    If,
    Procedure,
    Raise,
    Return,
    ReturnNext,
    SourcePosition,
    StatementNode,
    Unrecognized,
)
from plpgsql_dbt.translator.errors.exceptions import MalformedTreeError

logger = get_logger(__name__)

RawNode = dict[str, Any]
"""A raw tree node as decoded from the parser's JSON output."""

FUNCTION_KEY = "PLpgSQL_function"
EXPR_KEY = "PLpgSQL_expr"
VAR_KEY = "PLpgSQL_var"
ROW_KEY = "PLpgSQL_row"
REC_KEY = "PLpgSQL_rec"
CASE_WHEN_KEY = "PLpgSQL_case_when"
ELSIF_KEY = "PLpgSQL_if_elsif"

# PostgreSQL elog.h severities
ELOG_WARNING = 19
ELOG_ERROR = 21


def _unwrap(raw: RawNode) -> tuple[str, RawNode]:
    """Split a single-key node into its kind tag and payload."""
    kind = next(iter(raw))
    return kind, raw[kind] or {}


def _position(payload: RawNode) -> SourcePosition | None:
    lineno = payload.get("lineno")
    if isinstance(lineno, int):
        return SourcePosition(line=lineno)
    return None


def _line(payload: RawNode) -> int | None:
    position = _position(payload)
    return position.line if position else None


def _raise_level(payload: RawNode) -> int:
    """Read the RAISE level on the ERROR_LEVEL / WARNING_LEVEL scale.

    An explicit ``errlevel`` is taken as is. Otherwise the PostgreSQL
    ``elog_level`` written by libpg_query is mapped: ERROR and above to
    ERROR_LEVEL, WARNING to WARNING_LEVEL, lower levels to 0.
    """
    errlevel = payload.get("errlevel")
    if errlevel is not None:
        return int(errlevel)
    elog_level = int(payload.get("elog_level") or 0)
    if elog_level >= ELOG_ERROR:
        return ERROR_LEVEL
    if elog_level >= ELOG_WARNING:
        return WARNING_LEVEL
    return 0


class TreeTransformer:
    """Transform raw PL/pgSQL tree nodes into typed AST nodes.

    Unknown statement kinds become ``Unrecognized`` nodes. Known kinds
    missing a field they require raise ``MalformedTreeError``.
    """

    def __init__(self, filename: str | None = None) -> None:
        """Initialize the transformer.

        Args:
            filename: Source filename, used in error reports.

        """
        self._filename = filename
        self._dispatch: dict[str, Callable[[RawNode], StatementNode]] = {
            Raise.KIND: self._raise,
            ForInQuery.KIND: self._fors,
            Return.KIND: self._return,
            ReturnNext.KIND: self._return_next,
            Block.KIND: self._block,
            ExecuteSql.KIND: self._execsql,
            DynamicExecute.KIND: self._dynexecute,
            Assign.KIND: self._assign,
            If.KIND: self._if,
            Case.KIND: self._case,
        }

    def transform_function(self, raw_function: RawNode, name: str) -> Procedure:
        """Transform a ``PLpgSQL_function`` entry into a Procedure.

        Args:
            raw_function: One element of the parser output.
            name: Name of the generated macro.

        Returns:
            The typed procedure.

        """
        kind, payload = _unwrap(raw_function)
        if kind != FUNCTION_KEY:
            raise MalformedTreeError(
                kind,
                FUNCTION_KEY,
                filename=self._filename,
                line=_line(payload),
            )

        variables = [
            self._declared_variable(datum[VAR_KEY])
            for datum in payload.get("datums", [])
            if VAR_KEY in datum
        ]

        action = self._require(payload, "action", FUNCTION_KEY)
        block_kind, block = _unwrap(action)
        if block_kind != Block.KIND:
            raise MalformedTreeError(FUNCTION_KEY, Block.KIND, filename=self._filename)

        procedure = Procedure(
            name=name,
            variables=variables,
            body=self.transform_statements(block.get("body", [])),
            meta=_position(block),
        )
        logger.debug(
            "Transformed %s: %d variables, %d top-level statements",
            name,
            len(procedure.variables),
            len(procedure.body),
        )
        return procedure

    def transform_statements(self, raw_statements: list[RawNode]) -> list[StatementNode]:
        """Transform an ordered list of raw statements."""
        return [self.transform_statement(raw) for raw in raw_statements]

    def transform_statement(self, raw: RawNode) -> StatementNode:
        """Transform one raw statement, keeping unknown kinds as Unrecognized."""
        kind, payload = _unwrap(raw)
        handler = self._dispatch.get(kind)
        if handler is None:
            logger.debug("No translation for statement kind %s", kind)
            return Unrecognized(kind=kind, meta=_position(payload))
        return handler(payload)

    # -------------------------------------------------------------------------
    # Field helpers
    # -------------------------------------------------------------------------

    def _require(self, payload: RawNode, field: str, kind: str) -> Any:  # noqa: ANN401
        value = payload.get(field)
        if value is None:
            raise MalformedTreeError(
                kind,
                field,
                filename=self._filename,
                line=_line(payload),
            )
        return value

    def _query(self, payload: RawNode, field: str, kind: str) -> str:
        """Read the query text of a required expression field."""
        expr = self._require(payload, field, kind)
        query = expr.get(EXPR_KEY, {}).get("query") if isinstance(expr, dict) else None
        if query is None:
            raise MalformedTreeError(
                kind,
                f"{field}.query",
                filename=self._filename,
                line=_line(payload),
            )
        return str(query)

    def _optional_query(self, payload: RawNode, field: str) -> str | None:
        expr = payload.get(field)
        if not isinstance(expr, dict):
            return None
        query = expr.get(EXPR_KEY, {}).get("query")
        return str(query) if query else None

    def _declared_variable(self, var: RawNode) -> DeclaredVariable:
        name = str(self._require(var, "refname", VAR_KEY)).strip()
        default = self._optional_query(var, "default_val")
        return DeclaredVariable(
            name=name,
            default=default.strip() if default is not None else None,
        )

    def _targets(self, payload: RawNode) -> list[str]:
        target = self._require(payload, "target", ExecuteSql.KIND)
        target_kind, target_payload = _unwrap(target)
        if target_kind == ROW_KEY:
            return [
                str(self._require(f, "name", ROW_KEY))
                for f in target_payload.get("fields", [])
            ]
        if target_kind in (VAR_KEY, REC_KEY):
            return [str(self._require(target_payload, "refname", target_kind)).strip()]
        raise MalformedTreeError(
            ExecuteSql.KIND,
            f"target.{ROW_KEY}",
            filename=self._filename,
            line=_line(payload),
        )

    # -------------------------------------------------------------------------
    # Statement handlers
    # -------------------------------------------------------------------------

    def _raise(self, payload: RawNode) -> Raise:
        return Raise(
            message=str(payload.get("message") or ""),
            level=_raise_level(payload),
            meta=_position(payload),
        )

    def _fors(self, payload: RawNode) -> ForInQuery:
        return ForInQuery(
            query=self._query(payload, "query", ForInQuery.KIND).strip(),
            body=self.transform_statements(payload.get("body", [])),
            meta=_position(payload),
        )

    def _return(self, payload: RawNode) -> Return:
        expr = self._optional_query(payload, "expr")
        return Return(
            expr=expr.strip() if expr is not None else None,
            meta=_position(payload),
        )

    def _return_next(self, payload: RawNode) -> ReturnNext:
        return ReturnNext(meta=_position(payload))

    def _block(self, payload: RawNode) -> Block:
        return Block(
            body=self.transform_statements(payload.get("body", [])),
            meta=_position(payload),
        )

    def _execsql(self, payload: RawNode) -> ExecuteSql:
        query = self._query(payload, "sqlstmt", ExecuteSql.KIND).strip()
        into = self._targets(payload) if payload.get("into") else None
        return ExecuteSql(query=query, into=into, meta=_position(payload))

    def _dynexecute(self, payload: RawNode) -> DynamicExecute:
        return DynamicExecute(
            query=self._query(payload, "query", DynamicExecute.KIND).strip(),
            meta=_position(payload),
        )

    def _assign(self, payload: RawNode) -> Assign:
        return Assign(
            expr=self._query(payload, "expr", Assign.KIND).strip(),
            meta=_position(payload),
        )

    def _if(self, payload: RawNode) -> If:
        elsif_arms = []
        for raw_arm in payload.get("elsif_list", []):
            arm = raw_arm[ELSIF_KEY]
            elsif_arms.append(
                ElsIfArm(
                    cond=self._query(arm, "cond", ELSIF_KEY),
                    body=self.transform_statements(arm.get("stmts", [])),
                    meta=_position(arm),
                ),
            )

        raw_else = payload.get("else_body")
        return If(
            cond=self._query(payload, "cond", If.KIND),
            then_body=self.transform_statements(payload.get("then_body", [])),
            else_body=self.transform_statements(raw_else) if raw_else is not None else None,
            elsif_arms=elsif_arms,
            meta=_position(payload),
        )

    def _case(self, payload: RawNode) -> Case:
        arms = []
        for raw_arm in payload.get("case_when_list", []):
            arm = raw_arm[CASE_WHEN_KEY]
            arms.append(
                CaseArm(
                    expr=self._query(arm, "expr", CASE_WHEN_KEY),
                    body=self.transform_statements(arm.get("stmts", [])),
                    meta=_position(arm),
                ),
            )

        return Case(
            subject=self._query(payload, "t_expr", Case.KIND).strip(),
            arms=arms,
            has_else=bool(payload.get("have_else")),
            else_body=self.transform_statements(payload.get("else_stmts", [])),
            meta=_position(payload),
        )


def transform_function(
    raw_function: RawNode,
    name: str,
    *,
    filename: str | None = None,
) -> Procedure:
    """Transform one ``PLpgSQL_function`` tree entry into a Procedure.

    Args:
        raw_function: One element of the parser output.
        name: Name of the generated macro.
        filename: Source filename, used in error reports.

    Returns:
        The typed procedure.

    Raises:
        MalformedTreeError: If a statement lacks a field its kind requires.

    """
    return TreeTransformer(filename).transform_function(raw_function, name)
