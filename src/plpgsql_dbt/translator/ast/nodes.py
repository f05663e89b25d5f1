"""AST node dataclasses for PL/pgSQL functions.

Define typed statement nodes with source position metadata for every
PL/pgSQL construct the macro generator understands. Statements outside
that set are kept as ``Unrecognized`` nodes carrying their kind tag.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Union

from plpgsql_dbt.log import get_logger

logger = get_logger(__name__)


# =============================================================================
# Base Types
# =============================================================================


@dataclass
class SourcePosition:
    """Source position information for error reporting."""

    line: int
    column: int = 0


# =============================================================================
# Statement Nodes
# =============================================================================


ERROR_LEVEL = 16
"""RAISE levels from here up fail the dbt run."""

WARNING_LEVEL = 10
"""RAISE levels from here up to ERROR_LEVEL emit a dbt warning."""


@dataclass
class Raise:
    """RAISE statement (e.g., RAISE EXCEPTION 'boom')."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_raise"

    message: str
    level: int = 0
    meta: SourcePosition | None = None


@dataclass
class ForInQuery:
    """FOR rec IN SELECT ... LOOP ... END LOOP."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_fors"

    query: str
    body: list["StatementNode"] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class Return:
    """RETURN statement with an optional expression."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_return"

    expr: str | None = None
    meta: SourcePosition | None = None


@dataclass
class ReturnNext:
    """RETURN NEXT statement."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_return_next"

    meta: SourcePosition | None = None


@dataclass
class Block:
    """BEGIN ... END block, used only for grouping."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_block"

    body: list["StatementNode"] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class ExecuteSql:
    """Static SQL statement, optionally with an INTO target list."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_execsql"

    query: str
    into: list[str] | None = None  # target variables, bound by column position
    meta: SourcePosition | None = None


@dataclass
class DynamicExecute:
    """EXECUTE of a dynamically built query string."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_dynexecute"

    query: str
    meta: SourcePosition | None = None


@dataclass
class Assign:
    """Assignment statement (e.g., x := y + 1)."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_assign"

    expr: str
    meta: SourcePosition | None = None


@dataclass
class ElsIfArm:
    """ELSIF branch of an IF statement."""

    cond: str
    body: list["StatementNode"] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class If:
    """IF ... THEN ... [ELSIF ...] [ELSE ...] END IF."""

    KIND: ClassVar[str] = "PLpgSQL_stmt_if"

    cond: str
    then_body: list["StatementNode"] = field(default_factory=list)
    else_body: list["StatementNode"] | None = None
    elsif_arms: list[ElsIfArm] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class CaseArm:
    """WHEN arm of a CASE statement."""

    expr: str
    body: list["StatementNode"] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class Case:
    """CASE subject WHEN ... THEN ... [ELSE ...] END CASE.

    ``has_else`` mirrors the parser's own flag and is kept separate from
    ``else_body``; an ELSE branch is emitted whenever the flag is set.
    """

    KIND: ClassVar[str] = "PLpgSQL_stmt_case"

    subject: str
    arms: list[CaseArm] = field(default_factory=list)
    has_else: bool = False
    else_body: list["StatementNode"] = field(default_factory=list)
    meta: SourcePosition | None = None


@dataclass
class Unrecognized:
    """Any statement kind without a dedicated translation."""

    kind: str
    meta: SourcePosition | None = None


StatementNode = Union[
    Raise,
    ForInQuery,
    Return,
    ReturnNext,
    Block,
    ExecuteSql,
    DynamicExecute,
    Assign,
    If,
    Case,
    Unrecognized,
]
"""Closed union of every statement node kind."""


# =============================================================================
# Procedure-level Nodes
# =============================================================================


@dataclass
class DeclaredVariable:
    """Variable from the DECLARE section with an optional default."""

    name: str
    default: str | None = None


@dataclass
class Procedure:
    """A whole PL/pgSQL function ready for macro generation."""

    name: str
    variables: list[DeclaredVariable] = field(default_factory=list)
    body: list[StatementNode] = field(default_factory=list)
    meta: SourcePosition | None = None


def kind_of(node: StatementNode) -> str:
    """Get the PL/pgSQL kind tag of a statement node.

    Args:
        node: Any statement node.

    Returns:
        The source kind tag, e.g. ``PLpgSQL_stmt_if``.

    """
    if isinstance(node, Unrecognized):
        return node.kind
    return node.KIND
