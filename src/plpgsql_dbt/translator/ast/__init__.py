"""Typed AST for PL/pgSQL functions."""

from plpgsql_dbt.translator.ast.nodes import (
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
    kind_of,
)

__all__ = [
    "Assign",
    "Block",
    "Case",
    "CaseArm",
    "DeclaredVariable",
    "DynamicExecute",
    "ElsIfArm",
    "ExecuteSql",
    "ForInQuery",
    "If",
    "Procedure",
    "Raise",
    "Return",
    "ReturnNext",
    "SourcePosition",
    "StatementNode",
    "Unrecognized",
    "kind_of",
]
