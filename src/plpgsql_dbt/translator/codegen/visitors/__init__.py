"""Visitor modules for dbt macro generation."""

from plpgsql_dbt.translator.codegen.visitors.statements import (
    StatementVisitor,
    compile_statements,
)

__all__ = ["StatementVisitor", "compile_statements"]
