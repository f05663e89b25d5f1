"""Code generation module for the PL/pgSQL to dbt translator.

Provide dbt macro generation from typed PL/pgSQL procedures.
"""

from plpgsql_dbt.translator.codegen.emitter import CodeEmitter
from plpgsql_dbt.translator.codegen.generator import MacroGenerator, assemble
from plpgsql_dbt.translator.codegen.ids import StatementIdCounter
from plpgsql_dbt.translator.codegen.visitors.statements import compile_statements

__all__ = [
    "CodeEmitter",
    "MacroGenerator",
    "StatementIdCounter",
    "assemble",
    "compile_statements",
]
