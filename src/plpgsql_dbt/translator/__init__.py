"""PL/pgSQL to dbt macro translator package.

Provide parsing, AST transformation, and Jinja code generation for
PL/pgSQL functions.
"""

from plpgsql_dbt.translator.ast import Procedure, StatementNode
from plpgsql_dbt.translator.cli import BatchTranslator, run_translate
from plpgsql_dbt.translator.codegen import (
    CodeEmitter,
    MacroGenerator,
    StatementIdCounter,
    assemble,
    compile_statements,
)
from plpgsql_dbt.translator.compiler import (
    TranslationResult,
    translate_source,
    translate_tree,
)
from plpgsql_dbt.translator.errors import (
    Diagnostic,
    DiagnosticReporter,
    ErrorCode,
    MalformedNodeError,
    MalformedTreeError,
    PlpgsqlSyntaxError,
    Severity,
    TranslationError,
)
from plpgsql_dbt.translator.parser import dump_tree, parse_plpgsql_source

__all__ = [
    "BatchTranslator",
    "CodeEmitter",
    "Diagnostic",
    "DiagnosticReporter",
    "ErrorCode",
    "MacroGenerator",
    "MalformedNodeError",
    "MalformedTreeError",
    "PlpgsqlSyntaxError",
    "Procedure",
    "Severity",
    "StatementIdCounter",
    "StatementNode",
    "TranslationError",
    "TranslationResult",
    "assemble",
    "compile_statements",
    "dump_tree",
    "parse_plpgsql_source",
    "run_translate",
    "translate_source",
    "translate_tree",
]
