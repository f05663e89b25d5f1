"""Diagnostic output for translation runs.

Render diagnostics rustc-style, pointing at the statement line of the
PL/pgSQL source, or as a JSON document for tooling.
"""

import json
from collections import Counter

from plpgsql_dbt.translator.errors.diagnostics import Diagnostic, Severity

GUTTER_WIDTH = 5
"""Width of the line number gutter, separator excluded."""

JSON_FORMAT_VERSION = "1.0"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _statement_carets(source_line: str) -> str:
    """Underline the first token of a source line.

    Tree positions carry a line but no column, so the first non-blank
    token stands for the statement.
    """
    stripped = source_line.lstrip()
    indent = source_line[: len(source_line) - len(stripped)]
    token = stripped.split(maxsplit=1)[0] if stripped else ""
    return indent + "^" * max(1, len(token))


class DiagnosticReporter:
    """Render diagnostics with the source lines they refer to."""

    def __init__(self, source_cache: dict[str, str] | None = None) -> None:
        """Initialize the reporter.

        Args:
            source_cache: Source text by file path.

        """
        self._sources: dict[str, list[str]] = {
            path: source.split("\n") for path, source in (source_cache or {}).items()
        }

    def add_source(self, file_path: str, source: str) -> None:
        """Remember the source of a file for later context lines."""
        self._sources[file_path] = source.split("\n")

    def format_diagnostic(self, diagnostic: Diagnostic) -> str:
        """Render one diagnostic.

        Example::

            warning[W0001]: assignment 'x == y' is not of the form 'name := value'
              --> load_orders.sql:12:1
                 |
              12 |     x == y;
                 |     ^
                 |
                 = help: the statement was dropped from the generated macro

        """
        label = diagnostic.severity.value
        if diagnostic.code is not None:
            label += f"[{diagnostic.code.value}]"

        blank = " " * GUTTER_WIDTH + "|"
        lines = [
            f"{label}: {diagnostic.message}",
            f"  --> {diagnostic.file}:{diagnostic.line}:{diagnostic.column + 1}",
            blank,
        ]

        source_line = self._source_line(diagnostic)
        if source_line is not None:
            lines.append(f"{diagnostic.line:>{GUTTER_WIDTH - 1}} | {source_line}")
            lines.append(f"{blank} {_statement_carets(source_line)}")
            lines.append(blank)

        if diagnostic.help_text:
            lines.append(f"{' ' * GUTTER_WIDTH}= help: {diagnostic.help_text}")

        return "\n".join(lines) + "\n"

    def format_diagnostics(
        self,
        diagnostics: list[Diagnostic],
        *,
        include_summary: bool = True,
    ) -> str:
        """Render diagnostics one after another, followed by a summary line.

        Args:
            diagnostics: Diagnostics in report order.
            include_summary: Append the ``Found ...`` line.

        Returns:
            The rendered text, empty when there is nothing to report.

        """
        if not diagnostics:
            return ""

        blocks = [self.format_diagnostic(d) for d in diagnostics]
        if include_summary:
            blocks.append(self._summary(diagnostics))
        return "\n".join(blocks)

    def format_json(
        self,
        diagnostics: list[Diagnostic],
        files: list[str],
        *,
        stats: dict[str, int] | None = None,
    ) -> str:
        """Render a run as a JSON document.

        Args:
            diagnostics: Diagnostics of the run.
            files: Files processed in the run.
            stats: Optional counters, e.g. translated and failed files.

        Returns:
            Indented JSON text.

        """
        by_severity: dict[Severity, list[dict[str, object]]] = {
            Severity.ERROR: [],
            Severity.WARNING: [],
        }
        for diagnostic in diagnostics:
            by_severity[diagnostic.severity].append(diagnostic.to_dict())

        document: dict[str, object] = {
            "version": JSON_FORMAT_VERSION,
            "files": files,
            "valid": not by_severity[Severity.ERROR],
            "errors": by_severity[Severity.ERROR],
            "warnings": by_severity[Severity.WARNING],
        }
        if stats:
            document["stats"] = stats
        return json.dumps(document, indent=2)

    def _source_line(self, diagnostic: Diagnostic) -> str | None:
        lines = self._sources.get(diagnostic.file)
        if lines is None or not 1 <= diagnostic.line <= len(lines):
            return None
        return lines[diagnostic.line - 1]

    @staticmethod
    def _summary(diagnostics: list[Diagnostic]) -> str:
        counts = Counter(d.severity for d in diagnostics)
        parts = []
        if counts[Severity.ERROR]:
            parts.append(_plural(counts[Severity.ERROR], "error"))
        if counts[Severity.WARNING]:
            parts.append(_plural(counts[Severity.WARNING], "warning"))

        files = {d.file for d in diagnostics}
        where = next(iter(files)) if len(files) == 1 else f"{len(files)} files"
        return f"Found {' and '.join(parts)} in {where}\n"
