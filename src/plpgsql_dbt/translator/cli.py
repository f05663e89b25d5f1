"""Batch translation of PL/pgSQL files into dbt macros.

Discover ``*.sql`` files, translate each one, and persist the generated
macro and the raw parse tree next to each other under the configured
output directories.
"""

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from plpgsql_dbt.args import Args
from plpgsql_dbt.config_loader import TranslatorConfig, load_config
from plpgsql_dbt.log import get_logger
from plpgsql_dbt.translator.codegen.ids import StatementIdCounter
from plpgsql_dbt.translator.compiler import error_to_diagnostic, translate_tree
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic, Severity
from plpgsql_dbt.translator.errors.exceptions import TranslationError
from plpgsql_dbt.translator.errors.reporter import DiagnosticReporter
from plpgsql_dbt.translator.parser import dump_tree, parse_plpgsql_source
from plpgsql_dbt.utils.file_discovery import find_files

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_TRANSLATION_ERRORS = 1
EXIT_FILE_ERROR = 2

SQL_GLOB = "*.sql"
MACRO_SUFFIX = ".sql"
TREE_SUFFIX = ".tree"


@dataclass
class BatchResult:
    """Accumulated outcome of a translation run."""

    files: list[Path] = field(default_factory=list)
    translated: int = 0
    failed: int = 0
    file_errors: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Process exit code for this run."""
        if self.file_errors:
            return EXIT_FILE_ERROR
        if self.failed:
            return EXIT_TRANSLATION_ERRORS
        return EXIT_SUCCESS

    @property
    def warning_count(self) -> int:
        """Number of warnings raised across all files."""
        return sum(1 for d in self.diagnostics if d.severity == Severity.WARNING)


class BatchTranslator:
    """Translate PL/pgSQL files and write the generated artifacts.

    All files translated by one instance share a single id counter, so
    anonymous statement ids are unique across the whole run.
    """

    def __init__(
        self,
        config: TranslatorConfig,
        *,
        counter: StatementIdCounter | None = None,
        console: Console | None = None,
        reporter: DiagnosticReporter | None = None,
    ) -> None:
        """Initialize the batch translator.

        Args:
            config: Resolved run configuration.
            counter: Id counter for the run; a fresh one is created when omitted.
            console: Console receiving progress messages.
            reporter: Diagnostic reporter holding source text for context.

        """
        self._config = config
        self._counter = counter if counter is not None else StatementIdCounter()
        self._console = console if console is not None else Console()
        self._reporter = reporter if reporter is not None else DiagnosticReporter()

    @property
    def reporter(self) -> DiagnosticReporter:
        """Reporter with the source of every file read so far."""
        return self._reporter

    def translate_file(self, path: Path, result: BatchResult) -> bool:
        """Translate a single file.

        Args:
            path: PL/pgSQL source file.
            result: Run result to update.

        Returns:
            True if the macro was generated.

        """
        result.files.append(path)
        filename = str(path)
        name = path.stem

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.exception("Cannot read %s", path)
            self._console.print(f"[red]error:[/red] cannot read {escape(filename)}: {e}")
            result.file_errors += 1
            return False

        self._reporter.add_source(filename, source)

        try:
            tree = parse_plpgsql_source(source, filename)
            if self._config.tree_dir is not None:
                self._write(self._config.tree_dir / f"{name}{TREE_SUFFIX}", dump_tree(tree))
                self._console.print(f"Saved AST tree: {escape(name)}{TREE_SUFFIX}")

            translation = translate_tree(
                tree,
                name,
                counter=self._counter,
                filename=filename,
            )
            self._write(
                self._config.macro_dir / f"{name}{MACRO_SUFFIX}",
                translation.macro,
            )
        except TranslationError as e:
            logger.warning("Translation of %s failed: %s", filename, e)
            result.failed += 1
            result.diagnostics.append(error_to_diagnostic(e, filename))
            return False
        except OSError as e:
            logger.exception("Cannot write output for %s", filename)
            self._console.print(
                f"[red]error:[/red] cannot write output for {escape(filename)}: {e}",
            )
            result.file_errors += 1
            return False

        result.translated += 1
        result.diagnostics.extend(translation.diagnostics)
        self._console.print(f"Generated dbt macro: {escape(name)}{MACRO_SUFFIX}")
        return True

    def translate_files(
        self,
        paths: list[Path],
        *,
        fail_fast: bool = False,
    ) -> BatchResult:
        """Translate files in order.

        Args:
            paths: Files to translate.
            fail_fast: Stop at the first failing file.

        Returns:
            The accumulated run result.

        """
        result = BatchResult()
        for path in paths:
            if not self.translate_file(path, result) and fail_fast:
                logger.info("Stopping after failure in %s", path)
                break
        return result

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)


def report(
    result: BatchResult,
    reporter: DiagnosticReporter,
    console: Console,
    *,
    json_output: bool = False,
) -> None:
    """Print the diagnostics of a run.

    Args:
        result: Run result.
        reporter: Reporter holding the source of each file.
        console: Console to print to.
        json_output: Print a JSON document instead of text.

    """
    if json_output:
        stats = {
            "translated": result.translated,
            "failed": result.failed,
            "file_errors": result.file_errors,
        }
        console.out(
            reporter.format_json(
                result.diagnostics,
                [str(f) for f in result.files],
                stats=stats,
            ),
            highlight=False,
        )
        return

    if result.diagnostics:
        console.print(
            reporter.format_diagnostics(result.diagnostics),
            markup=False,
            highlight=False,
        )

    summary = f"{result.translated} of {len(result.files)} files translated"
    if result.warning_count:
        summary += f", {result.warning_count} warnings"
    console.print(summary)


def run_translate(args: Args, console: Console | None = None) -> int:
    """Run a translation batch from command line arguments.

    Args:
        args: Parsed command line arguments.
        console: Console for output; defaults to stdout.

    Returns:
        Process exit code.

    """
    json_output = args.json_output
    config = load_config(args)
    if console is None:
        console = Console()

    # JSON goes to stdout, keep progress messages out of it
    progress_console = Console(stderr=True) if json_output else console

    missing = [p for p in config.inputs if not p.exists()]
    for path in missing:
        progress_console.print(f"[red]error:[/red] not found: {escape(str(path))}")
    if missing:
        return EXIT_FILE_ERROR

    paths = find_files(config.inputs, SQL_GLOB)
    if not paths:
        progress_console.print("No .sql files found")
        return EXIT_SUCCESS

    logger.info("Translating %d files", len(paths))
    translator = BatchTranslator(config, console=progress_console)
    result = translator.translate_files(paths, fail_fast=args.fail_fast)
    report(result, translator.reporter, console, json_output=json_output)
    return result.exit_code
