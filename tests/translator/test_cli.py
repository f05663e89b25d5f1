"""Tests for batch translation.

Test file handling, written artifacts, exit codes, and reporting.
"""

import io
import json
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from plpgsql_dbt.config_loader import TranslatorConfig
from plpgsql_dbt.translator.cli import (
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSLATION_ERRORS,
    BatchResult,
    BatchTranslator,
    report,
    run_translate,
)
from plpgsql_dbt.translator.errors.diagnostics import Diagnostic
from plpgsql_dbt.translator.errors.reporter import DiagnosticReporter

GOOD_SOURCE = """\
CREATE FUNCTION {name}() RETURNS void AS $$
BEGIN
    DELETE FROM staging;
    RAISE NOTICE 'cleared';
END;
$$ LANGUAGE plpgsql;
"""

BAD_SOURCE = "CREATE FUNCTION broken( RETURNS"


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def _write_source(directory: Path, name: str, source: str | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.sql"
    path.write_text(source or GOOD_SOURCE.format(name=name))
    return path


def _args(tmp_path: Path, **overrides: object) -> Mock:
    args = Mock()
    args.inputs = []
    args.macro_dir = None
    args.tree_dir = None
    args.no_tree = False
    args.fail_fast = False
    args.json_output = False
    args.working_dir = tmp_path
    for key, value in overrides.items():
        setattr(args, key, value)
    return args


@pytest.fixture
def config(tmp_path: Path) -> TranslatorConfig:
    return TranslatorConfig(
        inputs=[tmp_path / "plpgsql"],
        macro_dir=tmp_path / "macros",
        tree_dir=tmp_path / "tree",
    )


class TestBatchResult:
    """Test exit code selection."""

    def test_exit_codes(self) -> None:
        """File errors outrank translation errors."""
        assert BatchResult().exit_code == EXIT_SUCCESS
        assert BatchResult(failed=1).exit_code == EXIT_TRANSLATION_ERRORS
        assert BatchResult(failed=1, file_errors=1).exit_code == EXIT_FILE_ERROR

    def test_warning_count(self) -> None:
        """Only warnings are counted."""
        result = BatchResult(
            diagnostics=[
                Diagnostic.warning("w", "a.sql", 1),
                Diagnostic.error("e", "a.sql", 1),
            ],
        )
        assert result.warning_count == 1


class TestBatchTranslator:
    """Test translating files on disk."""

    def test_writes_macro_and_tree(self, tmp_path: Path, config: TranslatorConfig) -> None:
        """A good file produces a macro and a tree dump."""
        path = _write_source(tmp_path / "plpgsql", "clear_staging")
        console, buffer = _console()

        result = BatchTranslator(config, console=console).translate_files([path])

        assert result.translated == 1
        assert result.exit_code == EXIT_SUCCESS
        macro = (tmp_path / "macros" / "clear_staging.sql").read_text()
        assert macro.startswith("{% macro clear_staging() %}")
        assert macro.endswith("{% endmacro %}")
        assert "{% call statement('exec_1') %}" in macro
        tree = json.loads((tmp_path / "tree" / "clear_staging.tree").read_text())
        assert "PLpgSQL_function" in tree[0]
        output = buffer.getvalue()
        assert "Saved AST tree: clear_staging.tree" in output
        assert "Generated dbt macro: clear_staging.sql" in output

    def test_no_tree(self, tmp_path: Path, config: TranslatorConfig) -> None:
        """Tree dumps are skipped without a tree directory."""
        config.tree_dir = None
        path = _write_source(tmp_path / "plpgsql", "clear_staging")
        console, _ = _console()

        BatchTranslator(config, console=console).translate_files([path])

        assert (tmp_path / "macros" / "clear_staging.sql").exists()
        assert not (tmp_path / "tree").exists()

    def test_bad_file_does_not_stop_batch(
        self,
        tmp_path: Path,
        config: TranslatorConfig,
    ) -> None:
        """A syntax error is reported and the next file still translates."""
        bad = _write_source(tmp_path / "plpgsql", "a_broken", BAD_SOURCE)
        good = _write_source(tmp_path / "plpgsql", "b_good")
        console, _ = _console()

        result = BatchTranslator(config, console=console).translate_files([bad, good])

        assert result.failed == 1
        assert result.translated == 1
        assert result.exit_code == EXIT_TRANSLATION_ERRORS
        assert not (tmp_path / "macros" / "a_broken.sql").exists()
        assert (tmp_path / "macros" / "b_good.sql").exists()
        assert result.diagnostics[0].file == str(bad)

    def test_fail_fast(self, tmp_path: Path, config: TranslatorConfig) -> None:
        """fail_fast stops at the first failure."""
        bad = _write_source(tmp_path / "plpgsql", "a_broken", BAD_SOURCE)
        good = _write_source(tmp_path / "plpgsql", "b_good")
        console, _ = _console()

        result = BatchTranslator(config, console=console).translate_files(
            [bad, good],
            fail_fast=True,
        )

        assert result.files == [bad]
        assert not (tmp_path / "macros" / "b_good.sql").exists()

    def test_unreadable_file(self, tmp_path: Path, config: TranslatorConfig) -> None:
        """A missing file counts as a file error."""
        console, buffer = _console()

        result = BatchTranslator(config, console=console).translate_files(
            [tmp_path / "missing.sql"],
        )

        assert result.file_errors == 1
        assert result.exit_code == EXIT_FILE_ERROR
        assert "cannot read" in buffer.getvalue()

    def test_ids_unique_across_files(
        self,
        tmp_path: Path,
        config: TranslatorConfig,
    ) -> None:
        """Anonymous statement ids keep counting across files."""
        first = _write_source(tmp_path / "plpgsql", "first")
        second = _write_source(tmp_path / "plpgsql", "second")
        console, _ = _console()

        BatchTranslator(config, console=console).translate_files([first, second])

        assert "exec_1" in (tmp_path / "macros" / "first.sql").read_text()
        assert "exec_2" in (tmp_path / "macros" / "second.sql").read_text()


class TestReport:
    """Test diagnostic reporting."""

    def test_text_summary(self) -> None:
        """Text mode ends with a summary line."""
        console, buffer = _console()
        result = BatchResult(
            files=[Path("a.sql")],
            translated=1,
            diagnostics=[Diagnostic.warning("dropped", "a.sql", 1)],
        )

        report(result, DiagnosticReporter(), console)

        output = buffer.getvalue()
        assert "warning: dropped" in output
        assert output.rstrip().endswith("1 of 1 files translated, 1 warnings")

    def test_json(self) -> None:
        """JSON mode prints a single document."""
        console, buffer = _console()
        result = BatchResult(files=[Path("a.sql")], translated=1)

        report(result, DiagnosticReporter(), console, json_output=True)

        data = json.loads(buffer.getvalue())
        assert data["valid"] is True
        assert data["stats"]["translated"] == 1


class TestRunTranslate:
    """Test running a batch from command line arguments."""

    def test_default_directories(self, tmp_path: Path) -> None:
        """Sources are read from plpgsql/ under the working directory."""
        _write_source(tmp_path / "plpgsql", "clear_staging")
        console, buffer = _console()

        exit_code = run_translate(_args(tmp_path), console)

        assert exit_code == EXIT_SUCCESS
        assert (tmp_path / "macros" / "clear_staging.sql").exists()
        assert (tmp_path / "tree" / "clear_staging.tree").exists()
        assert "1 of 1 files translated" in buffer.getvalue()

    def test_missing_input(self, tmp_path: Path) -> None:
        """A missing input path is a file error."""
        console, buffer = _console()

        exit_code = run_translate(_args(tmp_path, inputs=["nope"]), console)

        assert exit_code == EXIT_FILE_ERROR
        assert "not found" in buffer.getvalue()

    def test_no_files(self, tmp_path: Path) -> None:
        """An empty source directory is not an error."""
        (tmp_path / "plpgsql").mkdir()
        console, buffer = _console()

        exit_code = run_translate(_args(tmp_path), console)

        assert exit_code == EXIT_SUCCESS
        assert "No .sql files found" in buffer.getvalue()

    def test_translation_error_exit_code(self, tmp_path: Path) -> None:
        """A file that fails to translate sets exit code 1."""
        _write_source(tmp_path / "plpgsql", "broken", BAD_SOURCE)
        console, buffer = _console()

        exit_code = run_translate(_args(tmp_path, no_tree=True), console)

        assert exit_code == EXIT_TRANSLATION_ERRORS
        assert "error[E0002]" in buffer.getvalue()
