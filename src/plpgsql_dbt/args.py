"""Parse and organize app args."""

from collections.abc import Callable
from pathlib import Path

import typed_argparse as tap

OUTPUT_FORMATS = ("text", "json")
"""Supported diagnostic output formats."""


class Args(tap.TypedArgs):
    """App args."""

    inputs: list[str] | None = tap.arg(
        positional=True,
        nargs="*",
        help="PL/pgSQL files or directories to translate (default: plpgsql)",
        default=[],
    )
    macro_dir: Path | None = tap.arg(
        help="Directory for generated dbt macros (default: macros)",
        default=None,
    )
    tree_dir: Path | None = tap.arg(
        help="Directory for raw parse tree dumps (default: tree)",
        default=None,
    )
    no_tree: bool = tap.arg(help="Do not write parse tree dumps", default=False)
    fail_fast: bool = tap.arg(
        help="Stop at the first file that fails to translate",
        default=False,
    )
    format: str = tap.arg(
        help="Diagnostic output format (text or json)",
        default="text",
    )
    path: Path | None = tap.arg(help="Working directory", default=None)
    verbose: bool = tap.arg(help="Enables verbose (DEBUG) logging", default=False)
    version: bool = tap.arg(help="Show version and exit", default=False)

    @property
    def working_dir(self) -> Path:
        """Get working directory."""
        if self.path:
            work_dir = self.path
            if not work_dir.is_absolute():
                work_dir = Path.cwd().joinpath(work_dir).resolve()
        else:
            work_dir = Path.cwd().resolve()

        if not work_dir.is_dir():
            msg = (
                f"Specified path '{self.path}' resolved to '{work_dir}' which is "
                "not a valid directory."
            )
            raise ValueError(
                msg,
            )

        return work_dir

    @property
    def json_output(self) -> bool:
        """Check if diagnostics should be printed as JSON.

        Returns:
            bool: True when --format json was requested

        """
        if self.format not in OUTPUT_FORMATS:
            msg = f"Unknown output format '{self.format}', expected one of: " + (
                ", ".join(OUTPUT_FORMATS)
            )
            raise ValueError(msg)
        return self.format == "json"


def bind_and_run(app_main: Callable[[Args], None]) -> None:
    """Parse args and run the app passing the parsed args."""
    tap.Parser(Args).bind(app_main).run()
