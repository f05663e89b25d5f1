"""plpgsql-dbt CLI entry point."""

import sys

from plpgsql_dbt.args import Args, bind_and_run
from plpgsql_dbt.log import get_logger, init_logging
from plpgsql_dbt.translator.cli import run_translate
from plpgsql_dbt.version import show_version


def run(args: Args) -> None:
    """Configure logging and run a translation batch."""
    if args.version:
        show_version()

    init_logging(args)
    logger = get_logger(__name__)

    try:
        exit_code = run_translate(args)
    except ValueError as config_err:
        logger.error("%s", config_err)  # noqa: TRY400
        sys.exit(2)
    except Exception as app_err:
        msg = f"Critical error during translation: {app_err}"
        logger.exception(msg)
        raise
    sys.exit(exit_code)


def main() -> None:
    """Entry point for the CLI."""
    bind_and_run(run)


if __name__ == "__main__":
    main()
