"""Logging helper module."""

from logging import (
    DEBUG,
    INFO,
    WARNING,
    Formatter,
    Logger,
    StreamHandler,
    basicConfig,
    getLogger,
)

from plpgsql_dbt.args import Args

LOG_FILE = "plpgsql_dbt.log"
"""Log file written to the current working directory."""


def init_logging(args: Args) -> None:
    """Initialize logging for the application.

    Should be called once when the application starts.
    """
    basicConfig(
        level=INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=LOG_FILE,
        filemode="w",
    )

    # Console handler for user-facing warnings
    console_handler = StreamHandler()
    console_handler.setLevel(WARNING)
    console_formatter = Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger = getLogger()
    root_logger.addHandler(console_handler)

    if args.verbose:
        root_logger.setLevel(DEBUG)
        root_logger.info("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)
