"""Version utility for plpgsql-dbt."""

import sys
from importlib.metadata import version


def get_plpgsql_dbt_version() -> str:
    """Get the plpgsql-dbt package version.

    Returns:
        Version string or "unknown" if version cannot be determined

    """
    try:
        return version("plpgsql-dbt")
    except Exception:  # noqa: BLE001
        # Missing or corrupted package metadata must not break --version
        return "unknown"


def show_version() -> None:
    """Display the application version and exit."""
    app_version = get_plpgsql_dbt_version()
    if app_version == "unknown":
        print("plpgsql-dbt (version unknown)")  # noqa: T201
    else:
        print(f"plpgsql-dbt {app_version}")  # noqa: T201
    sys.exit(0)
