"""Allow running plpgsql-dbt as ``python -m plpgsql_dbt``."""

from plpgsql_dbt.main import main

main()
