"""File discovery utilities."""

from pathlib import Path

# Directory names to ignore when discovering files
IGNORED_DIRECTORIES = {
    "__pycache__",
    "node_modules",
    "target",
    "dbt_packages",
    "macros",
    "tree",
}


def find_files(
    base_paths: list[Path],
    glob_pattern: str,
    ignored_directories: set[str] | None = None,
) -> list[Path]:
    """Find files matching a glob pattern in search paths.

    Paths that point at a file are returned as-is when they match the
    pattern, directories are searched recursively.

    Args:
        base_paths: List of files or directories to search
        glob_pattern: Glob pattern to match files (e.g., "*.sql")
        ignored_directories: Set of directory names to ignore (defaults to
        IGNORED_DIRECTORIES)

    Returns:
        List of matching file paths, sorted and deduplicated

    """
    if ignored_directories is None:
        ignored_directories = IGNORED_DIRECTORIES

    files: list[Path] = []

    for search_path in base_paths:
        if not search_path.exists():
            continue

        if search_path.is_file():
            if search_path.match(glob_pattern):
                files.append(search_path)
            continue

        # Only filter on the parts below the search root
        filtered_files = [
            f
            for f in search_path.rglob(glob_pattern)
            if not any(
                part.startswith(".") or part in ignored_directories
                for part in f.relative_to(search_path).parts
            )
        ]

        files.extend(filtered_files)

    # Remove duplicates and sort
    return [f for f in sorted(set(files)) if f.is_file()]
