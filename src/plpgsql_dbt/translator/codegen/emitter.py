"""Line emitter for dbt macro generation.

Collect generated Jinja lines in order. Indentation is passed explicitly
with every line, the emitter keeps no indentation state of its own.
"""

from plpgsql_dbt.log import get_logger

logger = get_logger(__name__)

INDENT_CHAR = " "
"""Character repeated to build indentation."""


class CodeEmitter:
    """Append-only sequence of generated lines."""

    def __init__(self) -> None:
        """Initialize an empty emitter."""
        self._lines: list[str] = []

    def emit(self, code: str, indent: int = 0) -> None:
        """Emit a line of code.

        Args:
            code: The code to emit (single line, no trailing newline).
            indent: Number of indentation characters before the code.

        """
        if indent < 0:
            msg = f"indent must be non-negative, got {indent}"
            raise ValueError(msg)
        self._lines.append(f"{INDENT_CHAR * indent}{code}")

    def emit_comment(self, text: str, indent: int = 0) -> None:
        """Emit a SQL comment line.

        Args:
            text: The comment text (without -- prefix).
            indent: Number of indentation characters before the comment.

        """
        self.emit(f"-- {text}", indent)

    def emit_blank(self) -> None:
        """Emit a blank line."""
        self._lines.append("")

    def extend(self, lines: list[str]) -> None:
        """Append already indented lines as-is."""
        self._lines.extend(lines)

    def get_lines(self) -> list[str]:
        """Get a copy of the emitted lines.

        Returns:
            Lines in emission order.

        """
        return list(self._lines)

    def get_code(self) -> str:
        """Get the generated text, lines joined by newlines.

        Returns:
            The generated text without a trailing newline.

        """
        return "\n".join(self._lines)

    def get_line_count(self) -> int:
        """Get the current line count.

        Returns:
            Number of lines emitted so far.

        """
        return len(self._lines)
