"""Identifier source for anonymous ``statement`` call blocks."""

from plpgsql_dbt.log import get_logger

logger = get_logger(__name__)


class StatementIdCounter:
    """Monotonic counter minting ids such as ``exec_1`` and ``dyn_2``.

    One instance covers one translation run. All prefixes share the same
    sequence, so ids stay unique across procedures compiled in that run.
    Independent runs must use independent instances.
    """

    def __init__(self, start: int = 0) -> None:
        """Initialize the counter.

        Args:
            start: Value before the first id is minted.

        """
        self._value = start

    @property
    def value(self) -> int:
        """Number of the most recently minted id."""
        return self._value

    def next_id(self, prefix: str) -> str:
        """Mint the next id.

        Args:
            prefix: Id prefix, e.g. ``exec``.

        Returns:
            The new id, e.g. ``exec_3``.

        """
        self._value += 1
        statement_id = f"{prefix}_{self._value}"
        logger.debug("Minted statement id %s", statement_id)
        return statement_id

    def reset(self) -> None:
        """Start a new run from zero."""
        self._value = 0
