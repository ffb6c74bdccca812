"""
Correlation strategies match the entries of a described child collection with
the entries of the same collection on the remote side.
"""

# Standard
from dataclasses import replace
from typing import Any, Iterator, Optional, Sequence, Tuple
import abc

# First Party
import alog

log = alog.use_channel("CORR")


class CorrelationStrategy(abc.ABC):
    """Base class for strategies that pair described entries with remote ones"""

    @abc.abstractmethod
    def correlate(
        self,
        desired: Sequence[Any],
        observed: Sequence[dict],
    ) -> Iterator[Tuple[int, Any, Optional[dict]]]:
        """Pair every desired entry with its remote counterpart

        Args:
            desired:  Sequence[Any]
                The described entries, in description order
            observed:  Sequence[dict]
                The remote entries as listed by the API

        Returns:
            pairs:  Iterator[Tuple[int, Any, Optional[dict]]]
                (1-based position, desired entry, remote entry or None)
        """

    @abc.abstractmethod
    def assign_identity(self, entry: Any, position: int) -> Any:
        """Return a copy of the entry carrying the identity it must have on the
        remote side
        """


class PositionalCorrelation(CorrelationStrategy):
    """The i-th described entry is the i-th remote entry.

    NOTE: Reordering the described list changes which remote entry each
        described entry is reconciled against.
    """

    def __init__(self, id_format: Optional[str] = None, set_index: bool = False):
        """
        Args:
            id_format:  Optional[str]
                Format for the assigned id with an {index} placeholder for the
                1-based position. If None, the id is the position itself.
            set_index:  bool
                Whether the entry also carries its position as index
        """
        self.id_format = id_format
        self.set_index = set_index

    def correlate(self, desired, observed):
        observed = list(observed or [])
        for position, entry in enumerate(desired, start=1):
            remote = observed[position - 1] if position <= len(observed) else None
            log.debug4("Position %d paired with %s", position, remote)
            yield position, entry, remote

    def assign_identity(self, entry, position):
        updates = {
            "id": position
            if self.id_format is None
            else self.id_format.format(index=position)
        }
        if self.set_index:
            updates["index"] = position
        return replace(entry, **updates)
