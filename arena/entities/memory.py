"""Bounded per-agent memory of past encounters."""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from arena.config.agents import DEFAULT_MEMORY_SIZE
from arena.strategies.base import Action, Outcome


@dataclass
class EncounterRecord:
    """What an agent remembers about one opponent.

    Attributes:
        opponent_id: Id of the remembered agent
        last_action: The action the opponent took last time
        outcome: How the last encounter went for the remembering agent
        energy_change: Net energy the remembering agent gained or lost
        timestamp: Tick of the last encounter
    """

    opponent_id: int
    last_action: Action
    outcome: Outcome
    energy_change: float
    timestamp: int


class EncounterMemory:
    """Fixed-capacity mapping from opponent id to EncounterRecord.

    Recording an opponent that is already known refreshes its entry in
    place. Recording a new opponent when full evicts the entry with the
    oldest timestamp; the scan is linear in the (small) capacity.
    """

    __slots__ = ("capacity", "_records")

    def __init__(self, capacity: int = DEFAULT_MEMORY_SIZE) -> None:
        self.capacity = max(1, int(capacity))
        self._records: Dict[int, EncounterRecord] = {}

    def recall(self, opponent_id: int) -> Optional[EncounterRecord]:
        return self._records.get(opponent_id)

    def remember(
        self,
        opponent_id: int,
        last_action: Action,
        outcome: Outcome,
        energy_change: float,
        timestamp: int,
    ) -> EncounterRecord:
        """Store or refresh the record for ``opponent_id``.

        Returns:
            The stored record
        """
        record = self._records.get(opponent_id)
        if record is not None:
            record.last_action = last_action
            record.outcome = outcome
            record.energy_change = energy_change
            record.timestamp = timestamp
            return record

        if len(self._records) >= self.capacity:
            self._evict_oldest()

        record = EncounterRecord(opponent_id, last_action, outcome, energy_change, timestamp)
        self._records[opponent_id] = record
        return record

    def _evict_oldest(self) -> None:
        oldest_id = None
        oldest_time = None
        for opponent_id, record in self._records.items():
            if oldest_time is None or record.timestamp < oldest_time:
                oldest_id = opponent_id
                oldest_time = record.timestamp
        if oldest_id is not None:
            del self._records[oldest_id]

    def clear(self, capacity: Optional[int] = None) -> None:
        """Forget everything, optionally changing the capacity."""
        self._records.clear()
        if capacity is not None:
            self.capacity = max(1, int(capacity))

    def resize(self, capacity: int) -> None:
        """Change the capacity, evicting the oldest records that no longer fit."""
        self.capacity = max(1, int(capacity))
        while len(self._records) > self.capacity:
            self._evict_oldest()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EncounterRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, opponent_id: object) -> bool:
        return opponent_id in self._records
