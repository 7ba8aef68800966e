"""Food entity."""

from arena.entities.base import Entity


class Food(Entity):
    """A stationary energy source, consumed whole by the first agent to reach it."""

    __slots__ = ("energy_value",)

    def __init__(self) -> None:
        super().__init__()
        self.energy_value = 0.0

    def reset_for_spawn(self, entity_id: int, x: float, y: float, energy_value: float) -> "Food":
        self.id = entity_id
        self.alive = True
        self.pos.set(x, y)
        self.energy_value = max(0.0, energy_value)
        return self

    def consume(self) -> float:
        """Mark the food eaten and return its energy value (0 if already eaten)."""
        if not self.alive:
            return 0.0
        self.alive = False
        return self.energy_value
