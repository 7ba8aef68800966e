"""Base entity shared by agents and food."""

from arena.math_utils import Vector2


class Entity:
    """Anything with an identity and a position in the arena.

    Attributes:
        id: Opaque integer id, stable for one spawn (a pooled object gets
            a fresh id every time it is reused)
        pos: Current position
        alive: False once the entity has died or been consumed
    """

    __slots__ = ("id", "pos", "alive")

    def __init__(self, entity_id: int = -1, x: float = 0.0, y: float = 0.0) -> None:
        self.id = entity_id
        self.pos = Vector2(x, y)
        self.alive = entity_id >= 0

    def mark_dead(self) -> None:
        self.alive = False

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"{self.__class__.__name__}(id={self.id}, pos={self.pos!r}, {state})"
