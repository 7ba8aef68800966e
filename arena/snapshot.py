"""Read-only presentation snapshot of the world.

The presentation layer receives these pydantic models once per tick. They
are built from copies of core state, so mutating a snapshot never touches
the simulation.
"""

from typing import TYPE_CHECKING, Any, Dict, List

import orjson
from pydantic import BaseModel

if TYPE_CHECKING:
    from arena.world import World


class MemoryView(BaseModel):
    """One remembered opponent."""

    opponent_id: int
    last_action: str
    outcome: str
    energy_change: float
    timestamp: int


class AgentView(BaseModel):
    """Represents an agent for drawing."""

    id: int
    x: float
    y: float
    vel_x: float
    vel_y: float
    energy: float
    age: float
    strategy: str
    generation: int
    traits: Dict[str, float]
    memory: List[MemoryView] = []


class FoodView(BaseModel):
    """Represents a food item for drawing."""

    id: int
    x: float
    y: float
    energy_value: float


class EventView(BaseModel):
    """A presentation effect trigger (consume, fight, share, flee)."""

    kind: str
    x: float
    y: float
    agent_ids: List[int]
    tick: int


class WorldSnapshot(BaseModel):
    """Everything the presentation layer needs for one frame."""

    tick: int
    width: float
    height: float
    agents: List[AgentView]
    food: List[FoodView]
    events: List[EventView] = []

    def to_json(self) -> str:
        return to_json(self)


def build_snapshot(world: "World", include_memory: bool = True) -> WorldSnapshot:
    """Copy the live state of ``world`` into a WorldSnapshot."""
    agents = []
    for agent in world.live_agents():
        memory = []
        if include_memory:
            memory = [
                MemoryView(
                    opponent_id=record.opponent_id,
                    last_action=record.last_action.value,
                    outcome=record.outcome.value,
                    energy_change=record.energy_change,
                    timestamp=record.timestamp,
                )
                for record in agent.memory
            ]
        agents.append(
            AgentView(
                id=agent.id,
                x=agent.pos.x,
                y=agent.pos.y,
                vel_x=agent.vel.x,
                vel_y=agent.vel.y,
                energy=agent.energy,
                age=agent.age,
                strategy=agent.strategy.value,
                generation=agent.generation,
                traits=agent.traits.to_dict(),
                memory=memory,
            )
        )

    food = [
        FoodView(id=item.id, x=item.pos.x, y=item.pos.y, energy_value=item.energy_value)
        for item in world.live_food()
    ]
    events = [EventView(**event.to_dict()) for event in world.recent_events]

    return WorldSnapshot(
        tick=world.tick,
        width=world.width,
        height=world.height,
        agents=agents,
        food=food,
        events=events,
    )


def to_json(model: BaseModel) -> str:
    """Serialize a snapshot (or any payload model) with orjson."""
    data: Dict[str, Any] = model.model_dump()
    return orjson.dumps(data).decode("utf-8")
