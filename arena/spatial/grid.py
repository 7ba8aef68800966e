"""Spatial indexing for efficient proximity queries."""

import math
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from arena.config.agents import VISION_RADIUS
from arena.entities.base import Entity
from arena.math_utils import Vector2

E = TypeVar("E", bound=Entity)

Cell = Tuple[int, int]


class SpatialGrid(Generic[E]):
    """
    Uniform grid over the world bounds for radius queries.

    Each tracked entity lives in exactly one cell, the one matching its
    position as of its last ``insert``/``update``. Positions outside the
    bounds map to the nearest edge cell and query cell ranges are clamped
    the same way, so a radius query always finds every tracked entity
    inside the circle, in or out of bounds.

    Results are ordered deterministically: cells column-major, entities in
    insertion order within a cell.
    """

    def __init__(self, width: float, height: float, cell_size: float = VISION_RADIUS):
        """
        Initialize the spatial grid.

        Args:
            width: Width of the world in pixels
            height: Height of the world in pixels
            cell_size: Size of each grid cell in pixels (defaults to the vision radius)
        """
        if not cell_size > 0:
            cell_size = VISION_RADIUS
        self.cell_size = float(cell_size)
        self.width = 0.0
        self.height = 0.0
        self.cols = 1
        self.rows = 1
        self._set_bounds(width, height)

        # (col, row) -> entities in insertion order (dict used as an ordered set)
        self._cells: Dict[Cell, Dict[E, None]] = {}
        self._entity_cells: Dict[E, Cell] = {}

    def _set_bounds(self, width: float, height: float) -> None:
        self.width = max(0.0, float(width)) if width == width else 0.0
        self.height = max(0.0, float(height)) if height == height else 0.0
        self.cols = max(1, math.ceil(self.width / self.cell_size))
        self.rows = max(1, math.ceil(self.height / self.cell_size))

    def _axis_index(self, value: float, limit: float, count: int) -> int:
        # Clamp before dividing so out-of-range and infinite values land on edge cells
        if value != value:
            return 0
        value = max(0.0, min(limit, value))
        return min(count - 1, int(value // self.cell_size))

    def _get_cell(self, x: float, y: float) -> Cell:
        """Get the grid cell coordinates for a position."""
        return (
            self._axis_index(x, self.width, self.cols),
            self._axis_index(y, self.height, self.rows),
        )

    def _get_cell_range(
        self, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> Tuple[int, int, int, int]:
        """Clamped (min_col, max_col, min_row, max_row) covering a box."""
        min_col, min_row = self._get_cell(min_x, min_y)
        max_col, max_row = self._get_cell(max_x, max_y)
        return min_col, max_col, min_row, max_row

    def insert(self, entity: E) -> None:
        """Add an entity, or move it if it is already tracked."""
        cell = self._get_cell(entity.pos.x, entity.pos.y)
        old_cell = self._entity_cells.get(entity)
        if old_cell == cell:
            return
        if old_cell is not None:
            self._discard_from_cell(entity, old_cell)
        bucket = self._cells.get(cell)
        if bucket is None:
            bucket = self._cells[cell] = {}
        bucket[entity] = None
        self._entity_cells[entity] = cell

    def update(self, entity: E) -> None:
        """Update an entity's cell after it moved."""
        self.insert(entity)

    def remove(self, entity: E) -> bool:
        """Stop tracking an entity. Returns False if it was not tracked."""
        cell = self._entity_cells.pop(entity, None)
        if cell is None:
            return False
        self._discard_from_cell(entity, cell)
        return True

    def _discard_from_cell(self, entity: E, cell: Cell) -> None:
        bucket = self._cells.get(cell)
        if bucket is None:
            return
        bucket.pop(entity, None)
        if not bucket:
            del self._cells[cell]

    def query_radius(self, point: Vector2, radius: float) -> List[E]:
        """
        Get all live entities within ``radius`` of ``point`` (inclusive).

        Only cells that can intersect the circle are visited and distances
        are compared squared. A negative or NaN radius returns an empty list.
        """
        if not radius >= 0:
            return []
        px = point.x
        py = point.y
        if px != px or py != py:
            return []
        radius_sq = radius * radius
        min_col, max_col, min_row, max_row = self._get_cell_range(
            px - radius, py - radius, px + radius, py + radius
        )

        results: List[E] = []
        cells = self._cells
        for col in range(min_col, max_col + 1):
            for row in range(min_row, max_row + 1):
                bucket = cells.get((col, row))
                if not bucket:
                    continue
                for entity in bucket:
                    if not entity.alive:
                        continue
                    dx = entity.pos.x - px
                    dy = entity.pos.y - py
                    if dx * dx + dy * dy <= radius_sq:
                        results.append(entity)
        return results

    def query_near(self, entity: Entity, radius: float) -> List[E]:
        """``query_radius`` around an entity, excluding the entity itself."""
        return [other for other in self.query_radius(entity.pos, radius) if other is not entity]

    def query_rect(self, x: float, y: float, width: float, height: float) -> List[E]:
        """Get all live entities inside an axis-aligned rectangle (edges inclusive)."""
        if not (width >= 0 and height >= 0):
            return []
        max_x = x + width
        max_y = y + height
        min_col, max_col, min_row, max_row = self._get_cell_range(x, y, max_x, max_y)

        results: List[E] = []
        for col in range(min_col, max_col + 1):
            for row in range(min_row, max_row + 1):
                bucket = self._cells.get((col, row))
                if not bucket:
                    continue
                for entity in bucket:
                    pos = entity.pos
                    if entity.alive and x <= pos.x <= max_x and y <= pos.y <= max_y:
                        results.append(entity)
        return results

    def resize(self, width: float, height: float) -> None:
        """Recompute cell geometry for new bounds and reinsert every entity."""
        entities = self.all()
        self.clear()
        self._set_bounds(width, height)
        for entity in entities:
            self.insert(entity)

    def cell_of(self, entity: E) -> Optional[Cell]:
        return self._entity_cells.get(entity)

    def all(self) -> List[E]:
        """Every tracked entity, in query order."""
        ordered = []
        for cell in sorted(self._cells):
            ordered.extend(self._cells[cell])
        return ordered

    def clear(self) -> None:
        self._cells.clear()
        self._entity_cells.clear()

    def __len__(self) -> int:
        return len(self._entity_cells)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entity_cells

    def __iter__(self) -> Iterator[E]:
        return iter(self.all())

    def get_stats(self) -> dict:
        return {
            "entities": len(self._entity_cells),
            "occupied_cells": len(self._cells),
            "cols": self.cols,
            "rows": self.rows,
            "cell_size": self.cell_size,
        }
