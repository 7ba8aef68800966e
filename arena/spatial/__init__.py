"""Spatial partitioning for neighbour lookups."""

from arena.spatial.grid import SpatialGrid

__all__ = ["SpatialGrid"]
