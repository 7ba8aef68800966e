"""Strategy Arena exception hierarchy.

Centralised base classes so callers can catch arena failures narrowly.
The tick itself never raises during normal operation; these exist for
programming errors and for the import/export surface.
"""


class ArenaError(Exception):
    """Root of all Strategy Arena domain exceptions."""


class SimulationError(ArenaError):
    """Errors during simulation execution (world, systems, entities)."""


class PoolError(SimulationError):
    """An object was released to a pool that does not own it."""


class MissingRNGError(SimulationError):
    """Raised when an RNG is required but was not provided.

    This indicates a bug in simulation setup: every system receives the
    world's RNG through the tick context.
    """


class ConfigurationError(ArenaError):
    """Invalid or missing configuration."""


class PersistenceError(ArenaError):
    """Errors while exporting or importing configuration records."""
