"""Command-line entry point: run the arena headless and report statistics.

Examples:
  # Default balanced world for one simulated minute
  python -m arena --ticks 3600 --seed 42

  # Hawk invasion scenario, stats every 600 ticks, export its config
  python -m arena --preset HawkInvasion --stats-interval 600 --export-config run.json

  # Replay an exported configuration
  python -m arena --import-config run.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import orjson

from arena.config.presets import apply_preset, list_presets
from arena.config.record import load_record, record_to_config, record_to_json
from arena.config.simulation_config import SimulationConfig
from arena.exceptions import ArenaError
from arena.world import World

logger = logging.getLogger(__name__)


class UniformFoodPolicy:
    """Drops food at uniformly random positions at a fixed average rate.

    Args:
        per_tick: Expected food items per tick (fractions accumulate)
        max_food: Stop adding food once this many items exist (0 = no limit)
    """

    def __init__(self, per_tick: float, max_food: int = 0) -> None:
        self.per_tick = max(0.0, per_tick)
        self.max_food = max(0, max_food)
        self._pending = 0.0

    def replenish(self, world: World) -> None:
        self._pending += self.per_tick
        while self._pending >= 1.0:
            self._pending -= 1.0
            if self.max_food and len(world.live_food()) >= self.max_food:
                continue
            x, y = world.random_position()
            world.acquire_food(x, y)


def _seed_arg(value: str):
    """Numeric seeds stay numbers so exported records keep them as such."""
    try:
        return int(value)
    except ValueError:
        return value


def _format_stats(world: World) -> str:
    stats = world.stats
    mix = ", ".join(f"{name}={count}" for name, count in stats.strategy_counts.items())
    return (
        f"tick {stats.tick}: pop={stats.population} food={stats.food_count} "
        f"avg_energy={stats.average_energy:.1f} births={stats.births} "
        f"floor={stats.floor_spawns} deaths={stats.deaths} [{mix}]"
    )


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Assemble the run configuration from CLI arguments."""
    config = SimulationConfig(seed=args.seed)

    if args.import_config:
        record = load_record(Path(args.import_config).read_text(encoding="utf-8"))
        config = record_to_config(record, config)
        if args.seed is not None:
            config = config.with_overrides(seed=args.seed)

    if args.preset:
        config = apply_preset(config, args.preset)

    overrides = {}
    if args.agents is not None:
        overrides["world.initial_agent_count"] = args.agents
    if args.food is not None:
        overrides["world.initial_food_count"] = args.food
    if args.boundary is not None:
        overrides["movement.boundary_mode"] = args.boundary
    if args.width is not None:
        overrides["world.width"] = args.width
    if args.height is not None:
        overrides["world.height"] = args.height
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def run(args: argparse.Namespace) -> World:
    """Build the world and run it for ``args.ticks`` ticks."""
    world = World(build_config(args))
    world.set_performance_mode(args.performance)
    if args.food_per_tick > 0:
        world.attach_food_policy(UniformFoodPolicy(args.food_per_tick, args.max_food))

    logger.info(_format_stats(world))
    for _ in range(args.ticks):
        world.step()
        if args.stats_interval and world.tick % args.stats_interval == 0:
            logger.info(_format_stats(world))
    return world


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="strategy-arena",
        description="Deterministic hawk/dove strategy arena (headless)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument("--ticks", type=int, default=3600, help="Ticks to simulate (default: 3600)")
    parser.add_argument("--seed", type=_seed_arg, default=None, help="Numeric or string seed")
    parser.add_argument("--preset", choices=list_presets(), help="Scenario preset")
    parser.add_argument("--agents", type=int, default=None, help="Initial agent count")
    parser.add_argument("--food", type=int, default=None, help="Initial food count")
    parser.add_argument("--width", type=float, default=None, help="World width in pixels")
    parser.add_argument("--height", type=float, default=None, help="World height in pixels")
    parser.add_argument("--boundary", choices=["bounce", "wrap"], help="Boundary mode")
    parser.add_argument(
        "--food-per-tick",
        type=float,
        default=0.5,
        help="Average food items dropped per tick (default: 0.5, 0 disables)",
    )
    parser.add_argument(
        "--max-food", type=int, default=200, help="Food cap for replenishment (0 = no cap)"
    )
    parser.add_argument(
        "--stats-interval", type=int, default=600, help="Log stats every N ticks (0 = never)"
    )
    parser.add_argument("--export-config", metavar="FILE", help="Write the config record here")
    parser.add_argument("--import-config", metavar="FILE", help="Start from a config record")
    parser.add_argument(
        "--performance", action="store_true", help="Skip event and heatmap bookkeeping"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and run the simulation."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        world = run(args)
    except (ArenaError, OSError) as exc:
        logger.error("Run failed: %s", exc)
        return 1

    if args.export_config:
        Path(args.export_config).write_text(
            record_to_json(world.export_record()), encoding="utf-8"
        )
        logger.info("Exported config record to %s", args.export_config)

    summary = {"stats": world.stats.to_dict(), "heatmap": world.heatmap, "seed": world.seed}
    print(orjson.dumps(summary, option=orjson.OPT_INDENT_2).decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
