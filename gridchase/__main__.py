"""Module entry point for `python -m gridchase`."""

from __future__ import annotations

import argparse

from rich.console import Console

from gridchase.app import configure_logging, run_simulation, run_simulation_with_viewer
from gridchase.render.viewer import render_tick
from gridchase.sim.contracts import TacticsConfig
from gridchase.sim.world_loader import LEVELS


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the gridchase pursuit simulation.")
    parser.add_argument(
        "--view",
        action="store_true",
        help="Render every tick in the terminal while the game runs.",
    )
    parser.add_argument(
        "--level",
        choices=sorted(LEVELS),
        default=None,
        help="Built-in level to play (defaults to GRIDCHASE_LEVEL or classic).",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=500,
        help="Maximum number of ticks to run. Use 0 for no limit.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for adversary movement (defaults to GRIDCHASE_SEED).",
    )
    parser.add_argument(
        "--difficulty",
        type=int,
        choices=range(5),
        default=0,
        help="Adversary pursuit level from 0 to 4.",
    )
    parser.add_argument(
        "--cyclic",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force edge wrapping on or off (defaults to the level's setting).",
    )
    parser.add_argument(
        "--danger-threshold",
        type=int,
        default=None,
        help="Distance at which a dangerous adversary triggers escape.",
    )
    parser.add_argument(
        "--chase-threshold",
        type=int,
        default=None,
        help="Maximum distance to chase a vulnerable adversary.",
    )
    parser.add_argument(
        "--tick-delay",
        type=float,
        default=0.1,
        help="Seconds to pause between rendered ticks (--view only).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to GRIDCHASE_LOG_LEVEL or WARNING).",
    )
    args = parser.parse_args()

    configure_logging(args.log_level)
    ticks = args.ticks or None
    tuning = _build_tuning(args)

    if args.view:
        final = run_simulation_with_viewer(
            ticks=ticks,
            level=args.level,
            seed=args.seed,
            difficulty=args.difficulty,
            cyclic=args.cyclic,
            tuning=tuning,
            tick_delay=args.tick_delay,
        )
    else:
        final = run_simulation(
            ticks=ticks,
            level=args.level,
            seed=args.seed,
            difficulty=args.difficulty,
            cyclic=args.cyclic,
            tuning=tuning,
        )
        Console().print(
            render_tick(final, vulnerable_threshold=tuning.vulnerable_threshold)
        )
    print(f"Finished at tick {final.tick}: {final.status.value}, score {final.score}")


def _build_tuning(args: argparse.Namespace) -> TacticsConfig:
    overrides = {}
    if args.danger_threshold is not None:
        overrides["danger_threshold"] = args.danger_threshold
    if args.chase_threshold is not None:
        overrides["chase_threshold"] = args.chase_threshold
    return TacticsConfig(**overrides)


if __name__ == "__main__":
    main()
