"""Entry point for ``python -m antrails``.

Loads a YAML config, builds an engine with one colony, and runs it
headless for a fixed number of ticks, logging progress as it goes.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from antrails.simulation.clock import SimulationClock
from antrails.simulation.config import SimulationConfig
from antrails.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("antrails")


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, build the engine, and run it headless."""
    parser = argparse.ArgumentParser(
        prog="antrails",
        description="antrails - headless ant foraging simulation",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=3600,
        help="Number of ticks to simulate (default: 3600)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60.0,
        help="Simulation ticks per simulated second (default: 60)",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=600,
        help="Log a progress line every N ticks (default: 600)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every pick-up and delivery",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)
    engine.populate()

    clock = SimulationClock(dt=1.0 / args.fps, max_steps=args.ticks or 1)
    # Headless: feed exactly the simulated time we want, one tick at a time
    while engine.tick < args.ticks:
        due = min(clock.advance(clock.dt), args.ticks - engine.tick)
        for _ in range(due):
            engine.step(clock.dt)
            if args.report_every and engine.tick % args.report_every == 0:
                logger.info(
                    "tick %d: %d markers, %d food left, %d delivered",
                    engine.tick,
                    len(engine.trails),
                    len(engine.store.foods),
                    engine.delivered,
                )

    logger.info(
        "done after %d ticks: picked up %d, delivered %d, %d collisions",
        engine.tick,
        engine.picked_up,
        engine.delivered,
        engine.collision_contacts,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
