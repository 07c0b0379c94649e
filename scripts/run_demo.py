#!/usr/bin/env python3
"""Run a headless autoplay demo of Arcade Shooter."""

import asyncio
import sys
from pathlib import Path

# Add src to path for running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcade_shooter.app import Application

SNAPSHOT_EVERY = 300


def print_state(app, frame):
    """Print current game state."""
    controller = app.controller
    state = controller.get_state()
    alive = sum(1 for enemy in controller.enemies if enemy.is_alive)
    print(
        f"frame {frame:5d}  {state.phase.value:8s}  score {state.score:2d}  "
        f"enemies {len(controller.enemies)} ({alive} alive)  effects {len(controller.effects)}"
    )


async def run_demo(seed=None):
    """Play one game with the autoplayer and report progress."""
    print("Arcade Shooter Demo")
    print("=" * 60)

    root = Path(__file__).parent.parent
    app = Application(asset_dir=root / "assets", seed=seed)

    def progress(frame):
        if frame % SNAPSHOT_EVERY == 0:
            print_state(app, frame)

    output = root / "demo_frame.png"
    state = await app.run_headless(3600, output, progress=progress)

    print()
    print(f"Resources: {app.resources.summary()}")
    print(f"Result: {state.phase.value} with score {state.score}")
    print(f"Last frame saved to {output}")


def main():
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else None
    asyncio.run(run_demo(seed))


if __name__ == "__main__":
    main()
