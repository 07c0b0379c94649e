#!/usr/bin/env python3
"""Save a single rendered frame, with its HUD, to view."""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcade_shooter.assets import PlaceholderGenerator
from arcade_shooter.config import GameSettings
from arcade_shooter.engine import GameController, ManualFrameScheduler
from arcade_shooter.renderer import HudOverlay, Surface
from arcade_shooter.types import GameResources


def main():
    surface = Surface(800, 600)
    scheduler = ManualFrameScheduler()
    resources = PlaceholderGenerator().fill_missing(GameResources())
    controller = GameController(surface, scheduler, resources, GameSettings(), rng=random.Random(3))

    # Play a few seconds so enemies are on screen
    controller.start(0.0)
    controller.pointer_move(400, 300)
    scheduler.run_until(end=4500.0, step=1000.0 / 60, start=1000.0 / 60)
    controller.pointer_click(400, 300)
    scheduler.run_frame(4520.0)

    frame = HudOverlay().compose(surface.frame, controller.get_state(), controller.settings, controller.config.win_score)

    output = Path(__file__).parent.parent / "frame.png"
    frame.save(output)
    print(f"Saved frame to {output}")
    print(f"Enemies on screen: {len(controller.enemies)}")


if __name__ == "__main__":
    main()
