#!/usr/bin/env python3
"""Generate placeholder frame sequences for Arcade Shooter."""

from pathlib import Path
import sys

# Add src to path for running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arcade_shooter.assets.placeholder_generator import generate_placeholders


def main():
    """Write every placeholder sequence into the asset directory."""
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / "assets"
    print(f"Generating placeholder frames in {output_dir}")

    generated = generate_placeholders(output_dir)

    for name, paths in generated.items():
        print(f"  - {name}: {len(paths)} frames in {paths[0].parent}")


if __name__ == "__main__":
    main()
