"""Allow ``python -m arcade_shooter``."""

from arcade_shooter.app.application import main

main()
