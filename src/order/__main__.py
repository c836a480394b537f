"""Allow ``python -m order``."""

from order.cli import main

main()
