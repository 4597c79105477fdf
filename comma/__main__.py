"""Entry point for ``python -m comma``."""

from comma.interfaces.cli.app import main

main()
