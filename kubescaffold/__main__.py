"""Allow ``python -m kubescaffold``."""

from kubescaffold.cli import main

main()
