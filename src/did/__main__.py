"""Allow ``python -m did``."""

from did.cli import main

main()
