from covbadge.cli.exit_codes import (
    EXIT_CANTCREAT,
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_OK,
    EXIT_PARTIAL,
)
from covbadge.cli.root import cli, create_app, main

__all__ = [
    "EXIT_CANTCREAT",
    "EXIT_CONFIG",
    "EXIT_DATAERR",
    "EXIT_GENERIC",
    "EXIT_OK",
    "EXIT_PARTIAL",
    "cli",
    "create_app",
    "main",
]
