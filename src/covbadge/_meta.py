from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("covbadge")

logger = logging.getLogger("covbadge")

__all__ = ["__version__", "logger"]
