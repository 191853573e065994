from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("cigate")

logger = logging.getLogger("cigate")

__all__ = ["__version__", "logger"]
