import logging
from importlib import import_module
from importlib.metadata import version

__version__ = version("cigate")

logger = logging.getLogger(__name__)

core = import_module("cigate.core")

__all__ = ["__version__", "core", "logger"]
