"""MESSAI: parameter extraction and quality scoring for bioelectrochemical-systems literature."""

__version__ = "0.1.0"

# Import main modules for easy access
from . import core
from . import features
from . import storage

__all__ = ["core", "features", "storage"]
