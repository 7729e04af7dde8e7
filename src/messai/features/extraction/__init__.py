"""
Parameter extraction for bioelectrochemical-systems papers.

Turns a paper's title and abstract into structured, unit-normalized
parameters using a catalog of regular-expression patterns.
"""

from .exceptions import (
    ConfigurationError,
    ExtractionError,
    InvalidPatternError,
    PaperNotFoundError,
    PatternLibraryError,
    PersistenceError,
    UnknownFieldError,
)
from .config import ExtractionConfig
from .field_extractor import extract_field
from .models import ExtractedParameterSet, Measurement
from .paper_extractor import ParameterExtractor, extract, flatten_for_storage
from .patterns import CATEGORY_ORDER, PATTERN_LIBRARY, FieldKind, get_field_spec
from .units import NormalizedValue, QuantityKind, canonical_unit, normalize

__all__ = [
    "CATEGORY_ORDER",
    "ConfigurationError",
    "ExtractedParameterSet",
    "ExtractionConfig",
    "ExtractionError",
    "FieldKind",
    "InvalidPatternError",
    "Measurement",
    "NormalizedValue",
    "PATTERN_LIBRARY",
    "PaperNotFoundError",
    "ParameterExtractor",
    "PatternLibraryError",
    "PersistenceError",
    "QuantityKind",
    "UnknownFieldError",
    "canonical_unit",
    "extract",
    "extract_field",
    "flatten_for_storage",
    "get_field_spec",
    "normalize",
]
