"""
Unit normalization for extracted physical quantities.

Every numeric value the extractor emits is converted to one canonical unit
per quantity kind (power density always in mW/m², temperature always in °C,
and so on). Unit spellings found in abstracts vary wildly ("mW m-2",
"uW/cm2", "kohm", "degrees C"), so spellings are canonicalized before the
conversion table is consulted.

An unrecognized unit is not an error: the value is passed through unchanged
with its original unit label.
"""

import logging
import re
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, TypeVar, Union

logger = logging.getLogger(__name__)


class QuantityKind(str, Enum):
    """Physical quantities the extractor knows how to normalize."""
    POWER_DENSITY = "power_density"
    CURRENT_DENSITY = "current_density"
    VOLTAGE = "voltage"
    VOLUME = "volume"
    AREA = "area"
    RESISTANCE = "resistance"
    TEMPERATURE = "temperature"
    LENGTH = "length"
    THICKNESS = "thickness"
    TIME = "time"
    PERCENT = "percent"
    VOLUMETRIC_POWER = "volumetric_power"
    FLOW_RATE = "flow_rate"
    CONCENTRATION = "concentration"
    LOADING_RATE = "loading_rate"
    SCAN_RATE = "scan_rate"
    PRODUCTION_RATE = "production_rate"


class NormalizedValue(NamedTuple):
    """A value expressed in its canonical unit."""
    value: float
    unit: str


CANONICAL_UNITS: Dict[QuantityKind, str] = {
    QuantityKind.POWER_DENSITY: "mW/m²",
    QuantityKind.CURRENT_DENSITY: "mA/m²",
    QuantityKind.VOLTAGE: "mV",
    QuantityKind.VOLUME: "mL",
    QuantityKind.AREA: "cm²",
    QuantityKind.RESISTANCE: "Ω",
    QuantityKind.TEMPERATURE: "°C",
    QuantityKind.LENGTH: "mm",
    QuantityKind.THICKNESS: "μm",
    QuantityKind.TIME: "h",
    QuantityKind.PERCENT: "%",
    QuantityKind.VOLUMETRIC_POWER: "W/m³",
    QuantityKind.FLOW_RATE: "mL/min",
    QuantityKind.CONCENTRATION: "g/L",
    QuantityKind.LOADING_RATE: "g/L/d",
    QuantityKind.SCAN_RATE: "mV/s",
    QuantityKind.PRODUCTION_RATE: "mL/L/d",
}

# Multiplicative factors into the canonical unit, keyed by canonical spelling.
# The μW/cm² and μA/cm² factors are kept at 0.1 to stay consistent with the
# values already stored in the paper catalog.
LINEAR_FACTORS: Dict[QuantityKind, Dict[str, float]] = {
    QuantityKind.POWER_DENSITY: {
        "mW/m²": 1.0,
        "W/m²": 1000.0,
        "μW/cm²": 0.1,
        "mW/cm²": 10000.0,
        "W/cm²": 10000000.0,
        "μW/m²": 0.001,
    },
    QuantityKind.CURRENT_DENSITY: {
        "mA/m²": 1.0,
        "A/m²": 1000.0,
        "μA/cm²": 0.1,
        "mA/cm²": 10000.0,
        "A/cm²": 10000000.0,
        "μA/m²": 0.001,
    },
    QuantityKind.VOLTAGE: {
        "mV": 1.0,
        "V": 1000.0,
        "μV": 0.001,
    },
    QuantityKind.VOLUME: {
        "mL": 1.0,
        "L": 1000.0,
        "cm³": 1.0,
        "μL": 0.001,
        "m³": 1000000.0,
    },
    QuantityKind.AREA: {
        "cm²": 1.0,
        "m²": 10000.0,
        "mm²": 0.01,
    },
    QuantityKind.RESISTANCE: {
        "Ω": 1.0,
        "kΩ": 1000.0,
        "mΩ": 0.001,
        "MΩ": 1000000.0,
    },
    QuantityKind.LENGTH: {
        "mm": 1.0,
        "cm": 10.0,
        "m": 1000.0,
        "μm": 0.001,
    },
    QuantityKind.THICKNESS: {
        "μm": 1.0,
        "nm": 0.001,
        "mm": 1000.0,
        "cm": 10000.0,
    },
    QuantityKind.TIME: {
        "h": 1.0,
        "min": 1.0 / 60.0,
        "s": 1.0 / 3600.0,
        "d": 24.0,
        "week": 168.0,
        "month": 720.0,
    },
    QuantityKind.PERCENT: {
        "%": 1.0,
    },
    QuantityKind.VOLUMETRIC_POWER: {
        "W/m³": 1.0,
        "mW/m³": 0.001,
        "W/L": 1000.0,
        "mW/L": 1.0,
    },
    QuantityKind.FLOW_RATE: {
        "mL/min": 1.0,
        "mL/h": 1.0 / 60.0,
        "L/h": 1000.0 / 60.0,
        "L/d": 1000.0 / 1440.0,
        "mL/d": 1.0 / 1440.0,
        "L/min": 1000.0,
    },
    QuantityKind.CONCENTRATION: {
        "g/L": 1.0,
        "mg/L": 0.001,
        "kg/m³": 1.0,
    },
    QuantityKind.LOADING_RATE: {
        "g/L/d": 1.0,
        "kg/L/d": 1000.0,
        "mg/L/d": 0.001,
        "kg/m³/d": 1.0,
        "g/m³/d": 0.001,
        "mg/m³/d": 0.000001,
    },
    QuantityKind.SCAN_RATE: {
        "mV/s": 1.0,
        "V/s": 1000.0,
    },
    QuantityKind.PRODUCTION_RATE: {
        "mL/L/d": 1.0,
        "L/L/d": 1000.0,
        "m³/L/d": 1000000.0,
        "mL/m³/d": 0.001,
        "L/m³/d": 1.0,
        "m³/m³/d": 1000.0,
    },
}

TEMPERATURE_CONVERTERS: Dict[str, Callable[[float], float]] = {
    "°C": lambda value: value,
    "K": lambda value: value - 273.15,
    "°F": lambda value: (value - 32.0) * 5.0 / 9.0,
}

# Whole-unit aliases, matched case-insensitively after symbol cleanup
UNIT_ALIASES: Dict[str, str] = {
    "c": "°C",
    "celsius": "°C",
    "centigrade": "°C",
    "degc": "°C",
    "degreec": "°C",
    "degreesc": "°C",
    "degreecelsius": "°C",
    "degreescelsius": "°C",
    "kelvin": "K",
    "fahrenheit": "°F",
    "degf": "°F",
    "degreef": "°F",
    "degreesf": "°F",
    "degreefahrenheit": "°F",
    "degreesfahrenheit": "°F",
    "ml": "mL",
    "milliliter": "mL",
    "milliliters": "mL",
    "millilitre": "mL",
    "millilitres": "mL",
    "liter": "L",
    "liters": "L",
    "litre": "L",
    "litres": "L",
    "micron": "μm",
    "microns": "μm",
    "micrometer": "μm",
    "micrometers": "μm",
    "hour": "h",
    "hours": "h",
    "hr": "h",
    "hrs": "h",
    "minute": "min",
    "minutes": "min",
    "mins": "min",
    "second": "s",
    "seconds": "s",
    "day": "d",
    "days": "d",
    "week": "week",
    "weeks": "week",
    "wk": "week",
    "wks": "week",
    "month": "month",
    "months": "month",
    "mo": "month",
    "percent": "%",
}

_MICRO_PREFIX = re.compile(r"(?<![A-Za-z])u(?=[WAVLmgSsΩwavl])")
_OHM_WORD = re.compile(r"ohms?\b", re.IGNORECASE)
_DEGREE_C = re.compile(r"[°º]\s*C\b|℃", re.IGNORECASE)
_DEGREE_F = re.compile(r"[°º]\s*F\b", re.IGNORECASE)
_NEG_SQUARE = re.compile(r"\s*\b(c?m|mm)\s*\^?\s*[-−]\s*2\b")
_NEG_CUBE = re.compile(r"\s*\b(c?m|mm)\s*\^?\s*[-−]\s*3\b")
_NEG_FIRST = re.compile(r"\s+([A-Za-zμ]+)\s*\^?\s*[-−]\s*1\b")
_POS_SQUARE = re.compile(r"\b(c?m|mm)\s*\^?\s*2(?!\d)")
_POS_CUBE = re.compile(r"\b(c?m|mm)\s*\^?\s*3(?!\d)")
_DAY_SUFFIX = re.compile(r"/\s*days?\b", re.IGNORECASE)
_PRODUCT_SEPARATOR = re.compile(r"\s*[·⋅•]\s*")
_SUBSTANCE_TAGS = re.compile(r"(?:\b|(?<=[gL3³]))(?:COD|H2|H₂)\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def canonical_spelling(unit: Optional[str]) -> str:
    """
    Rewrite a unit string into the spelling used by the conversion tables.

    Args:
        unit: Unit text as captured from an abstract

    Returns:
        Canonically spelled unit (may still be unknown to the tables)
    """
    if not unit:
        return ""

    spelled = unit.strip()
    spelled = spelled.replace("µ", "μ").replace("\u2126", "Ω").replace("㎡", "m²")
    spelled = _MICRO_PREFIX.sub("μ", spelled)
    spelled = _DEGREE_C.sub("°C", spelled)
    spelled = _DEGREE_F.sub("°F", spelled)
    spelled = _OHM_WORD.sub("Ω", spelled)
    spelled = _SUBSTANCE_TAGS.sub("", spelled)

    # Negative exponents: "mW m-2" -> "mW/m²", "mL L-1 d-1" -> "mL/L/d"
    spelled = _NEG_SQUARE.sub(r"/\1²", spelled)
    spelled = _NEG_CUBE.sub(r"/\1³", spelled)
    spelled = _NEG_FIRST.sub(r"/\1", spelled)

    spelled = _POS_SQUARE.sub(r"\1²", spelled)
    spelled = _POS_CUBE.sub(r"\1³", spelled)
    spelled = _PRODUCT_SEPARATOR.sub("/", spelled)
    spelled = _DAY_SUFFIX.sub("/d", spelled)
    spelled = _WHITESPACE.sub("", spelled)
    spelled = spelled.replace("//", "/")

    return UNIT_ALIASES.get(spelled.lower(), spelled)


T = TypeVar("T")


def _lookup(table: Dict[str, T], spelled: str) -> Optional[T]:
    """Exact lookup first, then case-insensitive (first entry wins)."""
    if spelled in table:
        return table[spelled]
    lowered = spelled.lower()
    for key, entry in table.items():
        if key.lower() == lowered:
            return entry
    return None


def _round(value: float) -> float:
    """Trim binary floating point noise introduced by the conversion factors."""
    return float(f"{value:.10g}")


def canonical_unit(quantity: Union[QuantityKind, str]) -> str:
    """Return the canonical unit for a quantity kind."""
    return CANONICAL_UNITS[QuantityKind(quantity)]


def is_known_unit(unit: str, quantity: Union[QuantityKind, str]) -> bool:
    """Check whether a unit spelling converts for the given quantity."""
    quantity = QuantityKind(quantity)
    spelled = canonical_spelling(unit)
    if quantity is QuantityKind.TEMPERATURE:
        return _lookup(TEMPERATURE_CONVERTERS, spelled) is not None
    return _lookup(LINEAR_FACTORS[quantity], spelled) is not None


def normalize(value: float, source_unit: Optional[str],
              quantity: Union[QuantityKind, str]) -> NormalizedValue:
    """
    Convert a value to the canonical unit of its quantity kind.

    Args:
        value: Numeric value as read from text
        source_unit: Unit text as read from text
        quantity: Quantity kind deciding the canonical unit

    Returns:
        NormalizedValue in the canonical unit, or the untouched value and
        original unit label when the unit is not recognized
    """
    quantity = QuantityKind(quantity)
    spelled = canonical_spelling(source_unit)

    if quantity is QuantityKind.TEMPERATURE:
        converter = _lookup(TEMPERATURE_CONVERTERS, spelled)
        if converter is not None:
            return NormalizedValue(_round(converter(value)), CANONICAL_UNITS[quantity])
    else:
        factor = _lookup(LINEAR_FACTORS[quantity], spelled)
        if factor is not None:
            return NormalizedValue(_round(value * factor), CANONICAL_UNITS[quantity])

    logger.debug(f"Unrecognized unit '{source_unit}' for {quantity.value}; keeping value as-is")
    return NormalizedValue(value, source_unit or "")
