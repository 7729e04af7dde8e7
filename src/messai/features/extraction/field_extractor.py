"""
Single-field extraction against the pattern catalog.

Patterns are tried in catalog order and the first one that matches
anywhere in the text wins. LIST fields are the exception: they gather
every match of every pattern.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from .models import Measurement
from .patterns import FieldKind, FieldPattern, FieldSpec, TextStyle, get_field_spec
from .units import normalize

logger = logging.getLogger(__name__)

FieldValue = Union[Measurement, float, str, Tuple[str, ...]]

_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"[\s-]+")


def _parse_number(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def _group(match: re.Match, index: int) -> Optional[str]:
    if match.re.groups < index:
        return None
    return match.group(index)


def canonicalize_text(raw: str, spec: FieldSpec) -> str:
    """Apply the field's text style, then its token map."""
    text = _WHITESPACE.sub(" ", raw.strip())
    style = spec.canonical
    if style is TextStyle.LOWER:
        text = text.lower()
    elif style is TextStyle.HYPHEN:
        text = _HYPHENS.sub("-", text.lower())
    elif style is TextStyle.SPECIES:
        words = text.split(" ")
        head = words[0]
        text = " ".join([head[:1].upper() + head[1:].lower()] + [w.lower() for w in words[1:]])
    return spec.token_map.get(text.lower(), text)


def _measurement_from_match(match: re.Match, pattern: FieldPattern,
                            spec: FieldSpec) -> Optional[Union[Measurement, str]]:
    if pattern.token is not None:
        return pattern.token

    if match.re.groups >= 1:
        value = _parse_number(match.group(1))
        if value is None:
            logger.debug(f"Discarding unparsable value {match.group(1)!r} for {spec.name}")
            return None
    elif pattern.default_value is not None:
        value = float(pattern.default_value)
    else:
        return None

    unit = _group(match, 2) or pattern.default_unit or spec.default_unit
    conditions = _group(match, 3) or pattern.conditions
    if conditions:
        conditions = _WHITESPACE.sub(" ", conditions.strip()).lower()

    if spec.quantity is not None:
        value, unit = normalize(value, unit, spec.quantity)

    return Measurement(value=value, unit=unit or "", conditions=conditions)


def _number_from_match(match: re.Match, pattern: FieldPattern, spec: FieldSpec) -> Optional[float]:
    if match.re.groups >= 1:
        value = _parse_number(match.group(1))
        if value is None:
            logger.debug(f"Discarding unparsable value {match.group(1)!r} for {spec.name}")
        return value
    if pattern.default_value is not None:
        return float(pattern.default_value)
    return None


def _text_from_match(match: re.Match, pattern: FieldPattern, spec: FieldSpec) -> Optional[str]:
    if pattern.token is not None:
        return pattern.token
    raw = _group(match, 1) or match.group(0)
    text = canonicalize_text(raw, spec)
    return text or None


def _value_from_match(match: re.Match, pattern: FieldPattern, spec: FieldSpec):
    if spec.kind is FieldKind.MEASUREMENT:
        return _measurement_from_match(match, pattern, spec)
    if spec.kind is FieldKind.NUMBER:
        return _number_from_match(match, pattern, spec)
    return _text_from_match(match, pattern, spec)


def _first_match(text: str, spec: FieldSpec) -> Optional[FieldValue]:
    for index, pattern in enumerate(spec.patterns):
        for match in pattern.compiled.finditer(text):
            value = _value_from_match(match, pattern, spec)
            if value is not None:
                logger.debug(f"{spec.name}: pattern {index} matched {match.group(0)!r}")
                return value
    return None


def _all_matches(text: str, spec: FieldSpec, max_items: Optional[int]) -> Optional[Tuple[str, ...]]:
    found: List[Tuple[int, str]] = []
    for pattern in spec.patterns:
        for match in pattern.compiled.finditer(text):
            value = _text_from_match(match, pattern, spec)
            if value:
                found.append((match.start(), value))

    # Order of first appearance in the text, case-insensitive de-duplication
    seen = set()
    values: List[str] = []
    for _, value in sorted(found, key=lambda item: item[0]):
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        values.append(value)

    if max_items is not None:
        values = values[:max_items]
    return tuple(values) or None


def extract_field(text: str, field_name: str,
                  max_list_items: Optional[int] = None) -> Optional[FieldValue]:
    """
    Extract one field from a block of text.

    Args:
        text: Text to search (title and abstract joined)
        field_name: Catalog field name, camelCase or snake_case
        max_list_items: Cap on LIST field length; None keeps every match

    Returns:
        Measurement, float, str or tuple of str; None when nothing matched

    Raises:
        UnknownFieldError: If the field is not in the catalog
    """
    spec = get_field_spec(field_name)
    if not text:
        return None
    if spec.kind is FieldKind.LIST:
        return _all_matches(text, spec, max_list_items)
    return _first_match(text, spec)
