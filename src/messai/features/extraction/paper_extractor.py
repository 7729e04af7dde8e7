"""
Paper-level parameter extraction.

Runs every catalog field over a paper's title and abstract and assembles
the results into an ExtractedParameterSet. Extraction is stateless: the
same text always yields the same result, and one extractor instance can be
shared across threads.
"""

import json
import logging
from typing import Any, Dict, Optional

from ...core.config import CONFIDENCE_WITH_PERFORMANCE, CONFIDENCE_WITHOUT_PERFORMANCE
from .config import ExtractionConfig
from .field_extractor import extract_field
from .models import CATEGORY_MODELS, ExtractedParameterSet, Measurement
from .patterns import fields_for_category

logger = logging.getLogger(__name__)


class ParameterExtractor:
    """Extracts structured parameters from paper text."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def build_text(self, title: Optional[str], abstract: Optional[str]) -> str:
        """Join title and abstract into the text blob that patterns run against."""
        return f"{title or ''}{self.config.text_separator}{abstract or ''}".strip()

    def extract(self, title: Optional[str], abstract: Optional[str] = None) -> ExtractedParameterSet:
        """
        Extract all parameters from one paper.

        Args:
            title: Paper title
            abstract: Paper abstract; None is treated as empty

        Returns:
            ExtractedParameterSet with only the categories where something was found
        """
        text = self.build_text(title, abstract)
        categories: Dict[str, Any] = {}

        for category in self.config.enabled_categories:
            values: Dict[str, Any] = {}
            for spec in fields_for_category(category):
                value = extract_field(text, spec.name, max_list_items=self.config.max_list_items)
                if value is not None:
                    values[spec.name] = value
            if values:
                categories[category] = CATEGORY_MODELS[category].model_validate(values)

        result = ExtractedParameterSet.model_validate(categories)
        logger.debug(f"Extracted categories: {result.populated_categories()}")
        return result


_default_extractor = ParameterExtractor()


def extract(title: Optional[str], abstract: Optional[str] = None) -> ExtractedParameterSet:
    """Extract parameters with a shared default extractor."""
    return _default_extractor.extract(title, abstract)


def extraction_confidence(result: ExtractedParameterSet) -> float:
    """Confidence stored with a result: higher when performance data was found."""
    if result.performance_metrics is not None:
        return CONFIDENCE_WITH_PERFORMANCE
    return CONFIDENCE_WITHOUT_PERFORMANCE


def _json_list(values) -> Optional[str]:
    if not values:
        return None
    return json.dumps(list(values), ensure_ascii=False)


def _json_category(result: ExtractedParameterSet, category: str) -> Optional[str]:
    data = result.to_dict().get(category)
    if not data:
        return None
    return json.dumps(data, ensure_ascii=False)


def flatten_for_storage(result: ExtractedParameterSet) -> Dict[str, Any]:
    """
    Map an extraction result onto the paper table's columns.

    Every extraction column is present. Values the result does not carry are
    None, so re-extracting a paper clears the scalar columns (power_output,
    efficiency, system_type and the organism and material lists) together
    with the category they came from.
    """
    columns: Dict[str, Any] = {
        "experimental_conditions": _json_category(result, "environmental"),
        "reactor_configuration": _json_category(result, "reactorConfiguration"),
        "electrode_specifications": _json_category(result, "electrodeSpecifications"),
        "biological_parameters": _json_category(result, "biologicalParameters"),
        "performance_metrics": _json_category(result, "performanceMetrics"),
        "operational_parameters": _json_category(result, "operationalParameters"),
        "electrochemical_data": _json_category(result, "electrochemicalData"),
    }

    performance = result.performance_metrics
    power = performance.power_density if performance is not None else None
    efficiency = performance.coulombic_efficiency if performance is not None else None
    reactor = result.reactor_configuration
    biological = result.biological_parameters
    electrodes = result.electrode_specifications

    columns.update({
        "power_output": power.value if isinstance(power, Measurement) else None,
        "efficiency": efficiency.value if isinstance(efficiency, Measurement) else None,
        "system_type": reactor.system_type if reactor is not None else None,
        "organism_types": _json_list(biological.organisms) if biological is not None else None,
        "anode_materials": _json_list(electrodes.anode_materials) if electrodes is not None else None,
        "cathode_materials": _json_list(electrodes.cathode_materials) if electrodes is not None else None,
    })
    return columns
