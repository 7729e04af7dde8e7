"""
Result data models for parameter extraction.

An ExtractedParameterSet groups the values found in one paper into seven
fixed categories. Every field is optional: a field that was not found is
None and is dropped from the serialized form, and a category with no
fields is dropped as a whole.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class Measurement(BaseModel):
    """A numeric value in its canonical unit."""

    value: float = Field(..., description="Numeric value after unit normalization")
    unit: str = Field(..., description="Canonical unit label")
    conditions: Optional[str] = Field(None, description="Qualifier such as 'maximum'")

    model_config = ConfigDict(frozen=True, extra="ignore")


class CategoryModel(BaseModel):
    """Base for the per-category models; attributes snake_case, JSON camelCase."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class EnvironmentalConditions(CategoryModel):
    temperature: Optional[Measurement] = None
    ph: Optional[float] = Field(None, alias="pH")
    duration: Optional[Measurement] = None
    substrate: Optional[str] = None
    substrate_concentration: Optional[Measurement] = None


class ReactorConfiguration(CategoryModel):
    system_type: Optional[str] = None
    design: Optional[str] = None
    volume: Optional[Measurement] = None
    flow_rate: Optional[Measurement] = None


class ElectrodeSpecifications(CategoryModel):
    anode_materials: Optional[Tuple[str, ...]] = None
    cathode_materials: Optional[Tuple[str, ...]] = None
    anode_area: Optional[Measurement] = None
    cathode_area: Optional[Measurement] = None
    spacing: Optional[Measurement] = None
    modifications: Optional[Tuple[str, ...]] = None


class BiologicalParameters(CategoryModel):
    organisms: Optional[Tuple[str, ...]] = None
    inoculum_source: Optional[str] = None
    # Either a duration or a qualitative stage such as "mature"
    biofilm_age: Optional[Union[Measurement, str]] = None
    biofilm_thickness: Optional[Measurement] = None


class PerformanceMetrics(CategoryModel):
    power_density: Optional[Measurement] = None
    volumetric_power_density: Optional[Measurement] = None
    current_density: Optional[Measurement] = None
    voltage: Optional[Measurement] = None
    coulombic_efficiency: Optional[Measurement] = None
    energy_efficiency: Optional[Measurement] = None
    voltage_efficiency: Optional[Measurement] = None
    cod_removal: Optional[Measurement] = None
    hydrogen_production_rate: Optional[Measurement] = None


class OperationalParameters(CategoryModel):
    external_resistance: Optional[Measurement] = None
    hrt: Optional[Measurement] = None
    olr: Optional[Measurement] = None
    feeding_mode: Optional[str] = None


class ElectrochemicalData(CategoryModel):
    internal_resistance: Optional[Measurement] = None
    charge_transfer_resistance: Optional[Measurement] = None
    voltammetry_types: Optional[Tuple[str, ...]] = None
    scan_rate: Optional[Measurement] = None
    impedance_spectroscopy: Optional[str] = None


CATEGORY_MODELS = {
    "environmental": EnvironmentalConditions,
    "reactorConfiguration": ReactorConfiguration,
    "electrodeSpecifications": ElectrodeSpecifications,
    "biologicalParameters": BiologicalParameters,
    "performanceMetrics": PerformanceMetrics,
    "operationalParameters": OperationalParameters,
    "electrochemicalData": ElectrochemicalData,
}


class ExtractedParameterSet(BaseModel):
    """All parameters extracted from a single paper."""

    environmental: Optional[EnvironmentalConditions] = None
    reactor_configuration: Optional[ReactorConfiguration] = None
    electrode_specifications: Optional[ElectrodeSpecifications] = None
    biological_parameters: Optional[BiologicalParameters] = None
    performance_metrics: Optional[PerformanceMetrics] = None
    operational_parameters: Optional[OperationalParameters] = None
    electrochemical_data: Optional[ElectrochemicalData] = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting absent fields and categories."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def populated_categories(self) -> List[str]:
        return list(self.to_dict().keys())

    def is_empty(self) -> bool:
        return not self.populated_categories()

    def get(self, path: str) -> Any:
        """
        Look up a value by dotted camelCase path, e.g. 'performanceMetrics.powerDensity'.

        Returns None when any segment is absent.
        """
        current: Any = self.to_dict()
        for segment in path.split("."):
            if not isinstance(current, dict) or segment not in current:
                return None
            current = current[segment]
        return current

    @classmethod
    def from_dict(cls, data: Any) -> "ExtractedParameterSet":
        """
        Rebuild a parameter set from stored JSON data.

        Unknown keys are ignored and a malformed category is dropped rather
        than failing the whole record.
        """
        if not isinstance(data, dict):
            return cls()

        categories: Dict[str, Any] = {}
        for name, model in CATEGORY_MODELS.items():
            raw = data.get(name)
            if not isinstance(raw, dict):
                continue
            try:
                categories[name] = model.model_validate(raw)
            except ValidationError as e:
                logger.debug(f"Dropping malformed category '{name}': {e}")
        return cls.model_validate(categories)
