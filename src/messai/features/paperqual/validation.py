"""
Cross-parameter validation of extracted MES parameters.

Checks values against physical ranges, checks relationships between
parameters (Ohm's law, P = V x I, efficiency products, biofilm geometry and
organism temperature tolerance), flags missing critical parameters and
unusual combinations, and turns the findings into consistency, plausibility
and confidence scores.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union

from ..extraction.models import ExtractedParameterSet
from .config import ValidationConfig

logger = logging.getLogger(__name__)


class RangeRule(NamedTuple):
    min: float
    max: float
    unit: str


# Values are compared in canonical units
RANGE_RULES: Dict[str, RangeRule] = {
    "environmental.temperature": RangeRule(4, 80, "°C"),
    "environmental.pH": RangeRule(2, 12, ""),
    "reactorConfiguration.volume": RangeRule(10, 5000, "mL"),
    "electrodeSpecifications.anodeArea": RangeRule(0.1, 10000, "cm²"),
    "electrodeSpecifications.spacing": RangeRule(1, 100, "mm"),
    "performanceMetrics.voltage": RangeRule(0, 1500, "mV"),
    "performanceMetrics.currentDensity": RangeRule(0, 100000, "mA/m²"),
    "performanceMetrics.powerDensity": RangeRule(0, 50000, "mW/m²"),
    "performanceMetrics.volumetricPowerDensity": RangeRule(0, 1000, "W/m³"),
    "performanceMetrics.coulombicEfficiency": RangeRule(1, 100, "%"),
    "performanceMetrics.energyEfficiency": RangeRule(1, 50, "%"),
    "performanceMetrics.codRemoval": RangeRule(10, 99, "%"),
    "biologicalParameters.biofilmThickness": RangeRule(1, 1000, "μm"),
    "operationalParameters.externalResistance": RangeRule(1, 100000, "Ω"),
    "electrochemicalData.internalResistance": RangeRule(0.1, 10000, "Ω"),
    "operationalParameters.hrt": RangeRule(0.5, 720, "h"),
}

CRITICAL_PARAMETERS = (
    "reactorConfiguration.volume",
    "performanceMetrics.voltage",
    "performanceMetrics.powerDensity",
    "environmental.temperature",
    "biologicalParameters.organisms",
    "electrodeSpecifications.anodeMaterials",
)

# Optimal growth temperature in °C
ORGANISM_TEMPERATURES: Dict[str, float] = {
    "geobacter sulfurreducens": 30.0,
    "geobacter metallireducens": 30.0,
    "geobacter anodireducens": 30.0,
    "shewanella oneidensis": 30.0,
    "shewanella putrefaciens": 30.0,
    "pseudomonas aeruginosa": 37.0,
    "pseudomonas putida": 30.0,
    "escherichia coli": 37.0,
    "klebsiella pneumoniae": 37.0,
    "clostridium butyricum": 37.0,
    "desulfovibrio desulfuricans": 30.0,
    "rhodoferax ferrireducens": 25.0,
    "rhodopseudomonas palustris": 30.0,
    "saccharomyces cerevisiae": 30.0,
    "thermincola ferriacetica": 60.0,
    "chlorella vulgaris": 25.0,
    "spirulina platensis": 35.0,
}

DEFAULT_TEMPERATURE_RANGE = (15.0, 45.0)


@dataclass
class Violation:
    type: str          # range, units, relationship or physical
    severity: str      # critical, major or minor
    parameter: str
    value: Union[float, str]
    message: str
    expected_range: Optional[str] = None
    relationship: Optional[str] = None


@dataclass
class ValidationWarning:
    type: str          # missing, unusual or incomplete
    parameter: str
    message: str
    impact: str        # high, medium or low


@dataclass
class ValidationResult:
    """Outcome of validating one parameter set."""
    is_valid: bool
    confidence_score: float
    consistency_score: float
    physical_plausibility: float
    violations: List[Violation] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def critical_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == "critical")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _value_at(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return None
        current = current[segment]
    return current


def _number_at(data: Dict[str, Any], path: str) -> Optional[float]:
    """Numeric value at path, accepting bare numbers or {"value": ...} objects."""
    value = _value_at(data, path)
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def _relative_error(observed: float, expected: float) -> float:
    if observed == 0:
        return 0.0 if expected == 0 else math.inf
    return abs(observed - expected) / abs(observed)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, str, dict)) and not value:
        return False
    return True


def range_severity(value: float, rule: RangeRule) -> str:
    """Grade an out-of-range value by its distance from the nearest bound."""
    width = rule.max - rule.min
    deviation = min(abs(value - rule.min), abs(value - rule.max))
    if deviation > width:
        return "critical"
    if deviation > width * 0.5:
        return "major"
    return "minor"


def optimal_temperature(organism: str) -> Optional[float]:
    """Look up an organism's optimal temperature, accepting 'G. sulfurreducens' forms."""
    name = " ".join(organism.lower().split())
    if name in ORGANISM_TEMPERATURES:
        return ORGANISM_TEMPERATURES[name]

    parts = name.split(" ")
    if len(parts) == 2 and parts[0].rstrip(".") and len(parts[0].rstrip(".")) == 1:
        initial, epithet = parts[0][0], parts[1]
        for known, temperature in ORGANISM_TEMPERATURES.items():
            genus, _, known_epithet = known.partition(" ")
            if genus.startswith(initial) and known_epithet == epithet:
                return temperature
    return None


def _temperature_compatible(temperature: float, organisms: Iterable[str], tolerance: float) -> bool:
    low, high = DEFAULT_TEMPERATURE_RANGE
    for organism in organisms:
        optimum = optimal_temperature(str(organism))
        if optimum is None:
            if low <= temperature <= high:
                return True
        elif abs(temperature - optimum) <= tolerance:
            return True
    return False


class ParameterValidator:
    """Applies range, relationship, presence and combination checks."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()
        self._relationships: List[tuple] = [
            ("ohms_law", "V = I × R (Ohm's law)", self._check_ohms_law),
            ("power_relationship", "P = V × I (Power relationship)", self._check_power),
            ("efficiency_relationship",
             "Energy efficiency = Coulombic efficiency × Voltage efficiency", self._check_efficiency),
            ("biofilm_electrode_relationship",
             "Biofilm thickness should be reasonable for electrode spacing", self._check_biofilm),
            ("temperature_organism_compatibility",
             "Operating temperature should be within organism tolerance", self._check_temperature),
        ]

    def validate(self, extracted: Union[ExtractedParameterSet, Dict[str, Any], None]) -> ValidationResult:
        if isinstance(extracted, ExtractedParameterSet):
            data = extracted.to_dict()
        elif isinstance(extracted, dict):
            data = extracted
        else:
            data = {}

        violations = self.check_ranges(data) + self.check_relationships(data)
        missing, recommendations = self.check_critical_parameters(data)
        warnings = missing + self.check_unusual_combinations(data)

        consistency = self.consistency_score(violations, warnings)
        plausibility = self.physical_plausibility(violations)
        result = ValidationResult(
            is_valid=not any(v.severity == "critical" for v in violations),
            confidence_score=(consistency + plausibility) / 2,
            consistency_score=consistency,
            physical_plausibility=plausibility,
            violations=violations,
            warnings=warnings,
            recommendations=recommendations,
        )
        logger.debug(f"Validation: {len(violations)} violations, {len(warnings)} warnings, "
                     f"confidence {result.confidence_score:.2f}")
        return result

    def check_ranges(self, data: Dict[str, Any]) -> List[Violation]:
        violations = []
        for path, rule in RANGE_RULES.items():
            value = _number_at(data, path)
            if value is None or rule.min <= value <= rule.max:
                continue
            expected = f"{rule.min:g}-{rule.max:g} {rule.unit}".rstrip()
            violations.append(Violation(
                type="range",
                severity=range_severity(value, rule),
                parameter=path,
                value=value,
                expected_range=expected,
                message=f"{path} value {value:g} is outside valid range {expected}",
            ))
        return violations

    def check_relationships(self, data: Dict[str, Any]) -> List[Violation]:
        violations = []
        for name, description, check in self._relationships:
            if check(data):
                continue
            violations.append(Violation(
                type="relationship",
                severity="major",
                parameter=name,
                value="relationship_violation",
                relationship=description,
                message=f"Physical relationship violated: {description}",
            ))
        return violations

    def check_critical_parameters(self, data: Dict[str, Any]):
        warnings, recommendations = [], []
        for path in CRITICAL_PARAMETERS:
            if _is_present(_value_at(data, path)):
                continue
            warnings.append(ValidationWarning(
                type="missing",
                parameter=path,
                message=f"Critical parameter {path} is missing",
                impact="high",
            ))
            recommendations.append(f"Measure and report {path} for better data quality")
        return warnings, recommendations

    def check_unusual_combinations(self, data: Dict[str, Any]) -> List[ValidationWarning]:
        power = _number_at(data, "performanceMetrics.powerDensity")
        voltage = _number_at(data, "performanceMetrics.voltage")
        coulombic = _number_at(data, "performanceMetrics.coulombicEfficiency")
        energy = _number_at(data, "performanceMetrics.energyEfficiency")
        temperature = _number_at(data, "environmental.temperature")

        combinations: List[tuple] = [
            (power is not None and voltage is not None and power > 5000 and voltage < 300,
             "High power density with low voltage is unusual - check current density"),
            ((coulombic is not None and coulombic > 90) or (energy is not None and energy > 30),
             "Very high efficiency values should be verified carefully"),
            (temperature is not None and (temperature < 10 or temperature > 60),
             "Extreme temperature conditions may limit practical applicability"),
        ]
        return [
            ValidationWarning(type="unusual", parameter="combination", message=message, impact="medium")
            for triggered, message in combinations if triggered
        ]

    def consistency_score(self, violations: List[Violation], warnings: List[ValidationWarning]) -> float:
        score = 1.0
        for violation in violations:
            score -= self.config.violation_penalties.get(violation.severity, 0.0)
        for warning in warnings:
            score -= self.config.warning_penalties.get(warning.impact, 0.0)
        return max(score, 0.0)

    def physical_plausibility(self, violations: List[Violation]) -> float:
        score = 1.0
        for violation in violations:
            if violation.type not in ("relationship", "physical"):
                continue
            if violation.severity == "critical":
                score -= self.config.critical_plausibility_penalty
            else:
                score -= self.config.plausibility_penalty
        return max(score, 0.0)

    # Relationship checks return True when satisfied or when an input is missing

    def _check_ohms_law(self, data: Dict[str, Any]) -> bool:
        voltage = _number_at(data, "performanceMetrics.voltage")
        current_density = _number_at(data, "performanceMetrics.currentDensity")
        area = _number_at(data, "electrodeSpecifications.anodeArea")
        resistance = _number_at(data, "operationalParameters.externalResistance")
        if None in (voltage, current_density, area, resistance):
            return True

        current_amps = (current_density / 1000) * (area / 10000)
        expected_mv = current_amps * resistance * 1000
        return _relative_error(voltage, expected_mv) < self.config.ohms_law_tolerance

    def _check_power(self, data: Dict[str, Any]) -> bool:
        power = _number_at(data, "performanceMetrics.powerDensity")
        voltage = _number_at(data, "performanceMetrics.voltage")
        current_density = _number_at(data, "performanceMetrics.currentDensity")
        if None in (power, voltage, current_density):
            return True

        # mV x mA/m² gives μW/m²
        expected = voltage * current_density / 1000
        return _relative_error(power, expected) < self.config.power_tolerance

    def _check_efficiency(self, data: Dict[str, Any]) -> bool:
        energy = _number_at(data, "performanceMetrics.energyEfficiency")
        coulombic = _number_at(data, "performanceMetrics.coulombicEfficiency")
        voltage_eff = _number_at(data, "performanceMetrics.voltageEfficiency")
        if None in (energy, coulombic, voltage_eff):
            return True

        expected = coulombic * voltage_eff / 100
        return _relative_error(energy, expected) < self.config.efficiency_tolerance

    def _check_biofilm(self, data: Dict[str, Any]) -> bool:
        thickness = _number_at(data, "biologicalParameters.biofilmThickness")
        spacing = _number_at(data, "electrodeSpecifications.spacing")
        if None in (thickness, spacing):
            return True
        return thickness < spacing * 1000 * self.config.max_biofilm_spacing_ratio

    def _check_temperature(self, data: Dict[str, Any]) -> bool:
        temperature = _number_at(data, "environmental.temperature")
        organisms = _value_at(data, "biologicalParameters.organisms")
        if temperature is None or not organisms:
            return True
        if isinstance(organisms, str):
            organisms = [organisms]
        return _temperature_compatible(temperature, organisms, self.config.organism_temperature_tolerance)


def validate(extracted: Union[ExtractedParameterSet, Dict[str, Any], None],
             config: Optional[ValidationConfig] = None) -> ValidationResult:
    """Validate an extracted parameter set (or its stored dict form)."""
    return ParameterValidator(config).validate(extracted)
