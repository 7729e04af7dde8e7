import unittest

from messai.features.extraction.paper_extractor import extract
from messai.features.paperqual.config import ValidationConfig
from messai.features.paperqual.validation import (
    RANGE_RULES,
    optimal_temperature,
    range_severity,
    validate,
)


def measure(value, unit):
    return {"value": value, "unit": unit}


def complete_record(**performance):
    """A self-consistent record with every critical parameter present."""
    metrics = {
        "voltage": measure(500, "mV"),
        "currentDensity": measure(1000, "mA/m²"),
        "powerDensity": measure(500, "mW/m²"),
    }
    metrics.update(performance)
    return {
        "environmental": {"temperature": measure(30, "°C"), "pH": 7.0},
        "reactorConfiguration": {"volume": measure(250, "mL")},
        "electrodeSpecifications": {"anodeMaterials": ["carbon cloth"], "anodeArea": measure(100, "cm²")},
        "biologicalParameters": {"organisms": ["Geobacter sulfurreducens"]},
        "operationalParameters": {"externalResistance": measure(50, "Ω")},
        "performanceMetrics": metrics,
    }


class TestRanges(unittest.TestCase):

    def test_severity_grades(self):
        rule = RANGE_RULES["environmental.pH"]
        self.assertEqual(range_severity(16, rule), "minor")
        self.assertEqual(range_severity(20, rule), "major")
        self.assertEqual(range_severity(25, rule), "critical")

    def test_critical_violation_makes_invalid(self):
        record = complete_record()
        record["environmental"]["temperature"] = measure(200, "°C")
        result = validate(record)

        self.assertFalse(result.is_valid)
        violation = result.violations[0]
        self.assertEqual(violation.type, "range")
        self.assertEqual(violation.severity, "critical")
        self.assertEqual(violation.parameter, "environmental.temperature")
        self.assertEqual(violation.expected_range, "4-80 °C")

    def test_minor_violation_still_valid(self):
        record = complete_record()
        record["environmental"]["pH"] = 13.0
        result = validate(record)
        self.assertTrue(result.is_valid)
        self.assertEqual([v.severity for v in result.violations], ["minor"])
        self.assertAlmostEqual(result.consistency_score, 0.9)
        self.assertEqual(result.physical_plausibility, 1.0)


class TestRelationships(unittest.TestCase):

    def test_consistent_record_passes(self):
        result = validate(complete_record())
        self.assertEqual(result.violations, [])
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.confidence_score, 1.0)

    def test_skipped_when_inputs_missing(self):
        record = {
            "performanceMetrics": {"voltage": measure(100, "mV"), "powerDensity": measure(40000, "mW/m²")},
        }
        result = validate(record)
        self.assertEqual([v for v in result.violations if v.type == "relationship"], [])

    def test_ohms_law_violation(self):
        record = complete_record()
        record["operationalParameters"]["externalResistance"] = measure(500, "Ω")
        result = validate(record)

        self.assertEqual([v.parameter for v in result.violations], ["ohms_law"])
        self.assertEqual(result.violations[0].severity, "major")
        self.assertTrue(result.is_valid)
        self.assertAlmostEqual(result.physical_plausibility, 0.8)
        self.assertAlmostEqual(result.consistency_score, 0.8)

    def test_power_relationship_violation(self):
        result = validate(complete_record(powerDensity=measure(2000, "mW/m²")))
        self.assertIn("power_relationship", [v.parameter for v in result.violations])

    def test_efficiency_relationship(self):
        ok = complete_record(
            coulombicEfficiency=measure(80, "%"),
            voltageEfficiency=measure(50, "%"),
            energyEfficiency=measure(40, "%"),
        )
        self.assertNotIn("efficiency_relationship", [v.parameter for v in validate(ok).violations])

        bad = complete_record(
            coulombicEfficiency=measure(80, "%"),
            voltageEfficiency=measure(50, "%"),
            energyEfficiency=measure(10, "%"),
        )
        self.assertIn("efficiency_relationship", [v.parameter for v in validate(bad).violations])

    def test_biofilm_spacing(self):
        record = complete_record()
        record["biologicalParameters"]["biofilmThickness"] = measure(600, "μm")
        record["electrodeSpecifications"]["spacing"] = measure(1, "mm")
        self.assertIn("biofilm_electrode_relationship", [v.parameter for v in validate(record).violations])

    def test_temperature_organism_compatibility(self):
        record = complete_record()
        record["environmental"]["temperature"] = measure(60, "°C")
        params = [v.parameter for v in validate(record).violations]
        self.assertIn("temperature_organism_compatibility", params)

        record["biologicalParameters"]["organisms"] = ["Geobacter sulfurreducens", "Thermincola ferriacetica"]
        params = [v.parameter for v in validate(record).violations]
        self.assertNotIn("temperature_organism_compatibility", params)

    def test_unknown_organism_uses_mesophilic_range(self):
        record = complete_record()
        record["biologicalParameters"]["organisms"] = ["mixed culture"]
        record["environmental"]["temperature"] = measure(50, "°C")
        self.assertIn("temperature_organism_compatibility", [v.parameter for v in validate(record).violations])

    def test_organism_lookup(self):
        self.assertEqual(optimal_temperature("Geobacter sulfurreducens"), 30.0)
        self.assertEqual(optimal_temperature("G. sulfurreducens"), 30.0)
        self.assertEqual(optimal_temperature("E. coli"), 37.0)
        self.assertIsNone(optimal_temperature("mixed culture"))


class TestWarnings(unittest.TestCase):

    def test_empty_record_lists_missing_parameters(self):
        result = validate({})
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 6)
        self.assertTrue(all(w.type == "missing" and w.impact == "high" for w in result.warnings))
        self.assertEqual(
            result.recommendations[0],
            "Measure and report reactorConfiguration.volume for better data quality",
        )
        self.assertAlmostEqual(result.consistency_score, 0.1)
        self.assertAlmostEqual(result.confidence_score, 0.55)

    def test_unusual_combinations(self):
        record = complete_record()
        del record["performanceMetrics"]["currentDensity"]
        record["performanceMetrics"]["powerDensity"] = measure(6000, "mW/m²")
        record["performanceMetrics"]["voltage"] = measure(200, "mV")
        record["performanceMetrics"]["coulombicEfficiency"] = measure(95, "%")
        messages = [w.message for w in validate(record).warnings if w.type == "unusual"]
        self.assertEqual(messages, [
            "High power density with low voltage is unusual - check current density",
            "Very high efficiency values should be verified carefully",
        ])

    def test_extreme_temperature(self):
        record = complete_record()
        record["environmental"]["temperature"] = measure(5, "°C")
        record["biologicalParameters"]["organisms"] = ["Rhodoferax ferrireducens"]
        warnings = validate(record).warnings
        self.assertEqual(
            [w.message for w in warnings],
            ["Extreme temperature conditions may limit practical applicability"],
        )


class TestValidateInputs(unittest.TestCase):

    def test_accepts_extracted_parameter_set(self):
        result = validate(extract(
            "Power density of 1500 mW/m² was achieved at pH 7.0 and 30°C using "
            "Geobacter sulfurreducens on carbon cloth anodes."
        ))
        self.assertTrue(result.is_valid)
        self.assertEqual(result.violations, [])
        missing = [w.parameter for w in result.warnings]
        self.assertEqual(missing, ["reactorConfiguration.volume", "performanceMetrics.voltage"])

    def test_bare_numbers_and_none(self):
        self.assertEqual(validate({"environmental": {"pH": 1.0}}).violations[0].parameter, "environmental.pH")
        self.assertEqual(len(validate(None).warnings), 6)

    def test_custom_penalties(self):
        config = ValidationConfig(warning_penalties={"high": 0.0, "medium": 0.0, "low": 0.0})
        self.assertEqual(validate({}, config).consistency_score, 1.0)

    def test_to_dict(self):
        data = validate({"environmental": {"pH": 1.0}}).to_dict()
        self.assertEqual(data["violations"][0]["severity"], "minor")
        self.assertIn("recommendations", data)
        self.assertIn("physical_plausibility", data)


if __name__ == '__main__':
    unittest.main()
