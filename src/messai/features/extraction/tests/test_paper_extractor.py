import json
import unittest

from pydantic import ValidationError

from messai.features.extraction.config import ExtractionConfig
from messai.features.extraction.models import ExtractedParameterSet, Measurement
from messai.features.extraction.paper_extractor import (
    ParameterExtractor,
    extract,
    extraction_confidence,
    flatten_for_storage,
)
from messai.features.extraction.patterns import get_field_spec
from messai.features.extraction.units import canonical_unit
from messai.storage.src.papers.database_repositories import EXTRACTION_COLUMNS

EXAMPLE = ("Power density of 1500 mW/m² was achieved at pH 7.0 and 30°C using "
           "Geobacter sulfurreducens on carbon cloth anodes.")

MIXED_UNITS = ("A 250 mL single-chamber MFC with 0.5 V output produced 120 μW/cm² and 2.3 A/m² "
               "at 35 °C; external resistance of 1 kΩ; anode surface area of 0.002 m2")


class TestParameterExtractor(unittest.TestCase):

    def test_example_sentence(self):
        result = extract(EXAMPLE, None)

        self.assertEqual(result.performance_metrics.power_density, Measurement(value=1500.0, unit="mW/m²"))
        self.assertEqual(result.environmental.ph, 7.0)
        self.assertEqual(result.environmental.temperature, Measurement(value=30.0, unit="°C"))
        self.assertIn("Geobacter sulfurreducens", result.biological_parameters.organisms)
        self.assertEqual(result.electrode_specifications.anode_materials, ("carbon cloth",))

        data = result.to_dict()
        self.assertEqual(data["performanceMetrics"]["powerDensity"], {"value": 1500.0, "unit": "mW/m²"})
        self.assertEqual(data["environmental"]["pH"], 7.0)

    def test_unit_conversion_example(self):
        result = extract("achieved 1.5 W/m²")
        self.assertEqual(result.get("performanceMetrics.powerDensity"), {"value": 1500.0, "unit": "mW/m²"})

    def test_no_match_gives_empty_result(self):
        result = extract("Unrelated topic about birds", None)
        self.assertTrue(result.is_empty())
        self.assertEqual(result.to_dict(), {})
        self.assertEqual(result.populated_categories(), [])

    def test_idempotent(self):
        first = extract(MIXED_UNITS, EXAMPLE)
        second = extract(MIXED_UNITS, EXAMPLE)
        self.assertEqual(first.to_json(), second.to_json())

    def test_every_numeric_leaf_in_canonical_unit(self):
        result = extract(MIXED_UNITS, None)
        data = result.to_dict()
        self.assertEqual(data["performanceMetrics"]["powerDensity"]["value"], 12.0)
        self.assertEqual(data["reactorConfiguration"]["volume"]["value"], 250.0)
        self.assertEqual(data["electrodeSpecifications"]["anodeArea"]["value"], 20.0)

        checked = 0
        for fields in data.values():
            for name, value in fields.items():
                if isinstance(value, dict) and "unit" in value:
                    spec = get_field_spec(name)
                    self.assertEqual(value["unit"], canonical_unit(spec.quantity), name)
                    checked += 1
        self.assertGreaterEqual(checked, 6)

    def test_disabled_categories_are_skipped(self):
        extractor = ParameterExtractor(ExtractionConfig(enabled_categories=["environmental"]))
        result = extractor.extract(EXAMPLE)
        self.assertEqual(result.populated_categories(), ["environmental"])

    def test_config_rejects_unknown_category(self):
        with self.assertRaises(ValidationError):
            ExtractionConfig(enabled_categories=["weather"])


class TestExtractedParameterSet(unittest.TestCase):

    def test_from_dict_is_tolerant(self):
        stored = {
            "performanceMetrics": {"powerDensity": {"value": 10, "unit": "mW/m²"}},
            "environmental": {"temperature": "hot"},
            "somethingElse": 1,
        }
        result = ExtractedParameterSet.from_dict(stored)
        self.assertEqual(result.populated_categories(), ["performanceMetrics"])
        self.assertEqual(ExtractedParameterSet.from_dict("not json").to_dict(), {})

    def test_stored_form_rebuilds_same_result(self):
        result = extract(EXAMPLE)
        self.assertEqual(ExtractedParameterSet.from_dict(json.loads(result.to_json())), result)


class TestFlattenForStorage(unittest.TestCase):

    def test_scalar_columns(self):
        result = extract(EXAMPLE)
        columns = flatten_for_storage(result)

        self.assertEqual(columns["power_output"], 1500.0)
        self.assertEqual(json.loads(columns["organism_types"]), ["Geobacter sulfurreducens"])
        self.assertEqual(json.loads(columns["anode_materials"]), ["carbon cloth"])
        self.assertIsNone(columns["efficiency"])
        self.assertIsNone(columns["system_type"])
        self.assertIsNone(columns["cathode_materials"])
        self.assertEqual(json.loads(columns["experimental_conditions"])["pH"], 7.0)
        self.assertIsNone(columns["electrochemical_data"])

    def test_empty_result_clears_every_column(self):
        columns = flatten_for_storage(extract("Unrelated topic about birds"))
        self.assertEqual(set(columns), set(EXTRACTION_COLUMNS))
        self.assertTrue(all(value is None for value in columns.values()))

    def test_confidence(self):
        self.assertEqual(extraction_confidence(extract(EXAMPLE)), 0.7)
        self.assertEqual(extraction_confidence(extract("single chamber MFC")), 0.5)


if __name__ == '__main__':
    unittest.main()
