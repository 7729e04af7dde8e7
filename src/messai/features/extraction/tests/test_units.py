import unittest

from messai.features.extraction.units import (
    QuantityKind,
    canonical_spelling,
    canonical_unit,
    is_known_unit,
    normalize,
)


class TestNormalize(unittest.TestCase):

    def test_power_density_conversions(self):
        self.assertEqual(normalize(1.5, "W/m²", QuantityKind.POWER_DENSITY), (1500.0, "mW/m²"))
        self.assertEqual(normalize(250, "μW/cm²", QuantityKind.POWER_DENSITY), (25.0, "mW/m²"))
        self.assertEqual(normalize(2, "mW/cm2", QuantityKind.POWER_DENSITY), (20000.0, "mW/m²"))
        self.assertEqual(normalize(5, "mW m-2", QuantityKind.POWER_DENSITY), (5.0, "mW/m²"))

    def test_micro_prefix_variants(self):
        self.assertEqual(normalize(100, "uW/cm2", QuantityKind.POWER_DENSITY), (10.0, "mW/m²"))
        self.assertEqual(normalize(100, "µA/cm²", QuantityKind.CURRENT_DENSITY), (10.0, "mA/m²"))

    def test_temperature_is_affine(self):
        self.assertEqual(normalize(300, "K", QuantityKind.TEMPERATURE), (26.85, "°C"))
        self.assertEqual(normalize(86, "°F", QuantityKind.TEMPERATURE), (30.0, "°C"))
        self.assertEqual(normalize(30, "degrees C", QuantityKind.TEMPERATURE), (30.0, "°C"))
        self.assertEqual(normalize(30, "℃", QuantityKind.TEMPERATURE), (30.0, "°C"))

    def test_volume_area_and_voltage(self):
        self.assertEqual(normalize(0.5, "L", QuantityKind.VOLUME), (500.0, "mL"))
        self.assertEqual(normalize(28, "cm3", QuantityKind.VOLUME), (28.0, "mL"))
        self.assertEqual(normalize(0.01, "m2", QuantityKind.AREA), (100.0, "cm²"))
        self.assertEqual(normalize(0.6, "V", QuantityKind.VOLTAGE), (600.0, "mV"))

    def test_resistance_spellings(self):
        self.assertEqual(normalize(2, "kohm", QuantityKind.RESISTANCE), (2000.0, "Ω"))
        self.assertEqual(normalize(2, "kΩ", QuantityKind.RESISTANCE), (2000.0, "Ω"))
        self.assertEqual(normalize(500, "mΩ", QuantityKind.RESISTANCE), (0.5, "Ω"))
        self.assertEqual(normalize(1, "MΩ", QuantityKind.RESISTANCE), (1000000.0, "Ω"))

    def test_time_and_rate_units(self):
        self.assertEqual(normalize(3, "days", QuantityKind.TIME), (72.0, "h"))
        self.assertEqual(normalize(10, "mV s-1", QuantityKind.SCAN_RATE), (10.0, "mV/s"))
        self.assertEqual(normalize(2, "kg COD/m3·d", QuantityKind.LOADING_RATE), (2.0, "g/L/d"))
        self.assertEqual(normalize(1.2, "L H2/L/day", QuantityKind.PRODUCTION_RATE), (1200.0, "mL/L/d"))

    def test_unknown_unit_passes_through(self):
        self.assertEqual(normalize(12, "furlongs", QuantityKind.VOLUME), (12, "furlongs"))
        self.assertEqual(normalize(4, None, QuantityKind.VOLTAGE), (4, ""))

    def test_accepts_quantity_name(self):
        self.assertEqual(normalize(1, "A/m2", "current_density"), (1000.0, "mA/m²"))


class TestUnitHelpers(unittest.TestCase):

    def test_canonical_unit(self):
        self.assertEqual(canonical_unit(QuantityKind.POWER_DENSITY), "mW/m²")
        self.assertEqual(canonical_unit("temperature"), "°C")
        self.assertEqual(canonical_unit(QuantityKind.RESISTANCE), "Ω")

    def test_canonical_spelling(self):
        self.assertEqual(canonical_spelling("mW m-2"), "mW/m²")
        self.assertEqual(canonical_spelling("mL L-1 d-1"), "mL/L/d")
        self.assertEqual(canonical_spelling(" hours "), "h")
        self.assertEqual(canonical_spelling(""), "")

    def test_is_known_unit(self):
        self.assertTrue(is_known_unit("W/m2", QuantityKind.POWER_DENSITY))
        self.assertFalse(is_known_unit("W/m2", QuantityKind.VOLUME))
        self.assertTrue(is_known_unit("K", QuantityKind.TEMPERATURE))


if __name__ == '__main__':
    unittest.main()
