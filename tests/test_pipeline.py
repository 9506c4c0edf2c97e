#!/usr/bin/env python3
"""
End-to-end tests for the estimate pipeline.
"""

import json
import unittest
from decimal import Decimal

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from estimate_parser.config import PipelineConfig
from estimate_parser.models import CatalogMaterial, LineItem
from estimate_parser.pipeline import EstimatePipeline, build_estimate, calculate_total_price


class TestEstimatePipeline(unittest.TestCase):
    """Test cases for the EstimatePipeline."""

    def setUp(self):
        """Set up test fixtures."""
        self.pipeline = EstimatePipeline()
        self.sod = CatalogMaterial(id="m1", description="Sod installation", unit_price=60.0)
        self.mulch = CatalogMaterial(id="m2", description="Mulch", unit_price=40.0)

    def assertConsistent(self, result):
        self.assertGreaterEqual(len(result.line_items), 1)
        self.assertAlmostEqual(result.total_price, sum(item.total for item in result.line_items))

    def test_structured_response_uses_catalog_price(self):
        raw = '[{"description":"Sod installation","quantity":2,"unitPrice":50}]'
        result = self.pipeline.build_estimate(raw, [self.sod])

        self.assertEqual(len(result.line_items), 1)
        item = result.line_items[0]
        self.assertEqual(item.description, "Sod installation")
        self.assertEqual(item.quantity, 2.0)
        self.assertEqual(item.unit_price, 60.0)
        self.assertEqual(item.total, 120.0)
        self.assertEqual(result.total_price, 120.0)

    def test_empty_response_gives_default_item(self):
        result = self.pipeline.build_estimate("", [])
        self.assertEqual(len(result.line_items), 1)
        item = result.line_items[0]
        self.assertEqual(item.description, "Basic Landscape Service")
        self.assertEqual(item.total, 100.0)
        self.assertEqual(item.notes, "Default item due to empty AI response")
        self.assertEqual(result.total_price, 100.0)

    def test_empty_response_still_lists_saved_materials(self):
        result = self.pipeline.build_estimate("  ", [self.mulch])
        self.assertEqual([item.description for item in result.line_items],
                         ["Basic Landscape Service", "Mulch"])
        self.assertEqual(result.total_price, 140.0)

    def test_simple_text_lines(self):
        result = self.pipeline.build_estimate("Trim hedges: $45\nMow lawn: $30", [])
        self.assertEqual([item.total for item in result.line_items], [45.0, 30.0])
        self.assertEqual([item.quantity for item in result.line_items], [1.0, 1.0])
        self.assertEqual(result.total_price, 75.0)

    def test_missing_catalog_material_is_appended_once(self):
        raw = '[{"description": "Trim hedges", "quantity": 1, "unitPrice": 45}]'
        result = self.pipeline.build_estimate(raw, [self.mulch])

        added = [item for item in result.line_items if item.notes == "Added from saved materials"]
        self.assertEqual(len(added), 1)
        self.assertEqual(added[0].description, "Mulch")
        self.assertEqual(added[0].quantity, 1.0)
        self.assertEqual(added[0].total, 40.0)
        self.assertEqual(added[0].matched_material_id, "m2")
        self.assertEqual(result.total_price, 85.0)

    def test_matched_material_is_not_appended_again(self):
        raw = '{"lineItems": [{"description": "Spread mulch", "quantity": 3}]}'
        result = self.pipeline.build_estimate(raw, [self.mulch])
        self.assertEqual(len(result.line_items), 1)
        self.assertEqual(result.line_items[0].total, 120.0)

    def test_substring_check_can_be_disabled(self):
        # "Mulch" is contained in the description but no match was recorded
        class NoMatch:
            def find_match(self, description, catalog):
                return None

        config = PipelineConfig(augment_skips_substring_matches=False)
        pipeline = EstimatePipeline(config)
        pipeline.normalizer.matcher = NoMatch()
        result = pipeline.build_estimate('[{"description": "Mulch beds", "price": 10}]', [self.mulch])
        self.assertEqual(len(result.line_items), 2)

        pipeline = EstimatePipeline()
        pipeline.normalizer.matcher = NoMatch()
        result = pipeline.build_estimate('[{"description": "Mulch beds", "price": 10}]', [self.mulch])
        self.assertEqual(len(result.line_items), 1)

    def test_quantity_line_with_catalog_override_keeps_total_consistent(self):
        result = self.pipeline.build_estimate("Mulch: 3 x $35", [self.mulch])
        item = result.line_items[0]
        self.assertEqual(item.unit_price, 40.0)
        self.assertEqual(item.total, 120.0)

    def test_never_empty_for_degenerate_inputs(self):
        inputs = [
            "",
            "Thanks for reaching out! We'll be in touch.",
            "[]",
            '{"lineItems": []}',
            "{broken json",
            "null",
            "::::",
            "1. 2. 3.",
        ]
        for raw in inputs:
            with self.subTest(raw=raw):
                self.assertConsistent(self.pipeline.build_estimate(raw, [self.sod]))

    def test_non_string_input_is_treated_as_empty(self):
        result = self.pipeline.build_estimate(None, [])
        self.assertEqual(result.line_items[0].description, "Basic Landscape Service")

    def test_stage_errors_fall_through(self):
        def broken(raw):
            raise RuntimeError("boom")

        self.pipeline.stages[1] = ('structured', broken)
        result = self.pipeline.build_estimate("Trim hedges: $45", [])
        self.assertEqual(result.line_items[0].description, "Trim hedges")

    def test_normalizer_failure_gives_default_item(self):
        def broken(raw_items, catalog):
            raise RuntimeError("boom")

        self.pipeline.normalizer.normalize = broken
        result = self.pipeline.build_estimate('[{"description": "Sod"}]', [])
        self.assertEqual(result.line_items[0].notes, "Default item due to empty parsed response")

    def test_catalog_accepts_mappings(self):
        catalog = [{"id": "m9", "description": "Mulch", "unitPrice": "42"}, "garbage"]
        result = build_estimate('[{"description": "mulch", "quantity": 2}]', catalog)
        self.assertEqual(result.line_items[0].unit_price, 42.0)
        self.assertEqual(result.total_price, 84.0)

    def test_decimal_catalog_price_wins(self):
        catalog = [{"id": "m1", "description": "Sod installation", "unitPrice": Decimal("60")}]
        raw = '[{"description":"Sod installation","quantity":2,"unitPrice":50}]'
        result = build_estimate(raw, catalog)

        self.assertEqual(len(result.line_items), 1)
        self.assertEqual(result.line_items[0].unit_price, 60.0)
        self.assertEqual(result.line_items[0].total, 120.0)
        self.assertEqual(result.total_price, 120.0)

    def test_result_serializes(self):
        result = build_estimate('[{"description": "Sod installation", "quantity": 2}]', [self.sod])
        payload = json.loads(json.dumps(result.to_dict()))
        self.assertEqual(payload["totalPrice"], 120.0)
        self.assertEqual(payload["lineItems"][0]["matchedMaterialId"], "m1")
        self.assertEqual(payload["lineItems"][0]["unitPrice"], 60.0)

    def test_calculate_total_price(self):
        items = [
            LineItem(description="A", quantity=1, unit_price=10, total=10),
            LineItem(description="B", quantity=1, unit_price=5, total=float("nan")),
        ]
        self.assertEqual(calculate_total_price(items), 10.0)


if __name__ == '__main__':
    unittest.main()
