#!/usr/bin/env python3
"""
Example usage of the Estimate Response Parser
Runs the pipeline over the kinds of output a model tends to produce.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from estimate_parser import CatalogMaterial, build_estimate


SAVED_MATERIALS = [
    CatalogMaterial(id="m1", description="Sod installation", unit_price=60.0),
    CatalogMaterial(id="m2", description="Hardwood mulch", unit_price=42.0),
    CatalogMaterial(id="m3", description="Landscape fabric", unit_price=0.35),
]

SAMPLE_RESPONSES = {
    "clean JSON": """
    [
      {"description": "Sod installation", "quantity": 12, "unitPrice": 55, "notes": "Back yard"},
      {"description": "Grading and prep", "quantity": 1, "unitPrice": 350}
    ]
    """,
    "JSON in prose": """
    Here is a detailed estimate for the job:
    {"lineItems": [{"name": "Spread hardwood mulch", "qty": 6, "price": 38}]}
    Prices may vary by season.
    """,
    "quantity lines": """
    - Shrubs: 8 x $35 = $280
    - Topsoil: $30 x 4
    """,
    "numbered list": """
    1. Mow and edge lawn: $65
    2. Hedge trimming $120
    """,
    "label and price": "Trim hedges: $45\nMow lawn: $30",
    "prose only": "A full yard refresh would likely take a crew two days.",
    "empty": "",
}


def demonstrate(name: str, raw: str):
    print("=" * 60)
    print(f"RESPONSE: {name}")
    print("=" * 60)

    result = build_estimate(raw, SAVED_MATERIALS)
    for item in result.line_items:
        print(f"  {item.description:<30} {item.quantity:>6g} x ${item.unit_price:>8,.2f}"
              f" = ${item.total:>9,.2f}  {item.notes}")
    print(f"  {'TOTAL':<30} {'':>19} ${result.total_price:>9,.2f}")
    print()
    return result


def main():
    """Run every sample through the pipeline."""
    results = {name: demonstrate(name, raw).to_dict() for name, raw in SAMPLE_RESPONSES.items()}

    print("JSON for the 'clean JSON' sample:")
    print(json.dumps(results["clean JSON"], indent=2))


if __name__ == "__main__":
    main()
