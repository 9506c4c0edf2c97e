"""
Maps raw, loosely-named line items onto canonical LineItem records.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .catalog_matcher import CatalogMatcher
from .coercion import coerce_number
from .models import CatalogMaterial, LineItem, RawLineItem

logger = logging.getLogger(__name__)

# Accepted field names, highest priority first
DESCRIPTION_FIELDS = ('description', 'name', 'item')
QUANTITY_FIELDS = ('quantity', 'qty')
UNIT_PRICE_FIELDS = ('unitPrice', 'unit_price', 'price')
TOTAL_FIELDS = ('total',)
NOTES_FIELDS = ('notes', 'note')

UNNAMED_DESCRIPTION = "Unnamed item"


def resolve_field(raw: RawLineItem, names: Iterable[str]) -> Optional[Any]:
    """Return the first value under ``names`` that is present and not blank."""
    for name in names:
        value = raw.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def resolve_number(raw: RawLineItem, names: Iterable[str]) -> Optional[float]:
    """Return the first field under ``names`` that coerces to a non-zero number."""
    for name in names:
        number = coerce_number(raw.get(name), None)
        if number:
            return number
    return None


def format_price(value: float) -> str:
    return f"${value:,.2f}"


class LineItemNormalizer:
    """Builds canonical line items, preferring catalog prices over generated ones."""

    def __init__(self, matcher: Optional[CatalogMatcher] = None):
        self.matcher = matcher or CatalogMatcher()

    def normalize(self, raw_items: Sequence[RawLineItem],
                  catalog: Sequence[CatalogMaterial] = ()) -> List[LineItem]:
        line_items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                logger.debug(f"Skipping non-object line item: {raw!r}")
                continue
            line_items.append(self.normalize_item(raw, catalog))
        return line_items

    def normalize_item(self, raw: RawLineItem,
                       catalog: Sequence[CatalogMaterial] = ()) -> LineItem:
        description = resolve_field(raw, DESCRIPTION_FIELDS)
        description = str(description).strip() if description is not None else UNNAMED_DESCRIPTION

        quantity = resolve_number(raw, QUANTITY_FIELDS)
        if quantity is None or quantity <= 0:
            quantity = 1.0

        material = self.matcher.find_match(description, catalog)

        if material is not None:
            unit_price = material.unit_price
        else:
            unit_price = resolve_number(raw, UNIT_PRICE_FIELDS)
            if unit_price is None or unit_price < 0:
                unit_price = 0.0

        total = resolve_number(raw, TOTAL_FIELDS)
        if total is None:
            total = quantity * unit_price

        notes = resolve_field(raw, NOTES_FIELDS)
        if notes is not None:
            notes = str(notes)
        elif material is not None:
            notes = f"Using saved material price: {format_price(unit_price)}"
        else:
            notes = ""

        return LineItem(
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            total=total,
            notes=notes,
            matched_material_id=material.id if material is not None else None,
        )
