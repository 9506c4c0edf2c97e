"""
Pattern-based line extraction for generator output that is not JSON.
"""

import logging
import re
from typing import List, Optional

from .coercion import coerce_number
from .config import SYNTHETIC_ITEM_DESCRIPTION, SYNTHETIC_ITEM_PRICE
from .models import RawLineItem

logger = logging.getLogger(__name__)

NUMBER = r'\d[\d,]*(?:\.\d+)?'
LIST_MARKER = r'(?:\d+[.)][ \t]+|[-*•][ \t]*)?'


class FreeTextParser:
    """Extracts raw line items from loosely formatted "label: price" text."""

    def __init__(self, synthetic_description: str = SYNTHETIC_ITEM_DESCRIPTION,
                 synthetic_price: float = SYNTHETIC_ITEM_PRICE,
                 excerpt_length: int = 100):
        self.synthetic_description = synthetic_description
        self.synthetic_price = synthetic_price
        self.excerpt_length = excerpt_length

        # "Mulch: $40 x 3 = $120" or "Mulch: 3 x $40"
        self.quantity_price_pattern = re.compile(
            rf'^[ \t]*{LIST_MARKER}([^:\n]+?)[ \t]*:[ \t]*'
            rf'(?:\$[ \t]*({NUMBER})[ \t]*[xX×*][ \t]*({NUMBER})'
            rf'|({NUMBER})[ \t]*[xX×*][ \t]*\$?[ \t]*({NUMBER}))'
            rf'(?:[ \t]*=[ \t]*\$?[ \t]*({NUMBER}))?',
            re.MULTILINE,
        )

        # "1. Mow lawn: $30" or "2) Edge beds $25"
        self.numbered_pattern = re.compile(
            rf'^[ \t]*\d+[.)][ \t]*([^\d\s:$][^:\n$]*?)[ \t]*:?[ \t]*\$[ \t]*({NUMBER})'
            rf'|^[ \t]*\d+[.)][ \t]*([^\d\s:$][^:\n$]*?)[ \t]*:[ \t]*({NUMBER})',
            re.MULTILINE,
        )

        # "Trim hedges: $45"
        self.simple_pattern = re.compile(
            rf'^[ \t]*{LIST_MARKER}([^:\n]+?)[ \t]*:[ \t]*\$?[ \t]*({NUMBER})',
            re.MULTILINE,
        )

        # Summary lines that would double count the estimate
        self.summary_labels = {'total', 'subtotal', 'sub-total', 'grand total', 'estimate total', 'tax'}

        self.strategies = [
            ('quantity_price', self._parse_quantity_price_lines),
            ('numbered', self._parse_numbered_lines),
            ('simple', self._parse_simple_lines),
        ]

    def parse(self, raw: str) -> List[RawLineItem]:
        """Return raw items from the first pattern that finds any, else one synthetic item."""
        text = raw or ""
        for name, strategy in self.strategies:
            items = strategy(text)
            if items:
                logger.info(f"Free-text pattern '{name}' found {len(items)} line items")
                return items

        logger.warning("No line item patterns matched, using synthetic item")
        return [self._synthetic_item(text)]

    def _is_summary_label(self, label: str) -> bool:
        return label.strip().rstrip('.').lower() in self.summary_labels

    def _parse_quantity_price_lines(self, text: str) -> List[RawLineItem]:
        items = []
        for match in self.quantity_price_pattern.finditer(text):
            label, price_first, qty_second, qty_first, price_second, total = match.groups()
            if self._is_summary_label(label):
                continue

            quantity = coerce_number(qty_second or qty_first, 1.0)
            unit_price = coerce_number(price_first or price_second, 0.0)

            item = {
                'description': label.strip(),
                'quantity': quantity,
                'unitPrice': unit_price,
                'notes': '',
            }
            if total is not None:
                item['total'] = coerce_number(total, quantity * unit_price)
            items.append(item)
        return items

    def _parse_numbered_lines(self, text: str) -> List[RawLineItem]:
        items = []
        for match in self.numbered_pattern.finditer(text):
            label = match.group(1) or match.group(3)
            price = match.group(2) or match.group(4)
            if self._is_summary_label(label):
                continue
            items.append(self._single_unit_item(label, price))
        return items

    def _parse_simple_lines(self, text: str) -> List[RawLineItem]:
        items = []
        for match in self.simple_pattern.finditer(text):
            label, price = match.groups()
            if not label.strip() or self._is_summary_label(label):
                continue
            items.append(self._single_unit_item(label, price))
        return items

    def _single_unit_item(self, label: str, price: Optional[str]) -> RawLineItem:
        return {
            'description': label.strip(),
            'quantity': 1.0,
            'unitPrice': coerce_number(price, 0.0),
            'notes': '',
        }

    def _synthetic_item(self, text: str) -> RawLineItem:
        excerpt = text[:self.excerpt_length]
        return {
            'description': self.synthetic_description,
            'quantity': 1.0,
            'unitPrice': self.synthetic_price,
            'total': self.synthetic_price,
            'notes': f"Generated from unstructured text: {excerpt}...",
        }


def parse_free_text(raw: str) -> List[RawLineItem]:
    """Run the default :class:`FreeTextParser` over ``raw``."""
    return FreeTextParser().parse(raw)
