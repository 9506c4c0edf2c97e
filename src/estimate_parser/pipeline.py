"""
Estimate pipeline: raw generator text in, priced and reconciled estimate out.

Extraction stages run in a fixed order; each one either produces raw line
items or yields None so the next stage gets a turn. Nothing here raises to
the caller: every degenerate input ends up as a best-effort estimate with at
least one line item.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .catalog_matcher import CatalogMatcher
from .coercion import coerce_number
from .config import PipelineConfig
from .models import CatalogMaterial, EstimateResult, LineItem, RawLineItem
from .normalizer import LineItemNormalizer
from .structured_parser import try_structured_parse
from .text_parser import FreeTextParser

logger = logging.getLogger(__name__)

Stage = Tuple[str, Callable[[str], Optional[List[RawLineItem]]]]


class EstimatePipeline:
    """Turns a raw generator response into an :class:`EstimateResult`."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.text_parser = FreeTextParser(
            synthetic_description=self.config.synthetic_item_description,
            synthetic_price=self.config.synthetic_item_price,
            excerpt_length=self.config.excerpt_length,
        )
        self.normalizer = LineItemNormalizer(CatalogMatcher(self.config.min_shared_word_length))

        self.stages: List[Stage] = [
            ('blank_response', self._skip_blank_response),
            ('structured', try_structured_parse),
            ('free_text', self.text_parser.parse),
        ]

    def build_estimate(self, raw: str,
                       catalog: Sequence[CatalogMaterial] = ()) -> EstimateResult:
        raw = raw if isinstance(raw, str) else ""
        catalog = coerce_catalog(catalog)

        stage_name, raw_items = self.extract(raw)

        try:
            line_items = self.normalizer.normalize(raw_items, catalog)
        except Exception as e:
            logger.warning(f"Normalization failed: {e}")
            line_items = []

        if not line_items:
            reason = "empty AI response" if stage_name == 'blank_response' else "empty parsed response"
            logger.warning(f"No line items produced, substituting default item ({reason})")
            line_items = [self._default_item(f"Default item due to {reason}")]

        try:
            line_items.extend(self.missing_catalog_items(line_items, catalog))
        except Exception as e:
            logger.warning(f"Could not add saved materials: {e}")

        total_price = calculate_total_price(line_items)
        logger.info(f"Built estimate with {len(line_items)} line items, total {total_price:.2f}")
        return EstimateResult(line_items=line_items, total_price=total_price)

    def extract(self, raw: str) -> Tuple[str, List[RawLineItem]]:
        """Run the extraction stages in order and return the first result."""
        for name, stage in self.stages:
            try:
                items = stage(raw)
            except Exception as e:
                logger.warning(f"Stage '{name}' failed with error: {e}")
                continue

            if items is not None:
                logger.info(f"Stage '{name}' produced {len(items)} raw items")
                return name, items
            logger.debug(f"Stage '{name}' produced nothing, falling through")

        return 'none', []

    def missing_catalog_items(self, line_items: Sequence[LineItem],
                              catalog: Sequence[CatalogMaterial]) -> List[LineItem]:
        """Line items for catalog materials the generator left out."""
        matched_ids = {item.matched_material_id for item in line_items
                       if item.matched_material_id is not None}
        descriptions = [item.description.lower() for item in line_items]

        added = []
        for material in catalog:
            if material.id is not None and material.id in matched_ids:
                continue
            mat_lower = material.description.lower()
            if self.config.augment_skips_substring_matches and \
                    any(mat_lower in desc for desc in descriptions):
                continue

            logger.debug(f"Adding saved material '{material.description}'")
            added.append(LineItem(
                description=material.description,
                quantity=1.0,
                unit_price=material.unit_price,
                total=material.unit_price,
                notes=self.config.augmented_item_note,
                matched_material_id=material.id,
            ))
        return added

    def _skip_blank_response(self, raw: str) -> Optional[List[RawLineItem]]:
        # Blank text has nothing to parse; stop here so the default item is used
        if not raw.strip():
            logger.warning("Empty AI response received")
            return []
        return None

    def _default_item(self, note: str) -> LineItem:
        price = self.config.default_item_price
        return LineItem(
            description=self.config.default_item_description,
            quantity=1.0,
            unit_price=price,
            total=price,
            notes=note,
        )


def coerce_catalog(catalog) -> List[CatalogMaterial]:
    """Accept materials or plain mappings; entries that cannot be read are skipped."""
    materials = []
    for entry in catalog or []:
        if isinstance(entry, CatalogMaterial):
            materials.append(entry)
            continue
        try:
            materials.append(CatalogMaterial.from_dict(entry))
        except ValueError as e:
            logger.warning(f"Ignoring catalog entry: {e}")
    return materials


def calculate_total_price(line_items: Sequence[LineItem]) -> float:
    """Sum of line item totals; unusable totals count as zero."""
    return sum(coerce_number(item.total, 0.0) for item in line_items)


def build_estimate(raw: str, catalog: Sequence[CatalogMaterial] = (),
                   config: Optional[PipelineConfig] = None) -> EstimateResult:
    """Run the full pipeline with an optional config override."""
    return EstimatePipeline(config).build_estimate(raw, catalog)
