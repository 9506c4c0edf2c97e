"""
Matches free-text line item descriptions against the user's saved materials.
"""

import logging
from typing import Optional, Sequence

from .config import MIN_SHARED_WORD_LENGTH
from .models import CatalogMaterial

logger = logging.getLogger(__name__)


class CatalogMatcher:
    """
    Three-tier description matcher.

    Tiers are tried in order and the first hit wins:
    1. exact (case-insensitive) description
    2. containment in either direction, first entry in catalog order
    3. a shared word of at least ``min_word_length`` characters
    """

    def __init__(self, min_word_length: int = MIN_SHARED_WORD_LENGTH):
        self.min_word_length = min_word_length
        self.strategies = [
            ('exact', self._exact_match),
            ('containment', self._containment_match),
            ('word_overlap', self._word_overlap_match),
        ]

    def find_match(self, description: str,
                   catalog: Sequence[CatalogMaterial]) -> Optional[CatalogMaterial]:
        """Return the best catalog material for ``description`` or None."""
        if not catalog or not description:
            return None

        desc_lower = description.strip().lower()
        if not desc_lower:
            return None

        # Blank catalog descriptions would "contain" everything
        candidates = [mat for mat in catalog if mat.description and mat.description.strip()]

        for tier, strategy in self.strategies:
            material = strategy(desc_lower, candidates)
            if material is not None:
                logger.debug(f"Matched '{description}' to '{material.description}' ({tier})")
                return material

        return None

    def _exact_match(self, desc_lower: str,
                     catalog: Sequence[CatalogMaterial]) -> Optional[CatalogMaterial]:
        for material in catalog:
            if material.description.strip().lower() == desc_lower:
                return material
        return None

    def _containment_match(self, desc_lower: str,
                           catalog: Sequence[CatalogMaterial]) -> Optional[CatalogMaterial]:
        for material in catalog:
            mat_lower = material.description.strip().lower()
            if mat_lower in desc_lower or desc_lower in mat_lower:
                return material
        return None

    def _word_overlap_match(self, desc_lower: str,
                            catalog: Sequence[CatalogMaterial]) -> Optional[CatalogMaterial]:
        words = {word for word in desc_lower.split() if len(word) >= self.min_word_length}
        if not words:
            return None

        for material in catalog:
            if any(word in words for word in material.description.lower().split()):
                return material
        return None


def find_matching_material(description: str,
                           catalog: Sequence[CatalogMaterial],
                           min_word_length: int = MIN_SHARED_WORD_LENGTH) -> Optional[CatalogMaterial]:
    """Convenience wrapper around :class:`CatalogMatcher`."""
    return CatalogMatcher(min_word_length).find_match(description, catalog)
