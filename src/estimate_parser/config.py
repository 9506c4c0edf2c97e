"""
Tunable constants for the estimate pipeline.

The word-length cutoff and the augmentation substring check are empirical
heuristics; they live here so callers can override them per run.
"""

from dataclasses import dataclass

# Shared words must be at least this long to count as a catalog match
# ("for", "the", "and" are ignored).
MIN_SHARED_WORD_LENGTH = 4

DEFAULT_ITEM_DESCRIPTION = "Basic Landscape Service"
DEFAULT_ITEM_PRICE = 100.0

SYNTHETIC_ITEM_DESCRIPTION = "AI Generated Item"
SYNTHETIC_ITEM_PRICE = 100.0

AUGMENTED_ITEM_NOTE = "Added from saved materials"


@dataclass
class PipelineConfig:
    """Heuristic knobs used by the matcher, the text parser and the augmenter."""
    min_shared_word_length: int = MIN_SHARED_WORD_LENGTH
    augment_skips_substring_matches: bool = True
    excerpt_length: int = 100
    default_item_description: str = DEFAULT_ITEM_DESCRIPTION
    default_item_price: float = DEFAULT_ITEM_PRICE
    synthetic_item_description: str = SYNTHETIC_ITEM_DESCRIPTION
    synthetic_item_price: float = SYNTHETIC_ITEM_PRICE
    augmented_item_note: str = AUGMENTED_ITEM_NOTE
