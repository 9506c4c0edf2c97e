"""
Estimate Response Parser

Turns free-form estimate text from a language model into priced line items
reconciled against a catalog of saved materials.
"""

__version__ = "1.0.0"

from .catalog_matcher import CatalogMatcher, find_matching_material
from .coercion import coerce_number
from .config import PipelineConfig
from .models import CatalogMaterial, EstimateResult, LineItem
from .normalizer import LineItemNormalizer
from .pipeline import EstimatePipeline, build_estimate
from .prompt import build_response, build_user_prompt, enhance_job_description, estimate_title
from .structured_parser import try_structured_parse
from .text_parser import FreeTextParser, parse_free_text

__all__ = [
    "CatalogMatcher",
    "CatalogMaterial",
    "EstimatePipeline",
    "EstimateResult",
    "FreeTextParser",
    "LineItem",
    "LineItemNormalizer",
    "PipelineConfig",
    "build_estimate",
    "build_response",
    "build_user_prompt",
    "coerce_number",
    "enhance_job_description",
    "estimate_title",
    "find_matching_material",
    "parse_free_text",
    "try_structured_parse",
]
