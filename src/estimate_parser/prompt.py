"""
Helpers around the generator call: prompt enrichment and the response payload.
"""

from typing import Any, Dict, Optional, Sequence

from .config import PipelineConfig
from .models import CatalogMaterial
from .pipeline import EstimatePipeline, coerce_catalog

MATERIALS_HEADER = "\n\nPlease use the following materials where applicable:"
DEFAULT_JOB_TYPE = "General Landscape Work"


def _format_unit_price(value: float) -> str:
    # 45.0 -> "45", 12.5 -> "12.5"
    return f"{value:.2f}".rstrip('0').rstrip('.')


def enhance_job_description(job_description: str,
                            catalog: Sequence[CatalogMaterial] = ()) -> str:
    """Append the saved materials to the job description sent to the generator."""
    materials = coerce_catalog(catalog)
    if not materials:
        return job_description

    lines = [job_description, MATERIALS_HEADER]
    for material in materials:
        lines.append(f"\n- {material.description} (${_format_unit_price(material.unit_price)}/unit)")
    return "".join(lines)


def build_user_prompt(job_description: str,
                      catalog: Sequence[CatalogMaterial] = (),
                      job_type: Optional[str] = None) -> str:
    """User message for the generator: job type plus the enriched description."""
    return (
        f"Job Type: {job_type or DEFAULT_JOB_TYPE}\n"
        f"Description: {enhance_job_description(job_description, catalog)}\n"
        "Generate a detailed estimate with appropriate line items, quantities, and suggested pricing."
    )


def estimate_title(job_type: Optional[str] = None) -> str:
    return f"{job_type or 'Landscape'} Estimate"


def build_response(raw: str, catalog: Sequence[CatalogMaterial] = (),
                   job_description: str = "", job_type: Optional[str] = None,
                   config: Optional[PipelineConfig] = None) -> Dict[str, Any]:
    """
    Build the payload returned to the estimate UI.

    Args:
        raw: Generator output
        catalog: Saved materials for this estimate
        job_description: The user's original job description
        job_type: Optional job type used in the title

    Returns:
        Dictionary with title, line items, total and the raw response
    """
    result = EstimatePipeline(config).build_estimate(raw, catalog)
    payload = {
        "success": True,
        "title": estimate_title(job_type),
        "description": job_description,
    }
    payload.update(result.to_dict())
    payload["rawResponse"] = raw
    return payload
