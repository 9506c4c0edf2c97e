"""
Structured (JSON) extraction of line items from generator output.
"""

import json
import logging
from typing import Any, List, Optional

from .models import RawLineItem

logger = logging.getLogger(__name__)

BRACKET_PAIRS = (("[", "]"), ("{", "}"))

ITEM_LIST_KEYS = ("lineItems", "items")


def _load_json(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def find_embedded_json(text: str) -> Optional[str]:
    """
    Return the widest bracketed span in ``text``, or None.

    The span runs from the earliest opening bracket that has a matching
    closer somewhere after it to the last such closer. Linear in the text.
    """
    best = None
    for opener, closer in BRACKET_PAIRS:
        start = text.find(opener)
        end = text.rfind(closer)
        if start == -1 or end <= start:
            continue
        if best is None or start < best[0]:
            best = (start, end)

    if best is None:
        return None
    start, end = best
    return text[start:end + 1]


def extract_item_list(document: Any) -> Optional[List[Any]]:
    """
    Pull the list of items out of a decoded JSON document.

    Accepts a bare array, an object wrapping a ``lineItems`` or ``items``
    array, or a single object (treated as one item). Scalars give None.
    """
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in ITEM_LIST_KEYS:
            if isinstance(document.get(key), list):
                return document[key]
        return [document]
    return None


def try_structured_parse(raw: str) -> Optional[List[RawLineItem]]:
    """
    Interpret ``raw`` as structured line item data.

    Returns the list of raw items, or None when the text holds no usable
    JSON (blank input, no parseable span, or an empty item list).
    """
    if not raw or not raw.strip():
        return None

    document = _load_json(raw.strip())
    if document is None:
        span = find_embedded_json(raw)
        if span is None:
            logger.debug("No JSON span found in response")
            return None
        document = _load_json(span)
        if document is None:
            logger.info("Embedded JSON span could not be decoded")
            return None
        logger.info("Recovered JSON embedded in surrounding text")

    items = extract_item_list(document)
    if items is None:
        logger.info(f"JSON document is a bare {type(document).__name__}, not line items")
        return None

    raw_items = [item for item in items if isinstance(item, dict)]
    if len(raw_items) < len(items):
        logger.debug(f"Dropped {len(items) - len(raw_items)} non-object entries")

    if not raw_items:
        logger.info("Structured response contained no line items")
        return None

    return raw_items
