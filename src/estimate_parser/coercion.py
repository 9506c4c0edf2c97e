"""
Numeric coercion shared by every parsing stage.
"""

import math
import numbers
import re
from decimal import Decimal
from typing import Any, Optional

_CURRENCY_RE = re.compile(r'[\$\€\£\¥]')
_LEADING_NUMBER_RE = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def coerce_number(value: Any, fallback: Optional[float] = 0.0) -> Optional[float]:
    """
    Convert ``value`` to a float, returning ``fallback`` when that is not possible.

    Strings are cleaned of currency symbols and thousands separators and the
    leading numeric part is used ("12 sq ft" -> 12.0). ``None``, booleans,
    empty strings, NaN and infinities all give ``fallback``. Never raises.
    """
    if value is None or isinstance(value, bool):
        return fallback

    # Decimal is not registered as numbers.Real
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError, TypeError):
            return fallback
    elif isinstance(value, str):
        cleaned = _CURRENCY_RE.sub('', value.strip()).replace(',', '').strip()
        match = _LEADING_NUMBER_RE.match(cleaned)
        if not match:
            return fallback
        try:
            number = float(match.group(0))
        except ValueError:
            return fallback
    else:
        return fallback

    if math.isnan(number) or math.isinf(number):
        return fallback
    return number
