"""
Data models for the estimate response parser.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .coercion import coerce_number


# Loosely-typed item produced by either extraction path. Keys vary
# (description/name/item, unitPrice/price, ...).
RawLineItem = Dict[str, Any]


@dataclass(frozen=True)
class CatalogMaterial:
    """A saved material from the user's catalog."""
    id: Any
    description: str
    unit_price: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogMaterial":
        if not isinstance(data, Mapping):
            raise ValueError(f"Catalog entry must be an object, got {type(data).__name__}")

        price = None
        for key in ("unitPrice", "unit_price", "price"):
            if data.get(key) not in (None, ""):
                price = coerce_number(data[key], 0.0)
                break

        return cls(
            id=data.get("id"),
            description=str(data.get("description") or ""),
            unit_price=max(price or 0.0, 0.0),
        )


@dataclass(frozen=True)
class LineItem:
    """Represents a single priced line in an estimate."""
    description: str
    quantity: float
    unit_price: float
    total: float
    notes: str = ""
    matched_material_id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "total": self.total,
            "notes": self.notes,
            "matchedMaterialId": self.matched_material_id,
        }


@dataclass(frozen=True)
class EstimateResult:
    """Final estimate: ordered line items and their summed total."""
    line_items: List[LineItem] = field(default_factory=list)
    total_price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineItems": [item.to_dict() for item in self.line_items],
            "totalPrice": self.total_price,
        }
