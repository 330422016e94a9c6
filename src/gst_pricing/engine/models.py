"""
Data models for the GST pricing engine.

Uses dataclasses for structured, type-safe data representation.
Breakdowns and matrices are frozen: an edit always builds a new object.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .numeric import normalize


def _first(record: Mapping, *keys, default=None):
    """Return the first key present (and not None) in a record."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            # Older Python releases reject the "Z" suffix written by JS clients
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class TaxRatePair:
    """CGST/SGST percentages for one order type."""
    cgst_percent: float = 0.0
    sgst_percent: float = 0.0

    @property
    def total_percent(self) -> float:
        return self.cgst_percent + self.sgst_percent

    @classmethod
    def from_dict(cls, record: Optional[Mapping]) -> 'TaxRatePair':
        """Build from a {cgst, sgst} style record."""
        record = record or {}
        return cls(
            cgst_percent=normalize(_first(record, 'cgst', 'cgstPercent', 'cgstPercentage', default=0)),
            sgst_percent=normalize(_first(record, 'sgst', 'sgstPercent', 'sgstPercentage', default=0)),
        )

    def to_dict(self) -> dict:
        return {"cgst": self.cgst_percent, "sgst": self.sgst_percent}


@dataclass(frozen=True)
class PriceBreakdown:
    """Base/final price of one amount with its attributed tax components."""
    base_price: float
    final_price: float
    cgst_amount: float
    sgst_amount: float
    gst_amount: float
    cgst_percent: float
    sgst_percent: float
    price_includes_tax: bool

    def to_dict(self) -> dict:
        return {
            "basePrice": self.base_price,
            "finalPrice": self.final_price,
            "cgstAmount": self.cgst_amount,
            "sgstAmount": self.sgst_amount,
            "gstAmount": self.gst_amount,
            "cgstPercent": self.cgst_percent,
            "sgstPercent": self.sgst_percent,
            "priceIncludesTax": self.price_includes_tax,
        }

    @classmethod
    def from_dict(cls, record: Mapping) -> 'PriceBreakdown':
        """Parse a stored breakdown record (accepts gstValue/cgstPercentage aliases)."""
        return cls(
            base_price=normalize(record.get('basePrice')),
            final_price=normalize(record.get('finalPrice')),
            cgst_amount=normalize(record.get('cgstAmount')),
            sgst_amount=normalize(record.get('sgstAmount')),
            gst_amount=normalize(_first(record, 'gstAmount', 'gstValue')),
            cgst_percent=normalize(_first(record, 'cgstPercent', 'cgstPercentage')),
            sgst_percent=normalize(_first(record, 'sgstPercent', 'sgstPercentage')),
            price_includes_tax=record.get('priceIncludesTax') is not False,
        )


@dataclass(frozen=True)
class OrderTypePricing:
    """All breakdowns of one item for one order type."""
    cgst_percent: float
    sgst_percent: float
    default: Optional[PriceBreakdown] = None
    sizes: dict[str, PriceBreakdown] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "sizes", MappingProxyType(dict(self.sizes)))

    def to_dict(self) -> dict:
        return {
            "cgstPercent": self.cgst_percent,
            "sgstPercent": self.sgst_percent,
            "default": self.default.to_dict() if self.default else None,
            "sizes": {key: b.to_dict() for key, b in self.sizes.items()},
        }

    @classmethod
    def from_dict(cls, record: Mapping) -> 'OrderTypePricing':
        default = record.get('default')
        return cls(
            cgst_percent=normalize(_first(record, 'cgstPercent', 'cgstPercentage')),
            sgst_percent=normalize(_first(record, 'sgstPercent', 'sgstPercentage')),
            default=PriceBreakdown.from_dict(default) if default else None,
            sizes={
                key: PriceBreakdown.from_dict(value)
                for key, value in (record.get('sizes') or {}).items()
                if value
            },
        )


@dataclass(frozen=True)
class SourcePrice:
    """Prices exactly as the operator entered them."""
    default: Optional[float] = None
    sizes: dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "sizes", MappingProxyType(dict(self.sizes)))

    def to_dict(self) -> dict:
        return {"default": self.default, "sizes": dict(self.sizes)}


@dataclass(frozen=True)
class PricingMatrix:
    """Precomputed breakdowns across order types and size variants of one item."""
    price_includes_tax: bool
    source_price_type: str  # "final" or "base"
    source_price: SourcePrice
    last_updated: datetime
    order_types: dict[str, OrderTypePricing] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only views; rebuild the matrix to change it
        object.__setattr__(self, "order_types", MappingProxyType(dict(self.order_types)))

    def to_dict(self) -> dict:
        return {
            "priceIncludesTax": self.price_includes_tax,
            "sourcePriceType": self.source_price_type,
            "sourcePrice": self.source_price.to_dict(),
            "lastUpdated": self.last_updated.isoformat(),
            "orderTypes": {key: entry.to_dict() for key, entry in self.order_types.items()},
        }

    @classmethod
    def from_dict(cls, record: Mapping) -> 'PricingMatrix':
        """Parse a matrix record as persisted by the storage layer."""
        includes_tax = record.get('priceIncludesTax') is not False
        source = record.get('sourcePrice') or {}
        default = source.get('default')
        return cls(
            price_includes_tax=includes_tax,
            source_price_type=record.get('sourcePriceType') or ('final' if includes_tax else 'base'),
            source_price=SourcePrice(
                default=normalize(default) if default is not None else None,
                sizes={
                    key: normalize(value)
                    for key, value in (source.get('sizes') or {}).items()
                    if value is not None
                },
            ),
            last_updated=_parse_timestamp(record.get('lastUpdated')),
            order_types={
                key: OrderTypePricing.from_dict(entry)
                for key, entry in (record.get('orderTypes') or {}).items()
                if entry
            },
        )


@dataclass
class CartLineItem:
    """A single orderable unit in the cart, input to aggregation."""
    price: Any = None
    quantity: Any = 1
    cgst_percent: Any = 0
    sgst_percent: Any = 0
    price_includes_tax: bool = True
    final_price: Any = None  # fallback amount when price is missing
    extra: dict[str, Any] = field(default_factory=dict)  # name, id, size...

    _KNOWN_KEYS = (
        'price', 'quantity', 'finalPrice', 'priceIncludesTax',
        'cgstPercent', 'cgstPercentage', 'sgstPercent', 'sgstPercentage',
    )

    @classmethod
    def from_dict(cls, record: Mapping) -> 'CartLineItem':
        """Build from a cart record (camelCase keys, extra fields kept)."""
        return cls(
            price=record.get('price'),
            quantity=record.get('quantity'),
            cgst_percent=_first(record, 'cgstPercent', 'cgstPercentage', default=0),
            sgst_percent=_first(record, 'sgstPercent', 'sgstPercentage', default=0),
            price_includes_tax=record.get('priceIncludesTax') is not False,
            final_price=record.get('finalPrice'),
            extra={k: v for k, v in record.items() if k not in cls._KNOWN_KEYS},
        )


@dataclass(frozen=True)
class CartLine:
    """A cart line enriched with its computed breakdown."""
    order_type: str
    quantity: int
    breakdown: PriceBreakdown
    subtotal: float
    source: dict[str, Any] = field(default_factory=dict)

    _LEGACY_KEYS = (
        ("cgstPercentage", "cgstPercent"),
        ("sgstPercentage", "sgstPercent"),
        ("gstValue", "gstAmount"),
    )

    def to_dict(self) -> dict:
        """Original line fields overlaid with the computed fields."""
        data = dict(self.source)
        data.update(self.breakdown.to_dict())
        # Older clients read these fields under their legacy names
        for legacy, current in self._LEGACY_KEYS:
            if legacy in data:
                data[legacy] = data[current]
        data["orderType"] = self.order_type
        data["quantity"] = self.quantity
        data["subtotal"] = self.subtotal
        return data


@dataclass
class CartSummary:
    """Order-level invoice totals. Built fresh per aggregation call."""
    order_type: str
    total_base_amount: float = 0.0
    total_cgst_amount: float = 0.0
    total_sgst_amount: float = 0.0
    total_gst_amount: float = 0.0
    total_final_amount: float = 0.0
    items: list[CartLine] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_warning(self, warning: str):
        """Add a summary-level warning."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def to_dict(self) -> dict:
        return {
            "orderType": self.order_type,
            "totalBaseAmount": self.total_base_amount,
            "totalCgstAmount": self.total_cgst_amount,
            "totalSgstAmount": self.total_sgst_amount,
            "totalGstAmount": self.total_gst_amount,
            "totalFinalAmount": self.total_final_amount,
            "items": [line.to_dict() for line in self.items],
            "warnings": list(self.warnings),
        }
