"""
Shared result types for the price feeds.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PriceLookup:
    """
    Outcome of a heuristic SKU search in an offer file.

    Either a positive price was found (``price`` and ``sku`` set) or it was
    not (``reason`` says why). Callers decide the fallback.
    """
    price: Optional[float] = None
    sku: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def found(cls, price: float, sku: str) -> "PriceLookup":
        return cls(price=price, sku=sku)

    @classmethod
    def not_found(cls, reason: str) -> "PriceLookup":
        return cls(reason=reason)

    @property
    def is_found(self) -> bool:
        return self.price is not None

    def or_default(self, fallback: float) -> float:
        """Return the found price, or ``fallback`` when nothing matched."""
        return self.price if self.price is not None else fallback


@dataclass
class ExtractionStats:
    """Counters collected while filtering one regional offer file."""
    region: str
    items_seen: int = 0
    items_filtered_out: int = 0
    items_without_price: int = 0
    rows_emitted: int = 0

    def summary(self) -> str:
        return (
            f"{self.region}: seen={self.items_seen} "
            f"filtered_out={self.items_filtered_out} "
            f"without_price={self.items_without_price} "
            f"rows={self.rows_emitted}"
        )
