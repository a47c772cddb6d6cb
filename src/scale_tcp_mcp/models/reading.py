"""Decoded measurement model.

Each field travels as an integer with implied decimals::

    +-----------+----------------+-------------+
    | weight    | price per unit | total       |
    | /1000 kg  | /100           | /100        |
    +-----------+----------------+-------------+
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

WEIGHT_DIVISOR = Decimal(1000)
PRICE_DIVISOR = Decimal(100)
TOTAL_DIVISOR = Decimal(100)

WEIGHT_QUANTUM = Decimal("0.001")
MONEY_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class DecodedReading:
    """One reading from the terminal, in raw and scaled form."""

    FIELD_COUNT: ClassVar[int] = 3

    weight_raw: int = 0
    price_raw: int = 0
    total_raw: int = 0

    @property
    def weight(self) -> Decimal:
        return (Decimal(self.weight_raw) / WEIGHT_DIVISOR).quantize(WEIGHT_QUANTUM)

    @property
    def price_per_unit(self) -> Decimal:
        return (Decimal(self.price_raw) / PRICE_DIVISOR).quantize(MONEY_QUANTUM)

    @property
    def total(self) -> Decimal:
        return (Decimal(self.total_raw) / TOTAL_DIVISOR).quantize(MONEY_QUANTUM)

    def render(self, currency: str = "") -> str:
        """Format as a single display line."""
        return (
            f"Weight: {self.weight:.3f} kg | "
            f"Price/Unit: {currency}{self.price_per_unit:.2f} | "
            f"Total: {currency}{self.total:.2f}"
        )

    def to_dict(self) -> dict:
        return {
            "weight": f"{self.weight:.3f}",
            "weight_unit": "kg",
            "price_per_unit": f"{self.price_per_unit:.2f}",
            "total": f"{self.total:.2f}",
            "raw": [self.weight_raw, self.price_raw, self.total_raw],
        }

    @classmethod
    def from_fields(cls, fields: list[int]) -> DecodedReading:
        weight_raw, price_raw, total_raw = fields[: cls.FIELD_COUNT]
        return cls(weight_raw=weight_raw, price_raw=price_raw, total_raw=total_raw)
