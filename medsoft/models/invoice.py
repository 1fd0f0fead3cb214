"""Invoice lines and bill totals."""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

_line_ids = itertools.count(1)


def _next_line_id() -> int:
    return next(_line_ids)


def coerce_quantity(value) -> int:
    """Return a positive integer quantity; anything else becomes 1."""
    if value in (None, ""):
        return 1
    try:
        qty = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return qty if qty > 0 else 1


def coerce_amount(value) -> float:
    """Return a float amount; non-numeric input becomes 0.0."""
    if value in (None, ""):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount):
        return 0.0
    return amount


@dataclass
class InvoiceLine:
    name: str = ""
    batch: str = ""
    expiry: str = ""
    qty: int = 1
    mrp: float = 0.0
    discount: float = 0.0
    gst: float = 0.0
    id: int = field(default_factory=_next_line_id)

    @property
    def is_empty(self) -> bool:
        """A blank row the operator has not filled in yet."""
        return not self.name.strip() and self.mrp == 0

    @property
    def is_billable(self) -> bool:
        return bool(self.name.strip()) and self.mrp > 0 and self.qty > 0

    @property
    def discounted_price(self) -> float:
        return self.mrp * (1 - self.discount / 100.0)

    @property
    def gross(self) -> float:
        return self.mrp * self.qty

    @property
    def discount_amount(self) -> float:
        return self.mrp * self.qty * (self.discount / 100.0)

    @property
    def gst_amount(self) -> float:
        return self.discounted_price * (self.gst / 100.0) * self.qty

    @property
    def net_amount(self) -> float:
        return line_net(self)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "batch": self.batch,
            "expiry": self.expiry,
            "qty": self.qty,
            "mrp": self.mrp,
            "discount": self.discount,
            "gst": self.gst,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "InvoiceLine":
        line = cls(
            name=str(data.get("name") or ""),
            batch=str(data.get("batch") or ""),
            expiry=str(data.get("expiry") or ""),
            qty=coerce_quantity(data.get("qty")),
            mrp=coerce_amount(data.get("mrp")),
            discount=coerce_amount(data.get("discount")),
            gst=coerce_amount(data.get("gst")),
        )
        if data.get("id") not in (None, ""):
            line.id = int(data["id"])
        return line


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float = 0.0
    discount: float = 0.0
    gst: float = 0.0
    final_total: float = 0.0
    payable: int = 0


def line_net(line: InvoiceLine) -> float:
    """Net payable for one line at full precision."""
    discounted = line.mrp * (1 - line.discount / 100.0)
    gst_amount = discounted * (line.gst / 100.0)
    return (discounted + gst_amount) * line.qty


def compute_totals(lines: Iterable[InvoiceLine]) -> InvoiceTotals:
    """Aggregate the non-empty lines of an invoice.

    Amounts are summed with ``math.fsum`` so the result does not depend on
    line order. Rounding happens once, on the payable amount.
    """
    filled: List[InvoiceLine] = [line for line in lines if not line.is_empty]
    if not filled:
        return InvoiceTotals()

    subtotal = math.fsum(line.gross for line in filled)
    discount = math.fsum(line.discount_amount for line in filled)
    gst = math.fsum(line.gst_amount for line in filled)
    final_total = subtotal - discount + gst
    return InvoiceTotals(
        subtotal=subtotal,
        discount=discount,
        gst=gst,
        final_total=final_total,
        payable=round_half_up(final_total),
    )


def round_half_up(amount: float) -> int:
    """Round to the nearest whole currency unit, halves going up."""
    return int(Decimal(repr(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: float) -> str:
    """Return amount formatted to two decimals."""
    return f"{amount:.2f}"
