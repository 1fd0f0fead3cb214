"""Customer and sale records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from medsoft.models.invoice import InvoiceLine, coerce_amount, round_half_up
from medsoft.models.medicine import to_int, parse_date

SALE_STATUSES = ("Completed", "Pending", "Draft")
GENDERS = ("Male", "Female", "Other")


@dataclass
class Customer:
    id: int
    name: str
    mobile: str
    address: str = ""
    age: Optional[int] = None
    gender: Optional[str] = None
    prescriptions: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "mobile": self.mobile,
            "address": self.address,
            "age": self.age,
            "gender": self.gender,
            "prescriptions": self.prescriptions,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Customer":
        gender = data.get("gender")
        return cls(
            id=to_int(data.get("id"), default=0),
            name=str(data.get("name") or ""),
            mobile=str(data.get("mobile") or ""),
            address=str(data.get("address") or ""),
            age=to_int(data.get("age"), default=0) or None,
            gender=gender if gender in GENDERS else None,
            prescriptions=to_int(data.get("prescriptions"), default=0),
        )


WALK_IN_CUSTOMER = Customer(id=1, name="Walk-in Customer", mobile="9999999999")


@dataclass
class Sale:
    invoice_id: str
    customer: str
    date: date
    total: int
    status: str = "Completed"
    items: List[InvoiceLine] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "invoice_id": self.invoice_id,
            "customer": self.customer,
            "date": self.date.isoformat(),
            "total": self.total,
            "status": self.status,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Sale":
        items = data.get("items") or []
        # Workbook cells hold the line list as JSON text.
        if isinstance(items, str):
            items = json.loads(items)
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValueError(f"Sale '{data.get('invoice_id')}' has malformed items.")
        status = data.get("status") or "Completed"
        if status not in SALE_STATUSES:
            raise ValueError(f"Unknown sale status: {status}")
        return cls(
            invoice_id=str(data.get("invoice_id") or ""),
            customer=str(data.get("customer") or ""),
            date=parse_date(data.get("date")) or date.today(),
            total=round_half_up(coerce_amount(data.get("total"))),
            status=str(status),
            items=[InvoiceLine.from_dict(item) for item in items],
        )
