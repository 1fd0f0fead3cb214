"""Dataclasses representing medicines held in inventory."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

from medsoft.models.invoice import coerce_amount


def parse_date(value) -> Optional[date]:
    """Accept a date, a datetime or an ISO / DD/MM/YYYY string."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return datetime.fromisoformat(text).date()


def to_int(value, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


@dataclass
class MedicineRecord:
    brand_name: str
    batch_no: str
    expiry_date: date
    stock: int = 0
    mrp: float = 0.0
    gst: float = 0.0
    generic_name: str = ""
    strength: str = ""
    form: str = ""
    hsn: str = ""
    id: Optional[int] = None

    def matches(self, name: str, batch: str) -> bool:
        """True when this record is the (brand, batch) sold on an invoice line."""
        return self.brand_name == name and self.batch_no == batch

    @property
    def expiry_label(self) -> str:
        """MM/YY label used on invoice lines."""
        return self.expiry_date.strftime("%m/%y")

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "brand_name": self.brand_name,
            "generic_name": self.generic_name,
            "strength": self.strength,
            "form": self.form,
            "hsn": self.hsn,
            "batch_no": self.batch_no,
            "expiry_date": self.expiry_date.isoformat(),
            "stock": self.stock,
            "mrp": self.mrp,
            "gst": self.gst,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "MedicineRecord":
        expiry = parse_date(data.get("expiry_date"))
        if expiry is None:
            raise ValueError(f"Medicine '{data.get('brand_name')}' has no expiry date.")
        record_id = data.get("id")
        return cls(
            id=to_int(record_id, default=0) or None,
            brand_name=str(data.get("brand_name") or ""),
            generic_name=str(data.get("generic_name") or ""),
            strength=str(data.get("strength") or ""),
            form=str(data.get("form") or ""),
            hsn=str(data.get("hsn") or ""),
            batch_no=str(data.get("batch_no") or ""),
            expiry_date=expiry,
            stock=to_int(data.get("stock"), default=0),
            mrp=coerce_amount(data.get("mrp")),
            gst=coerce_amount(data.get("gst")),
        )
