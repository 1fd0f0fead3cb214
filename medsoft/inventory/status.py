"""Stock status classification and inventory alerts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

from medsoft import config
from medsoft.models.medicine import MedicineRecord

DateLike = Union[date, datetime]


class StockStatus(str, Enum):
    EXPIRED = "Expired"
    OUT_OF_STOCK = "Out of Stock"
    NEAR_EXPIRY = "Near Expiry"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


@dataclass(frozen=True)
class Alert:
    medicine_name: str
    alert_type: StockStatus
    detail: str


def _as_date(on: Optional[DateLike]) -> date:
    if on is None:
        return date.today()
    if isinstance(on, datetime):
        return on.date()
    return on


def classify_stock(
    medicine: MedicineRecord,
    on: Optional[DateLike] = None,
    near_expiry_days: int = config.NEAR_EXPIRY_DAYS,
    low_stock_threshold: int = config.LOW_STOCK_THRESHOLD,
) -> StockStatus:
    """Return the single status that applies to ``medicine`` on ``on``.

    Checks run in a fixed order and the first match wins: expired, out of
    stock, near expiry (day ``near_expiry_days`` included), low stock.
    """
    today = _as_date(on)
    expiry = _as_date(medicine.expiry_date)

    if expiry < today:
        return StockStatus.EXPIRED
    if medicine.stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if expiry <= today + timedelta(days=near_expiry_days):
        return StockStatus.NEAR_EXPIRY
    if medicine.stock < low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def _detail(medicine: MedicineRecord, status: StockStatus) -> str:
    expiry = medicine.expiry_date.strftime("%d/%m/%Y")
    if status is StockStatus.EXPIRED:
        return f"Expired on {expiry}"
    if status is StockStatus.OUT_OF_STOCK:
        return "No units available"
    if status is StockStatus.NEAR_EXPIRY:
        return f"Expires on {expiry}"
    unit = "unit" if medicine.stock == 1 else "units"
    return f"Only {medicine.stock} {unit} left"


def build_alerts(medicines: Iterable[MedicineRecord], on: Optional[DateLike] = None) -> List[Alert]:
    """One alert per medicine that is not simply in stock, in input order."""
    alerts: List[Alert] = []
    for medicine in medicines:
        status = classify_stock(medicine, on)
        if status is StockStatus.IN_STOCK:
            continue
        alerts.append(Alert(medicine.brand_name, status, _detail(medicine, status)))
    return alerts


def filter_by_status(
    medicines: Iterable[MedicineRecord],
    statuses: Optional[Iterable[StockStatus]] = None,
    on: Optional[DateLike] = None,
) -> List[MedicineRecord]:
    """Medicines whose current status is one of ``statuses``; all when None."""
    medicines = list(medicines)
    if statuses is None:
        return medicines
    wanted = set(statuses)
    return [medicine for medicine in medicines if classify_stock(medicine, on) in wanted]
