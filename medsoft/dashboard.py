"""Dashboard figures and report data derived from the stored collections."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from medsoft.inventory.status import Alert, build_alerts
from medsoft.models.customer import Customer, Sale
from medsoft.models.medicine import MedicineRecord


@dataclass
class DashboardSummary:
    total_revenue: float = 0.0
    sales_count: int = 0
    customer_count: int = 0
    alerts: List[Alert] = field(default_factory=list)


def summarize(
    sales: Iterable[Sale],
    customers: Iterable[Customer],
    medicines: Iterable[MedicineRecord],
    on: Optional[date] = None,
) -> DashboardSummary:
    completed = [sale for sale in sales if sale.status == "Completed"]
    return DashboardSummary(
        total_revenue=math.fsum(sale.total for sale in completed),
        sales_count=len(completed),
        customer_count=len(list(customers)),
        alerts=build_alerts(medicines, on),
    )


def monthly_sales(sales: Iterable[Sale], months: int = 6, on: Optional[date] = None) -> Dict[str, float]:
    """Completed sales totals for the last ``months`` calendar months, oldest first."""
    today = on or date.today()
    buckets: Dict[str, float] = {}
    year, month = today.year, today.month
    keys = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    for key in reversed(keys):
        buckets[key] = 0.0

    for sale in sales:
        if sale.status != "Completed":
            continue
        key = sale.date.strftime("%Y-%m")
        if key in buckets:
            buckets[key] += sale.total
    return buckets
