"""Finalizing bills: save the sale and take the sold units off stock."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from medsoft import config
from medsoft.data.repository import Repository
from medsoft.inventory.stock import apply_sale_to_stock
from medsoft.models.customer import WALK_IN_CUSTOMER, Customer, Sale
from medsoft.models.invoice import InvoiceLine, coerce_quantity, compute_totals
from medsoft.models.medicine import MedicineRecord

logger = logging.getLogger(__name__)


def next_invoice_number(sales: List[Sale], prefix: str = config.INVOICE_PREFIX) -> str:
    return f"{prefix}{len(sales) + 1:04d}"


def checkout(
    lines: Iterable[InvoiceLine],
    medicines_repo: Repository[MedicineRecord],
    sales_repo: Repository[Sale],
    customer: Optional[Customer] = None,
    on: Optional[Union[date, datetime]] = None,
    prefix: str = config.INVOICE_PREFIX,
) -> Sale:
    """Record a completed sale and reduce stock for every line sold.

    Only billable lines (named, priced, positive quantity) are kept. Raises
    ValueError when none are left.
    """
    items = [line for line in lines if line.is_billable]
    if not items:
        raise ValueError("Add at least one item to the bill.")

    customer = customer or WALK_IN_CUSTOMER
    if isinstance(on, datetime):
        on = on.date()
    totals = compute_totals(items)

    # Read both collections before writing either one.
    sales = sales_repo.get_all()
    medicines = medicines_repo.get_all()
    updated_medicines = apply_sale_to_stock(medicines, items)

    sale = Sale(
        invoice_id=next_invoice_number(sales, prefix),
        customer=customer.name,
        date=on or date.today(),
        total=totals.payable,
        status="Completed",
        items=items,
    )
    sales.append(sale)
    sales_repo.save_all(sales)
    medicines_repo.save_all(updated_medicines)

    logger.info("Invoice %s saved for %s: %d items, total %d.", sale.invoice_id, sale.customer, len(items), sale.total)
    return sale


def search_sales(sales: Iterable[Sale], query: str = "") -> List[Sale]:
    """Sales matching invoice number or customer name, newest first."""
    sales = list(sales)
    if query:
        needle = query.lower()
        sales = [s for s in sales if needle in s.invoice_id.lower() or needle in s.customer.lower()]
    return list(reversed(sales))


def find_sale(sales: Iterable[Sale], invoice_id: str) -> Sale:
    for sale in sales:
        if sale.invoice_id == invoice_id:
            return sale
    raise KeyError(f"Invoice '{invoice_id}' not found.")


def line_for_medicine(medicine: MedicineRecord, qty: int = 1) -> InvoiceLine:
    """Fill a bill line from the inventory record picked by the operator."""
    return InvoiceLine(
        name=medicine.brand_name,
        batch=medicine.batch_no,
        expiry=medicine.expiry_label,
        qty=coerce_quantity(qty),
        mrp=medicine.mrp,
        gst=medicine.gst,
    )
