"""Stock changes caused by completed sales."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List

from medsoft.models.invoice import InvoiceLine
from medsoft.models.medicine import MedicineRecord

logger = logging.getLogger(__name__)


def apply_sale_to_stock(
    medicines: Iterable[MedicineRecord], lines: Iterable[InvoiceLine]
) -> List[MedicineRecord]:
    """Return a new medicine list with sold quantities taken off stock.

    Lines are matched on (brand name, batch number). A line with no matching
    record leaves the inventory untouched.
    """
    updated = [replace(medicine) for medicine in medicines]
    for line in lines:
        if line.is_empty:
            continue
        match = next((med for med in updated if med.matches(line.name, line.batch)), None)
        if match is None:
            logger.warning("No inventory record for '%s' batch '%s'; stock not reduced.", line.name, line.batch)
            continue
        match.stock -= line.qty
    return updated


def search_medicines(medicines: Iterable[MedicineRecord], query: str) -> List[MedicineRecord]:
    """Brand or generic name contains ``query`` (case-insensitive); nothing for an empty query."""
    if not query:
        return []
    needle = query.lower()
    return [
        med for med in medicines
        if needle in med.brand_name.lower() or needle in med.generic_name.lower()
    ]


def find_batch(medicines: Iterable[MedicineRecord], name: str, batch: str) -> MedicineRecord:
    """The record for ``batch`` among medicines whose name matches ``name``."""
    candidates = [med for med in search_medicines(medicines, name) if med.batch_no == batch]
    if len(candidates) > 1:
        candidates = [med for med in candidates if med.brand_name.lower() == name.lower()]
    if len(candidates) != 1:
        raise ValueError(f"No single medicine matches '{name}' batch '{batch}'.")
    return candidates[0]
