"""Configuration constants for the MedSoft pharmacy point of sale."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict

# Workbook holding every collection, one sheet each.
WORKBOOK_PATH: Path = Path("data/medsoft.xlsx")

MEDICINES_SHEET: str = "Medicines"
CUSTOMERS_SHEET: str = "Customers"
SALES_SHEET: str = "Sales"
SETTINGS_SHEET: str = "Settings"

# Name of the Windows printer to target for receipts.
PRINTER_NAME: str = "Star TSP700II (TSP743II)"

# Receipt paper width in millimeters for 80mm thermal rolls.
RECEIPT_WIDTH_MM: float = 80.0

INVOICE_PREFIX: str = "JA-2425-"

# Stock alert policy.
NEAR_EXPIRY_DAYS: int = 60
LOW_STOCK_THRESHOLD: int = 10

CURRENCY_SYMBOL: str = "₹"

LOG_LEVEL: str = "INFO"
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DEFAULT_STORE_NAME: str = "Srimona MedSoft"
DEFAULT_FOOTER_NOTE: str = "Medicines once sold cannot be returned unless expired/damaged."

INVOICE_TEMPLATES = ("modern", "classic", "simple")


@dataclass
class StoreSettings:
    """Store details printed on invoices."""

    store_name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    gstin: str = ""
    show_email_on_invoice: bool = True
    show_phone_on_invoice: bool = True
    show_gstin_on_invoice: bool = True
    invoice_footer_note: str = DEFAULT_FOOTER_NOTE
    invoice_template: str = "modern"

    @property
    def display_name(self) -> str:
        return self.store_name or DEFAULT_STORE_NAME

    def to_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "StoreSettings":
        """Build settings from stored key/value pairs, ignoring unknown keys."""
        settings = cls()
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            value = data[f.name]
            if f.type in ("bool", bool):
                value = _to_bool(value)
            else:
                value = str(value)
            setattr(settings, f.name, value)
        if settings.invoice_template not in INVOICE_TEMPLATES:
            settings.invoice_template = "modern"
        return settings


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)
