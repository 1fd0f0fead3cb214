"""Invoice printing via QTextDocument to a Windows printer."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import QSizeF
from PyQt5.QtGui import QTextDocument
from PyQt5.QtPrintSupport import QPrinter

from medsoft import config
from medsoft.config import StoreSettings
from medsoft.models.customer import Customer, Sale
from medsoft.printing.receipt import build_receipt_html


class ReceiptPrinter:
    """Render invoices as HTML and send them to a target printer."""

    def __init__(self, printer_name: str | None = None, receipt_width_mm: float | None = None) -> None:
        self.printer_name = printer_name or config.PRINTER_NAME
        self.receipt_width_mm = receipt_width_mm or config.RECEIPT_WIDTH_MM

    def print_receipt(self, sale: Sale, settings: StoreSettings, customer: Optional[Customer] = None) -> bool:
        """Send the invoice to the printer; returns True on success."""
        printer = QPrinter(QPrinter.HighResolution)
        printer.setPrinterName(self.printer_name)

        if not printer.isValid():
            return False

        # 70mm for header, bill-to and totals plus 8mm per line.
        height_mm = 70 + (len(sale.items) * 8)
        printer.setPaperSize(QSizeF(self.receipt_width_mm, height_mm), QPrinter.Millimeter)
        printer.setFullPage(True)

        doc = QTextDocument()
        doc.setHtml(build_receipt_html(sale, settings, customer))
        doc.setPageSize(QSizeF(self.receipt_width_mm, height_mm))

        doc.print_(printer)
        return printer.isValid()
