"""Invoice HTML rendering; store details come in through StoreSettings."""

from __future__ import annotations

from html import escape
from typing import List, Optional

from medsoft import config
from medsoft.config import StoreSettings
from medsoft.models.customer import Customer, Sale
from medsoft.models.invoice import compute_totals, format_currency


def _contact_lines(settings: StoreSettings) -> List[str]:
    contact = []
    if settings.show_phone_on_invoice and settings.phone:
        contact.append(f"Phone: {escape(settings.phone)}")
    if settings.show_email_on_invoice and settings.email:
        contact.append(f"Email: {escape(settings.email)}")
    lines = [" | ".join(contact)] if contact else []
    if settings.show_gstin_on_invoice and settings.gstin:
        lines.append(f"GSTIN: {escape(settings.gstin)}")
    return lines


def build_receipt_html(sale: Sale, settings: StoreSettings, customer: Optional[Customer] = None) -> str:
    cur = config.CURRENCY_SYMBOL
    totals = compute_totals(sale.items)

    rows: List[str] = []
    for index, item in enumerate(sale.items, start=1):
        rows.append(
            f"<tr><td>{index}</td>"
            f"<td>{escape(item.name)}</td>"
            f"<td>{escape(item.batch)}</td>"
            f"<td>{escape(item.expiry)}</td>"
            f"<td align='right'>{item.qty}</td>"
            f"<td align='right'>{format_currency(item.mrp)}</td>"
            f"<td align='right'>{format_currency(item.discount)}</td>"
            f"<td align='right'>{format_currency(item.net_amount)}</td></tr>"
        )

    header = "".join(f"<p class='contact'>{line}</p>" for line in _contact_lines(settings))
    bill_to = [f"Name: {escape(sale.customer)}"]
    if customer is not None:
        bill_to.append(f"Mobile: {escape(customer.mobile)}")
        if customer.age:
            bill_to.append(f"Age: {customer.age}")
    footer = f"<p>{escape(settings.invoice_footer_note)}</p>" if settings.invoice_footer_note else ""

    return f"""
    <html>
    <head>
        <style>
            body {{ font-family: 'Arial'; font-size: 11pt; }}
            h2 {{ margin: 0 0 6px 0; }}
            table {{ width: 100%; border-collapse: collapse; }}
            td {{ padding: 2px 0; }}
            .totals td {{ padding-top: 4px; }}
            .contact {{ margin: 0; }}
        </style>
    </head>
    <body class='{settings.invoice_template}'>
        <h2>{escape(settings.display_name)}</h2>
        <p class='contact'>{escape(settings.address)}</p>
        {header}
        <table>
            <tr><td>Invoice #: {escape(sale.invoice_id)}</td>
            <td align='right'>Date: {sale.date.strftime("%d/%m/%Y")}</td></tr>
        </table>
        <p><b>Bill To:</b><br/>{'<br/>'.join(bill_to)}</p>
        <table>
            <tr><th align='left'>S.No</th><th align='left'>Product</th><th align='left'>Batch</th>
            <th align='left'>Expiry</th><th align='right'>Qty</th><th align='right'>MRP</th>
            <th align='right'>Disc (%)</th><th align='right'>Net Amt</th></tr>
            {''.join(rows)}
        </table>
        <hr />
        <table class='totals'>
            <tr><td>Subtotal</td><td align='right'>{cur}{format_currency(totals.subtotal)}</td></tr>
            <tr><td>Discount</td><td align='right'>- {cur}{format_currency(totals.discount)}</td></tr>
            <tr><td>GST</td><td align='right'>+ {cur}{format_currency(totals.gst)}</td></tr>
            <tr><td><b>Total</b></td><td align='right'><b>{cur}{format_currency(totals.payable)}</b></td></tr>
        </table>
        {footer}
        <p style='text-align:right;margin-top:16px;'>Pharmacist Signature:</p>
    </body>
    </html>
    """
