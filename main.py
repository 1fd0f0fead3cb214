"""Entry point for the MedSoft pharmacy point of sale."""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from medsoft import config
from medsoft.billing.checkout import checkout, find_sale, line_for_medicine
from medsoft.config import StoreSettings
from medsoft.customers import find_or_add_customer
from medsoft.dashboard import monthly_sales, summarize
from medsoft.data.backup import EXPORT_FORMATS, export_collection, import_backup
from medsoft.data.excel_repo import load_settings, open_repositories, save_settings
from medsoft.inventory.status import build_alerts
from medsoft.inventory.stock import find_batch
from medsoft.models.customer import WALK_IN_CUSTOMER, Customer, Sale
from medsoft.models.invoice import coerce_amount, compute_totals, format_currency
from medsoft.models.medicine import MedicineRecord

logger = logging.getLogger("medsoft")

RECORD_TYPES = {
    "medicines": MedicineRecord,
    "customers": Customer,
    "recentSales": Sale,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MedSoft pharmacy point of sale")
    parser.add_argument("--workbook", type=Path, default=config.WORKBOOK_PATH)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    commands = parser.add_subparsers(dest="command", required=True)

    alerts = commands.add_parser("alerts", help="List stock and expiry alerts")
    alerts.add_argument("--on", type=date.fromisoformat, help="Evaluation date, YYYY-MM-DD")
    summary = commands.add_parser("summary", help="Show dashboard figures")
    summary.add_argument("--on", type=date.fromisoformat, help="Evaluation date, YYYY-MM-DD")

    bill = commands.add_parser("bill", help="Create a bill and take the items off stock")
    bill.add_argument("--customer", help="Customer name or mobile; added when nobody matches")
    bill.add_argument("--name", default="", help="Name for a new customer")
    bill.add_argument("--mobile", default="", help="Mobile for a new customer")
    bill.add_argument(
        "--item", nargs="+", action="append", required=True,
        metavar="FIELD", help="MEDICINE BATCH QTY [DISCOUNT%%]",
    )
    bill.add_argument("--on", type=date.fromisoformat, help="Bill date, YYYY-MM-DD")
    bill.add_argument("--print", action="store_true", help="Send the invoice to the printer")

    export = commands.add_parser("export", help="Export a collection")
    export.add_argument("collection", choices=sorted(RECORD_TYPES))
    export.add_argument("--format", choices=EXPORT_FORMATS, default="json")
    export.add_argument("--output", type=Path)

    restore = commands.add_parser("import", help="Restore collections from a JSON backup")
    restore.add_argument("backup", type=Path)

    reprint = commands.add_parser("reprint", help="Print a saved invoice again")
    reprint.add_argument("invoice_id")

    settings = commands.add_parser("settings", help="Show or change store settings")
    settings.add_argument("--set", nargs=2, action="append", metavar=("KEY", "VALUE"), default=[])
    return parser


def _alerts(repos, on) -> None:
    alerts = build_alerts(repos["medicines"].get_all(), on)
    if not alerts:
        print("No active alerts")
    for alert in alerts:
        print(f"{alert.alert_type.value:<13} {alert.medicine_name}: {alert.detail}")


def _summary(repos, on) -> None:
    sales = repos["recentSales"].get_all()
    summary = summarize(sales, repos["customers"].get_all(), repos["medicines"].get_all(), on)
    print(f"Total revenue: {config.CURRENCY_SYMBOL}{format_currency(summary.total_revenue)}")
    print(f"Sales: {summary.sales_count}")
    print(f"Customers: {summary.customer_count}")
    print(f"Active alerts: {len(summary.alerts)}")
    for month, total in monthly_sales(sales, on=on).items():
        print(f"  {month}: {config.CURRENCY_SYMBOL}{format_currency(total)}")


def _print_sale(workbook: Path, sale: Sale, customer) -> int:
    # Qt is only needed once there is something to print.
    from PyQt5.QtWidgets import QApplication

    from medsoft.printing.receipt_printer import ReceiptPrinter

    app = QApplication.instance() or QApplication(sys.argv)  # noqa: F841
    if not ReceiptPrinter().print_receipt(sale, load_settings(workbook), customer):
        logger.error("Printer not available.")
        return 1
    logger.info("Invoice %s sent to printer.", sale.invoice_id)
    return 0


def _bill(repos, args) -> int:
    medicines = repos["medicines"].get_all()
    lines = []
    for fields in args.item:
        if len(fields) not in (3, 4):
            raise ValueError(f"Expected MEDICINE BATCH QTY [DISCOUNT], got: {' '.join(fields)}")
        medicine = find_batch(medicines, fields[0], fields[1])
        line = line_for_medicine(medicine, fields[2])
        if len(fields) == 4:
            line.discount = coerce_amount(fields[3])
        lines.append(line)

    customer = WALK_IN_CUSTOMER
    if args.customer:
        customers = repos["customers"].get_all()
        customer, created = find_or_add_customer(customers, args.customer, args.name, args.mobile)
        if created:
            repos["customers"].save_all(customers)
            logger.info("Added customer %s (%s).", customer.name, customer.mobile)

    sale = checkout(lines, repos["medicines"], repos["recentSales"], customer, on=args.on)
    totals = compute_totals(sale.items)
    cur = config.CURRENCY_SYMBOL
    print(f"Invoice {sale.invoice_id} for {sale.customer}")
    for item in sale.items:
        print(f"  {item.name} ({item.batch}) x{item.qty}: {cur}{format_currency(item.net_amount)}")
    print(f"Subtotal: {cur}{format_currency(totals.subtotal)}")
    print(f"Discount: - {cur}{format_currency(totals.discount)}")
    print(f"GST: + {cur}{format_currency(totals.gst)}")
    print(f"Total: {cur}{format_currency(sale.total)}")

    if args.print:
        return _print_sale(args.workbook, sale, customer)
    return 0


def _reprint(repos, workbook: Path, invoice_id: str) -> int:
    sale = find_sale(repos["recentSales"].get_all(), invoice_id)
    customer = next((c for c in repos["customers"].get_all() if c.name == sale.customer), None)
    return _print_sale(workbook, sale, customer)


def _settings(workbook: Path, changes) -> None:
    settings = load_settings(workbook)
    if changes:
        values = settings.to_dict()
        for key, value in changes:
            if key not in values:
                raise ValueError(f"Unknown setting: {key}")
            values[key] = value
        settings = StoreSettings.from_dict(values)
        save_settings(settings, workbook)
        logger.info("Settings saved to %s.", workbook)
    for key, value in settings.to_dict().items():
        print(f"{key}: {value}")


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)
    repos = open_repositories(args.workbook)

    try:
        if args.command == "alerts":
            _alerts(repos, args.on)
        elif args.command == "summary":
            _summary(repos, args.on)
        elif args.command == "bill":
            return _bill(repos, args)
        elif args.command == "export":
            text = export_collection(args.collection, repos[args.collection].get_all(), args.format)
            if args.output:
                args.output.write_text(text, encoding="utf-8")
                logger.info("Exported %s to %s.", args.collection, args.output)
            else:
                sys.stdout.write(text)
        elif args.command == "import":
            restored = import_backup(args.backup.read_text(encoding="utf-8"), repos, RECORD_TYPES)
            logger.info("Imported %s.", ", ".join(restored) or "nothing")
        elif args.command == "reprint":
            return _reprint(repos, args.workbook, args.invoice_id)
        elif args.command == "settings":
            _settings(args.workbook, args.set)
    except (KeyError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
