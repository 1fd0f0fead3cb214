from datetime import date, datetime

import pytest

from conftest import TODAY, make_medicine
from medsoft.billing.checkout import (
    checkout,
    find_sale,
    line_for_medicine,
    next_invoice_number,
    search_sales,
)
from medsoft.data.repository import InMemoryRepository
from medsoft.models.customer import WALK_IN_CUSTOMER, Customer, Sale
from medsoft.models.invoice import InvoiceLine


def _sale(invoice_id, customer="Walk-in Customer", total=100):
    return Sale(invoice_id=invoice_id, customer=customer, date=TODAY, total=total)


def test_invoice_number_is_sequential():
    assert next_invoice_number([]) == "JA-2425-0001"
    assert next_invoice_number([_sale("a"), _sale("b")], prefix="MS-") == "MS-0003"


def test_checkout_saves_sale_and_reduces_stock(medicines, bill_lines):
    medicines_repo = InMemoryRepository(medicines)
    sales_repo = InMemoryRepository()
    customer = Customer(id=2, name="Asha Rao", mobile="9876543210")

    sale = checkout(bill_lines, medicines_repo, sales_repo, customer, on=datetime(2024, 6, 15, 18, 30))

    assert sale.invoice_id == "JA-2425-0001"
    assert sale.customer == "Asha Rao"
    assert sale.date == date(2024, 6, 15)
    assert sale.total == 195
    assert [item.name for item in sale.items] == ["Dolo 650", "Azithral 500"]
    assert sales_repo.get_all() == [sale]
    assert [m.stock for m in medicines_repo.get_all()] == [48, 4, 0]


def test_checkout_defaults_to_walk_in_customer(medicines):
    sales_repo = InMemoryRepository([_sale("JA-2425-0001")])
    lines = [InvoiceLine(name="Pan 40", batch="P40", qty=1, mrp=95.5)]
    sale = checkout(lines, InMemoryRepository(medicines), sales_repo, on=TODAY)
    assert sale.customer == WALK_IN_CUSTOMER.name
    assert sale.invoice_id == "JA-2425-0002"
    assert len(sales_repo.get_all()) == 2


def test_checkout_with_unknown_batch_still_records_sale(medicines):
    medicines_repo = InMemoryRepository(medicines)
    lines = [InvoiceLine(name="Dolo 650", batch="NOPE", qty=3, mrp=30.0)]
    checkout(lines, medicines_repo, InMemoryRepository(), on=TODAY)
    assert [m.stock for m in medicines_repo.get_all()] == [50, 5, 0]


def test_checkout_rejects_bill_without_items(medicines):
    sales_repo = InMemoryRepository()
    with pytest.raises(ValueError):
        checkout([InvoiceLine(), InvoiceLine(name="Dolo 650")], InMemoryRepository(medicines), sales_repo)
    assert sales_repo.get_all() == []


def test_search_sales_newest_first():
    sales = [_sale("JA-2425-0001", "Asha"), _sale("JA-2425-0002", "Ravi"), _sale("JA-2425-0003", "asha k")]
    assert [s.invoice_id for s in search_sales(sales)] == ["JA-2425-0003", "JA-2425-0002", "JA-2425-0001"]
    assert [s.invoice_id for s in search_sales(sales, "ASHA")] == ["JA-2425-0003", "JA-2425-0001"]
    assert [s.invoice_id for s in search_sales(sales, "0002")] == ["JA-2425-0002"]


def test_find_sale():
    sales = [_sale("JA-2425-0001")]
    assert find_sale(sales, "JA-2425-0001") is sales[0]
    with pytest.raises(KeyError):
        find_sale(sales, "JA-2425-0009")


def test_line_for_medicine_copies_price_and_batch():
    line = line_for_medicine(make_medicine("Dolo 650", "B100", mrp=30.0, gst=12.0, days=0), qty="0")
    assert (line.name, line.batch, line.expiry, line.qty, line.mrp, line.gst) == (
        "Dolo 650", "B100", "06/24", 1, 30.0, 12.0,
    )
    assert line.discount == 0.0


class _BrokenRepository(InMemoryRepository):
    def get_all(self):
        raise ValueError("Missing required columns in sheet 'Medicines': MRP")


def test_checkout_writes_nothing_when_a_collection_cannot_be_read(bill_lines):
    sales_repo = InMemoryRepository()
    with pytest.raises(ValueError):
        checkout(bill_lines, _BrokenRepository(), sales_repo, on=TODAY)
    assert sales_repo.get_all() == []


def test_sale_total_is_whole_currency_units():
    sale = Sale.from_dict({"invoice_id": "JA-2425-0001", "date": "2024-06-15", "total": "189.5"})
    assert sale.total == 190
    assert isinstance(sale.total, int)
