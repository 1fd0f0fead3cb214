from datetime import date, timedelta

import pytest

from medsoft.models.invoice import InvoiceLine
from medsoft.models.medicine import MedicineRecord

TODAY = date(2024, 6, 15)


def make_medicine(name="Dolo 650", batch="B100", stock=50, days=200, mrp=30.0, gst=12.0, generic=""):
    return MedicineRecord(
        brand_name=name,
        generic_name=generic,
        batch_no=batch,
        expiry_date=TODAY + timedelta(days=days),
        stock=stock,
        mrp=mrp,
        gst=gst,
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def medicines():
    return [
        make_medicine("Dolo 650", "B100", stock=50, generic="Paracetamol"),
        make_medicine("Azithral 500", "AZ7", stock=5, days=20, mrp=120.0, generic="Azithromycin"),
        make_medicine("Pan 40", "P40", stock=0, days=300, mrp=95.5, generic="Pantoprazole"),
    ]


@pytest.fixture
def bill_lines():
    return [
        InvoiceLine(name="Dolo 650", batch="B100", qty=2, mrp=30.0, discount=10.0, gst=12.0),
        InvoiceLine(name="Azithral 500", batch="AZ7", qty=1, mrp=120.0, discount=0.0, gst=12.0),
        InvoiceLine(),
    ]


@pytest.fixture
def workbook(tmp_path):
    return tmp_path / "medsoft.xlsx"
