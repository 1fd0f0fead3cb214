from datetime import date

from conftest import TODAY
from medsoft.dashboard import monthly_sales, summarize
from medsoft.inventory.status import StockStatus
from medsoft.models.customer import WALK_IN_CUSTOMER, Sale


def _sale(day, total, status="Completed"):
    return Sale(invoice_id=f"JA-{day}", customer="Walk-in Customer", date=day, total=total, status=status)


def test_summary_counts_completed_sales(medicines):
    sales = [
        _sale(date(2024, 6, 1), 195),
        _sale(date(2024, 6, 2), 40),
        _sale(date(2024, 6, 3), 500, status="Draft"),
    ]
    summary = summarize(sales, [WALK_IN_CUSTOMER], medicines, TODAY)
    assert summary.total_revenue == 235
    assert summary.sales_count == 2
    assert summary.customer_count == 1
    assert [a.alert_type for a in summary.alerts] == [StockStatus.NEAR_EXPIRY, StockStatus.OUT_OF_STOCK]


def test_monthly_sales_spans_year_boundary():
    sales = [
        _sale(date(2023, 12, 20), 100),
        _sale(date(2024, 2, 5), 50),
        _sale(date(2024, 2, 25), 25),
        _sale(date(2023, 7, 1), 999),
    ]
    assert monthly_sales(sales, months=4, on=date(2024, 3, 10)) == {
        "2023-12": 100.0,
        "2024-01": 0.0,
        "2024-02": 75.0,
        "2024-03": 0.0,
    }
    assert list(monthly_sales([], on=date(2024, 3, 10))) == [
        "2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03",
    ]
