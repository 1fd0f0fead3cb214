import random

import pytest

from medsoft.models.invoice import (
    InvoiceLine,
    InvoiceTotals,
    coerce_amount,
    coerce_quantity,
    compute_totals,
    format_currency,
    line_net,
    round_half_up,
)


def test_line_net_applies_discount_then_gst():
    line = InvoiceLine(name="Dolo 650", qty=2, mrp=100.0, discount=10.0, gst=5.0)
    assert line.discounted_price == pytest.approx(90.0)
    assert line.gst_amount == pytest.approx(9.0)
    assert line_net(line) == pytest.approx(189.0)
    assert format_currency(line.net_amount) == "189.00"


def test_line_net_tolerates_out_of_range_percentages():
    line = InvoiceLine(name="Promo", qty=1, mrp=50.0, discount=120.0, gst=0.0)
    assert line_net(line) == pytest.approx(-10.0)


def test_totals_for_sample_bill(bill_lines):
    totals = compute_totals(bill_lines)
    assert totals.subtotal == pytest.approx(180.0)
    assert totals.discount == pytest.approx(6.0)
    assert totals.gst == pytest.approx(20.88)
    assert totals.final_total == pytest.approx(194.88)
    assert totals.payable == 195


def test_final_total_equals_sum_of_line_nets(bill_lines):
    totals = compute_totals(bill_lines)
    assert totals.final_total == pytest.approx(sum(line_net(l) for l in bill_lines if not l.is_empty))


def test_totals_do_not_depend_on_line_order():
    lines = [
        InvoiceLine(name=f"Item {i}", qty=i % 4 + 1, mrp=0.1 * i + 9.99, discount=i % 7, gst=[0, 5, 12, 18][i % 4])
        for i in range(40)
    ]
    expected = compute_totals(lines)
    shuffled = lines[:]
    random.Random(7).shuffle(shuffled)
    assert compute_totals(shuffled) == expected


def test_no_filled_lines_gives_zero_totals():
    assert compute_totals([]) == InvoiceTotals()
    assert compute_totals([InvoiceLine(), InvoiceLine()]) == InvoiceTotals(0.0, 0.0, 0.0, 0.0, 0)


def test_empty_line_requires_blank_name_and_zero_mrp():
    assert InvoiceLine(name="  ").is_empty
    assert not InvoiceLine(name="Pan 40").is_empty
    assert not InvoiceLine(mrp=12.0).is_empty


def test_billable_line_needs_name_price_and_quantity():
    assert InvoiceLine(name="Pan 40", mrp=10.0, qty=1).is_billable
    assert not InvoiceLine(name="Pan 40", mrp=0.0).is_billable
    assert not InvoiceLine(name="", mrp=10.0).is_billable


@pytest.mark.parametrize(
    "amount, expected",
    [(189.4, 189), (189.5, 190), (189.49, 189), (0.0, 0), (0.49999999999999994, 0), (2.5, 3)],
)
def test_round_half_up(amount, expected):
    assert round_half_up(amount) == expected


@pytest.mark.parametrize("raw, expected", [("3", 3), (2, 2), ("0", 1), (-4, 1), ("abc", 1), (None, 1), ("2.7", 2)])
def test_coerce_quantity(raw, expected):
    assert coerce_quantity(raw) == expected


@pytest.mark.parametrize("raw, expected", [("12.5", 12.5), ("", 0.0), ("x", 0.0), (None, 0.0), (7, 7.0)])
def test_coerce_amount(raw, expected):
    assert coerce_amount(raw) == expected


def test_recomputing_totals_is_stable(bill_lines):
    assert compute_totals(bill_lines) == compute_totals(bill_lines)


def test_line_dict_round_trip_keeps_id():
    line = InvoiceLine(name="Dolo 650", batch="B100", expiry="06/25", qty=3, mrp=30.0, discount=5.0, gst=12.0)
    restored = InvoiceLine.from_dict(line.to_dict())
    assert restored == line


def test_new_lines_get_distinct_ids():
    assert InvoiceLine().id != InvoiceLine().id
