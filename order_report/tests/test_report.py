from decimal import Decimal

from order_report.services.aggregation import OrderSummary, aggregate_order
from order_report.services.report import REPORT_COLUMNS, build_report, emit_report


SUMMARIES = [
    OrderSummary(
        order_id="O1",
        customer_name="Ada Lovelace",
        net_total=Decimal("21.67"),
        vat_total=Decimal("3.33"),
        gross_total=Decimal("25.00"),
        is_fully_in_stock=False,
    ),
    aggregate_order("O3", "Grace Hopper", []),
]


def test_build_report_formats_two_decimals():
    rows = build_report(SUMMARIES)

    assert [r.order_id for r in rows] == ["O1", "O3"]
    assert rows[0].net_total == "21.67"
    assert rows[0].vat_total == "3.33"
    assert rows[0].gross_total == "25.00"
    assert rows[0].is_fully_in_stock is False

    assert (rows[1].net_total, rows[1].vat_total, rows[1].gross_total) == ("0.00", "0.00", "0.00")
    assert rows[1].is_fully_in_stock is True


def test_build_report_pads_whole_amounts():
    s = OrderSummary("O7", "X", Decimal("28"), Decimal("1.4"), Decimal("29.40"), True)

    row = build_report([s])[0]

    assert (row.net_total, row.vat_total, row.gross_total) == ("28.00", "1.40", "29.40")


def test_emit_report_writes_csv(tmp_path):
    path = tmp_path / "out" / "order_totals.csv"

    emit_report(build_report(SUMMARIES), path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [
        ",".join(REPORT_COLUMNS),
        "O1,Ada Lovelace,21.67,3.33,25.00,false",
        "O3,Grace Hopper,0.00,0.00,0.00,true",
    ]


def test_emit_report_without_orders_writes_header_only(tmp_path):
    path = tmp_path / "order_totals.csv"

    emit_report([], path)

    assert path.read_text(encoding="utf-8").splitlines() == [",".join(REPORT_COLUMNS)]
