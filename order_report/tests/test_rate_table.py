from decimal import Decimal

import pytest

from order_report.app.db.models.core_types import VatCode
from order_report.services.errors import ConfigLoadError, UnknownVatCode
from order_report.services.rates import RateTable, load_rate_table


def test_rate_lookup_by_string_and_enum(rates):
    assert rates.rate("STANDARD") == Decimal("0.20")
    assert rates.rate(VatCode.reduced) == Decimal("0.05")
    assert rates.rate(VatCode.zero) == 0


def test_missing_code_is_an_error_not_zero(rates):
    with pytest.raises(UnknownVatCode):
        rates.rate("SUPER_REDUCED")


def test_rate_table_is_read_only():
    source = {"STANDARD": Decimal("0.20")}
    table = RateTable(source)
    source["STANDARD"] = Decimal("0.99")

    assert table.rate("STANDARD") == Decimal("0.20")
    with pytest.raises(TypeError):
        table._rates["STANDARD"] = Decimal("0.50")


def test_load_rate_table_reads_vat_section(tmp_path):
    path = tmp_path / "tax_rules.json"
    path.write_text('{"vat": {"STANDARD": 0.2, "REDUCED": 0.05, "ZERO": 0}}', encoding="utf-8")

    table = load_rate_table(path)

    # floats JSON lus en Decimal : 0.2 reste 0.2
    assert table.rate("STANDARD") == Decimal("0.2")
    assert table.rate("REDUCED") == Decimal("0.05")
    assert table.rate("ZERO") == 0
    assert table.codes() == ["REDUCED", "STANDARD", "ZERO"]


def test_load_rate_table_missing_file(tmp_path):
    with pytest.raises(ConfigLoadError, match="Cannot read"):
        load_rate_table(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "content, message",
    [
        ("{not json", "Malformed"),
        ('{"rates": {"STANDARD": 0.2}}', "Invalid"),
        ('{"vat": {}}', "Invalid"),
        ('{"vat": {"STANDARD": -0.2}}', "Invalid"),
        ('{"vat": {"STANDARD": "abc"}}', "Invalid"),
        ('[0.2]', "Invalid"),
    ],
)
def test_load_rate_table_rejects_bad_content(tmp_path, content, message):
    path = tmp_path / "tax_rules.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigLoadError, match=message):
        load_rate_table(path)
