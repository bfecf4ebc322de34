"""CSV export tests."""

from bms.models.records import DateRange, SaleKind, SaleRecord
from bms.reporting.csv_export import HEADER, export_csv, export_filename


def _lines(text: str) -> list[str]:
    return text.rstrip("\n").split("\n")


class TestExportCsv:
    def test_general_sale_row(self):
        sale = SaleRecord(
            date="2024-01-05",
            talent_name="Ana",
            account_name="",
            kind=SaleKind.GENERAL,
            gmv=100000,
            commission=10000,
            quantity=2,
        )
        lines = _lines(export_csv([sale]))
        assert lines[0] == ",".join(HEADER)
        assert lines[1] == "2024-01-05,general,Ana,-,-,100000,10000,2,0,0"

    def test_product_sale_uses_revenue(self):
        sale = SaleRecord(
            date="2024-01-06",
            talent_name="Bima",
            account_name="bima.gadget",
            kind=SaleKind.PRODUCT_LINKED,
            gmv=999,
            revenue=450000,
            commission=45000,
            quantity=3,
            product_id="P1",
            product_name="TWS Earbuds Pro",
        )
        lines = _lines(export_csv([sale]))
        assert lines[1] == "2024-01-06,content,Bima,bima.gadget,TWS Earbuds Pro,450000,45000,3,0,0"

    def test_integral_floats_render_without_decimals(self):
        sale = SaleRecord(
            date="2024-01-06",
            talent_name="Ana",
            account_name="ana.daily",
            gmv=1500.0,
            commission=12.5,
            product_views=40,
            product_clicks=4,
        )
        assert _lines(export_csv([sale]))[1].endswith(",1500,12.5,0,40,4")

    def test_field_with_comma_is_quoted(self):
        sale = SaleRecord(
            date="2024-01-06",
            talent_name="Ana",
            account_name="ana.daily",
            kind=SaleKind.PRODUCT_LINKED,
            revenue=10,
            product_name="Bag, Canvas",
        )
        assert '"Bag, Canvas"' in _lines(export_csv([sale]))[1]

    def test_empty_export_has_header_only(self):
        assert _lines(export_csv([])) == [",".join(HEADER)]


class TestExportFilename:
    def test_range_pattern(self):
        assert export_filename(DateRange("2024-01-01", "2024-01-31")) == "sales_report_2024-01-01_to_2024-01-31.csv"

    def test_all_time(self):
        assert export_filename() == "sales_report_all_time.csv"
