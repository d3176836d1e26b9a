"""Tests for CSV export."""

from datetime import date

from conftest import make_invoice
from invoicedesk.services.export import export_csv, export_filename


class TestExportCsv:
    def test_header_and_rows(self, sample_invoices, today):
        lines = export_csv(sample_invoices[3:], today).split("\n")

        assert lines == [
            '"Invoice #","Customer Name","Amount","Invoice Date","Due Date",'
            '"Payment Date","Status","Payment Terms"',
            '"INV-10002","TechStart Inc","2500.50","2024-01-20","2024-02-19",'
            '"N/A","Pending","30 days"',
            '"INV-10001","Acme Corp","1000.00","2024-01-01","2024-01-31",'
            '"N/A","Overdue","30 days"',
        ]

    def test_paid_row_shows_payment_date(self, sample_invoices, today):
        row = export_csv([sample_invoices[1]], today).split("\n")[1]
        assert row == (
            '"INV-10004","Swift Solutions","300.00","2024-01-05","2024-01-20",'
            '"2024-02-02","Paid","15 days"'
        )

    def test_commas_and_quotes_in_names(self, today):
        invoice = make_invoice(10001, customer_name='Smith, "Jones" & Co')
        row = export_csv([invoice], today).split("\n")[1]
        assert row.startswith('"INV-10001","Smith, ""Jones"" & Co",')

    def test_empty_export_has_header_only(self, today):
        assert export_csv([], today).count("\n") == 0

    def test_filename_has_date(self):
        assert export_filename(date(2024, 3, 1)) == "invoices_2024-03-01.csv"
