import sqlite3
from datetime import date

import pytest

from ledgerbook.invoice_document import DocumentError, InvoiceDocument, format_amount

SCHEMA = """
CREATE TABLE userInformation (
    id INTEGER PRIMARY KEY, address TEXT, post_number TEXT, vat_number TEXT,
    mobile TEXT, phone TEXT, email TEXT, website TEXT, accountNumber TEXT,
    sort_code TEXT, bank_name TEXT, bank_address TEXT
);
CREATE TABLE Customers (id INTEGER PRIMARY KEY, name TEXT, address TEXT);
CREATE TABLE Invoices (
    id INTEGER PRIMARY KEY, customer_id INTEGER, date TEXT, invoice_id TEXT,
    vat REAL, discount REAL, total_discount REAL, total REAL
);
CREATE TABLE InvoiceDetails (
    id INTEGER PRIMARY KEY, invoice_id INTEGER, products TEXT, quantity INTEGER,
    rate REAL, amount REAL, comment TEXT
);
CREATE TABLE Documents (
    id INTEGER PRIMARY KEY, FileName TEXT, FileSize INTEGER, FileDate TEXT, FileData TEXT
);
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    conn.execute("INSERT INTO Customers (id, name, address) VALUES (1, 'Acme Ltd', 'Road 1')")
    conn.execute(
        "INSERT INTO Invoices (id, customer_id, date, invoice_id, vat, discount, "
        "total_discount, total) VALUES (1, 1, '2024-01-05', 'INV-00001', 20, 0, 0, 180)"
    )
    conn.execute(
        "INSERT INTO InvoiceDetails (invoice_id, products, quantity, rate, amount, comment) "
        "VALUES (1, 'Service 1', 1, 100, 100, ' ')"
    )
    conn.execute(
        "INSERT INTO InvoiceDetails (invoice_id, products, quantity, rate, amount, comment) "
        "VALUES (1, 'Service 2', 2, 25, 50, ' ')"
    )
    conn.commit()
    yield conn
    conn.close()


@pytest.mark.parametrize("text", ["INV-00001", "", "2024-01-05", "abc"])
def test_format_amount_keeps_non_numbers(text):
    assert format_amount(text) == text


def test_format_amount_groups_thousands():
    assert format_amount("1234.5") == "1,234.5"


def test_format_amount_drops_trailing_zeros_but_keeps_value():
    result = format_amount("100")
    assert result.endswith(".")
    assert float(result) == 100.0


def test_subtotal_sums_line_amounts(connection):
    document = InvoiceDocument(connection, 1)
    assert document.subtotal() == pytest.approx(100 + 50)


def test_vat_amount_follows_vat_rate(connection):
    document = InvoiceDocument(connection, 1)
    assert document.vat_amount() == pytest.approx(document.subtotal() * 20 / 100)


def test_table_rows_html_contains_each_line(connection):
    document = InvoiceDocument(connection, 1)
    html = document.table_rows_html()
    assert html.count("<tr>") == 2
    assert (
        "<tr><td>Service 1</td><td class='quantity' >1</td>"
        "<td class='rate'>100.00</td><td class='amount' >100.00</td></tr>"
    ) in html
    assert html.index("Service 1") < html.index("Service 2")


def test_invoice_summary_fields(connection):
    summary = InvoiceDocument(connection, 1).invoice_summary()
    assert summary.bill_to == "Acme Ltd"
    assert summary.invoice_number == "INV-00001"
    assert summary.date == "2024-01-05"
    assert summary.balance_due == summary.total
    assert float(summary.vat) == 20.0


def test_invoice_summary_of_missing_invoice_is_blank(connection):
    summary = InvoiceDocument(connection, 99).invoice_summary()
    assert summary.bill_to == ""
    assert summary.invoice_number == ""
    assert summary.total == ""


def test_template_values_cover_all_placeholders(connection):
    document = InvoiceDocument(connection, 1)
    values = document.template_values()
    assert set(values) == {f"%{number}" for number in range(1, 23)}
    assert values["%1"] == "123 Main St"
    assert values["%14"] == "Example Bank"
    assert values["%10"] == "Acme Ltd"
    assert values["%11"] == document.table_rows_html()


def test_default_profile_created_once(connection):
    InvoiceDocument(connection, 1)
    InvoiceDocument(connection, 1)
    count = connection.execute("SELECT COUNT(*) FROM userInformation").fetchone()[0]
    assert count == 1


def test_document_name(connection):
    assert InvoiceDocument(connection, 1).document_name() == "Acme Ltd-invoice-INV-00001"


def test_insert_document_stores_size_and_date(connection):
    document = InvoiceDocument(connection, 1)
    data = "<html>é</html>"
    row_id = document.insert_document("doc", data, date(2024, 3, 1))
    stored = connection.execute(
        "SELECT FileName, FileSize, FileDate, FileData FROM Documents WHERE id = ?",
        (row_id,),
    ).fetchone()
    assert stored == ("doc", len(data.encode("utf-8")), "2024-03-01", data)
    assert document.saved_once is True


def test_insert_document_without_table_raises(connection):
    document = InvoiceDocument(connection, 1)
    connection.execute("DROP TABLE Documents")
    with pytest.raises(DocumentError):
        document.insert_document("doc", "data", date(2024, 3, 1))
    assert document.saved_once is False