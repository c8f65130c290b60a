# ledgerbook

Invoicing for a small business, kept in an SQLite database. Every class works
on a `sqlite3.Connection` that you open yourself, and each expects the tables it
uses to exist already. The package does not create a schema.

## Install

```
pip install .
pip install ".[test]"   # also installs pytest
```

## Modules

### `ledgerbook.invoices`

`InvoiceBook(connection)` works with the `Invoices`, `InvoiceDetails`,
`Customers` and `paymentsIn` tables.

- `customers()` returns `(id, name)` pairs, ordered by name.
- `invoices()` returns `Invoice` tuples, newest first, each with the
  customer's name in place of its id.
- `create_invoice(customer_id, today=None)` adds an invoice at 20 % VAT with
  zero discount and total. It numbers the invoice after the last one issued
  (`INV-00001`, `INV-00002`, …) and inserts an unpaid `paymentsIn` record for
  it. It returns the new invoice id.
- `add_detail(invoice_id)` adds an empty line. `update_detail(detail_id,
  quantity, rate)` sets the line amount to quantity × rate and recalculates the
  invoice. `delete_detail(detail_id)` and `delete_invoice(invoice_id)` remove
  rows.
- `details(invoice_id)` returns `InvoiceLine` tuples, newest first.
- `subtotal(invoice_id)` returns the sum of the line amounts.
  `recalculate(invoice_id)` writes `total_discount` and `total` back to the
  invoice and returns them as `InvoiceTotals`. The total is the subtotal plus
  VAT minus discount.

It also has two helpers. `next_invoice_number(last)` gives the number that
follows `last`. `matching_rows(rows, term)` keeps the rows that have a cell
containing `term`, ignoring case.

### `ledgerbook.company`

`CompanyProfile(connection)` holds the single company row in `userInformation`.
That row stores address, contact details and bank details.

- `ensure_default()` inserts placeholder values if no row exists.
- `load()` returns the row as a `dict` of text, without the id.
- `save(info)` writes every field. It requires exactly the names in
  `ledgerbook.company.FIELDS`.

### `ledgerbook.invoice_document`

`InvoiceDocument(connection, invoice_id)` collects everything needed to fill an
invoice template. Creating one makes sure the company profile exists.

- `invoice_summary()`: date, number, VAT, discount, totals, bill-to name,
  subtotal, VAT amount and balance due, all as text.
- `table_rows_html()`: one `<tr>` per invoice line.
- `template_values()`: a mapping from the placeholders `%1` to `%22` to their
  values.
- `document_name()`: `"<customer>-invoice-<number>"`.
- `insert_document(file_name, file_data, today=None)`: stores text in
  `Documents` with its UTF-8 size and date, and returns the row id.

`format_amount(text)` shows a numeric text with grouped thousands and at most
two decimals, dropping trailing zeros. Any other text is returned unchanged.

### `ledgerbook.formatting`

- `format_cell(value)` shows a number with grouped thousands and up to six
  decimals, dropping trailing zeros. It shows other values as text and `None`
  as an empty string.
- `format_fixed(value, decimals)` shows a fixed number of decimals with no
  grouping.

### `ledgerbook.pagination`

These are table models for views.

- `PaginationModel(connection, table_name, selection_query="",
  on_page_update=None)` runs either its selection query or the whole table
  ordered by `ID DESC`. It tracks the page count at 50 rows per page.
  `on_page_update` receives the status text (`"Current Page: N"`) after every
  select.
- `set_filter(condition)` and `filter_by_query(query)` apply a filter for one
  select only and leave the base query untouched.
- `RelationPaginationModel` uses 10 rows per page and selects a single page
  with `LIMIT` and `OFFSET`. It selects as soon as it is created.
- `PaginatedTableModel(connection, table_name, page_size=10)` reads one page at
  a time. Use `set_page_size`, `set_current_page`, `next_page` and
  `previous_page` to move through it.

## Example

```python
import sqlite3
from datetime import date

from ledgerbook.invoices import InvoiceBook

connection = sqlite3.connect("accounts.db")
book = InvoiceBook(connection)

invoice_id = book.create_invoice(customer_id=1, today=date.today())
detail_id = book.add_detail(invoice_id)
totals = book.update_detail(detail_id, quantity=3, rate=12.5)
print(totals.subtotal, totals.total)
```

## Errors

Failures raise the exception of the module concerned: `InvoiceError`,
`ProfileError`, `DocumentError` or `PaginationError`.

## What it does not do

- It is a library only. It has no command, window or server.
- It creates no database schema.
- It does not render HTML or PDF. `InvoiceDocument` supplies the values for an
  invoice template but contains no template of its own.
- It does not list, search or change the status of incoming payments.
  `create_invoice` only inserts the initial unpaid record.
- It does not manage items, vendors or outgoing payments.
- It does not provide dashboard statistics or notes.