"""Invoices, their detail lines and the totals derived from them."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, NamedTuple, Optional

INVOICE_PREFIX = "INV-"
FIRST_INVOICE_NUMBER = "INV-00001"
DEFAULT_VAT = 20


class InvoiceError(Exception):
    """Raised when an invoice or one of its lines cannot be read or written."""


class Invoice(NamedTuple):
    """An invoice as listed, with the customer's name in place of its id."""

    id: int
    customer: str
    date: str
    invoice_number: str
    vat: float
    discount: float
    total_discount: float
    total: float


class InvoiceLine(NamedTuple):
    """One line of an invoice, with the invoice number in place of its id."""

    id: int
    invoice_number: str
    products: str
    quantity: float
    rate: float
    amount: float
    comment: str


class InvoiceTotals(NamedTuple):
    """The amounts written back to an invoice after recalculation."""

    subtotal: float
    total_discount: float
    total: float


def next_invoice_number(last_invoice_number: Optional[str]) -> str:
    """The invoice number that follows the last one issued."""
    if last_invoice_number is None:
        return FIRST_INVOICE_NUMBER
    try:
        number = int(str(last_invoice_number)[len(INVOICE_PREFIX):])
    except ValueError:
        number = 0
    return f"{INVOICE_PREFIX}{number + 1:05d}"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matching_rows(rows: Iterable[Sequence[Any]], term: str) -> list[Sequence[Any]]:
    """Rows with a cell containing the term, ignoring case."""
    needle = term.casefold()
    return [row for row in rows if any(needle in _text(cell).casefold() for cell in row)]


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class InvoiceBook:
    """Invoices stored in an SQLite database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def _fetch(self, sql: str, parameters: Sequence[Any] = ()) -> list[tuple]:
        try:
            return self.connection.execute(sql, parameters).fetchall()
        except sqlite3.Error as exc:
            raise InvoiceError(str(exc)) from exc

    def customers(self) -> list[tuple[int, str]]:
        """Customers to choose from, by name."""
        return [
            (int(row[0]), _text(row[1]))
            for row in self._fetch("SELECT id, name FROM customers ORDER BY name")
        ]

    def invoices(self) -> list[Invoice]:
        """All invoices, newest first."""
        rows = self._fetch(
            "SELECT Invoices.id, Customers.name, Invoices.date, Invoices.invoice_id, "
            "Invoices.vat, Invoices.discount, Invoices.total_discount, Invoices.total "
            "FROM Invoices JOIN Customers ON Invoices.customer_id = Customers.id "
            "ORDER BY Invoices.id DESC"
        )
        return [Invoice(*row) for row in rows]

    def create_invoice(self, customer_id: int, today: Optional[date] = None) -> int:
        """Add an empty invoice and its pending payment; return the invoice id."""
        issued = (today or date.today()).isoformat()
        try:
            with self.connection:
                last = self.connection.execute(
                    "SELECT invoice_id FROM Invoices ORDER BY id DESC LIMIT 1"
                ).fetchone()
                number = next_invoice_number(None if last is None else _text(last[0]))
                cursor = self.connection.execute(
                    "INSERT INTO Invoices "
                    "(customer_id, date, invoice_id, vat, discount, total_discount, total) "
                    "VALUES (?, ?, ?, ?, 0, 0, 0)",
                    (customer_id, issued, number, DEFAULT_VAT),
                )
                invoice_id = cursor.lastrowid
                self.connection.execute(
                    "INSERT INTO paymentsIn (invoice_id, date, paid) VALUES (?, ?, 0)",
                    (invoice_id, issued),
                )
        except sqlite3.Error as exc:
            raise InvoiceError(f"Failed to insert new invoice record: {exc}") from exc
        return int(invoice_id)

    def _delete(self, table: str, row_id: int) -> None:
        try:
            with self.connection:
                cursor = self.connection.execute(
                    f"DELETE FROM {table} WHERE id = ?", (row_id,)
                )
        except sqlite3.Error as exc:
            raise InvoiceError(f"Failed to delete row from database: {exc}") from exc
        if cursor.rowcount == 0:
            raise InvoiceError(f"No row {row_id} in {table}")

    def delete_invoice(self, invoice_id: int) -> None:
        """Remove an invoice."""
        self._delete("Invoices", invoice_id)

    def details(self, invoice_id: int) -> list[InvoiceLine]:
        """Lines of an invoice, newest first."""
        rows = self._fetch(
            "SELECT d.id, i.invoice_id, d.products, d.quantity, d.rate, d.amount, d.comment "
            "FROM InvoiceDetails d JOIN Invoices i ON d.invoice_id = i.id "
            "WHERE d.invoice_id = ? ORDER BY d.id DESC",
            (invoice_id,),
        )
        return [InvoiceLine(*row) for row in rows]

    def add_detail(self, invoice_id: Optional[int]) -> int:
        """Add an empty line to an invoice; return the line id."""
        if not invoice_id:
            raise InvoiceError("Please select a Invoice.")
        try:
            with self.connection:
                cursor = self.connection.execute(
                    "INSERT INTO InvoiceDetails "
                    "(invoice_id, products, quantity, rate, amount, comment) "
                    "VALUES (?, '', 0, 0.0, 0.0, ' ')",
                    (invoice_id,),
                )
        except sqlite3.Error as exc:
            raise InvoiceError(f"Failed to insert new row: {exc}") from exc
        return int(cursor.lastrowid)

    def update_detail(self, detail_id: int, quantity: float, rate: float) -> InvoiceTotals:
        """Set a line's quantity and rate, then recalculate its invoice."""
        found = self._fetch(
            "SELECT invoice_id FROM InvoiceDetails WHERE id = ?", (detail_id,)
        )
        if not found:
            raise InvoiceError(f"No invoice line {detail_id}")
        amount = float(quantity) * float(rate)
        try:
            with self.connection:
                self.connection.execute(
                    "UPDATE InvoiceDetails SET quantity = ?, rate = ?, amount = ? WHERE id = ?",
                    (quantity, rate, amount, detail_id),
                )
        except sqlite3.Error as exc:
            raise InvoiceError(f"Failed to save changes to invoice details: {exc}") from exc
        return self.recalculate(found[0][0])

    def delete_detail(self, detail_id: int) -> None:
        """Remove a line of an invoice."""
        self._delete("InvoiceDetails", detail_id)

    def subtotal(self, invoice_id: int) -> float:
        """Sum of the amounts of an invoice's lines."""
        rows = self._fetch(
            "SELECT SUM(amount) FROM InvoiceDetails WHERE invoice_id = ?", (invoice_id,)
        )
        return _number(rows[0][0]) if rows else 0.0

    def recalculate(self, invoice_id: int) -> InvoiceTotals:
        """Write an invoice's discount and total from its lines, VAT and discount."""
        found = self._fetch(
            "SELECT vat, discount FROM Invoices WHERE id = ?", (invoice_id,)
        )
        if not found:
            raise InvoiceError(f"No invoice {invoice_id}")
        vat, discount = (_number(value) for value in found[0])
        subtotal = self.subtotal(invoice_id)
        total_discount = discount / 100 * subtotal
        total = subtotal + vat / 100 * subtotal - total_discount
        try:
            with self.connection:
                self.connection.execute(
                    "UPDATE Invoices SET total_discount = ?, total = ? WHERE id = ?",
                    (total_discount, total, invoice_id),
                )
        except sqlite3.Error as exc:
            raise InvoiceError(f"Failed to save changes to invoices: {exc}") from exc
        return InvoiceTotals(subtotal, total_discount, total)