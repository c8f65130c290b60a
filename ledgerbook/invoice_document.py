"""An invoice laid out for printing, and its storage among the documents."""

from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .company import CompanyProfile
from .formatting import format_fixed


class DocumentError(Exception):
    """Raised when an invoice document cannot be read or stored."""


def _parse_number(text: str) -> Optional[float]:
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        return float(stripped)
    except ValueError:
        return None


def _grouped(number: float) -> str:
    return f"{number:,.2f}".rstrip("0")


def format_amount(text: str) -> str:
    """Show a numeric text with two grouped decimals, trailing zeros dropped.

    Text that is not a plain number is returned unchanged.
    """
    number = _parse_number(text)
    if number is None:
        return text
    return _grouped(number)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _real(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        parsed = _parse_number(value)
        return 0.0 if parsed is None else parsed
    return 0.0


def _whole(value: Any) -> int:
    number = _real(value)
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number + 0.5) if number >= 0 else int(number - 0.5)


@dataclass(frozen=True)
class InvoiceSummary:
    """The invoice fields shown on a printed invoice, as text."""

    date: str
    invoice_number: str
    vat: str
    discount: str
    total_discount: str
    total: str
    bill_to: str
    subtotal: str
    vat_amount: str
    balance_due: str


class InvoiceDocument:
    """One invoice with the company profile, ready to fill an invoice template."""

    def __init__(self, connection: sqlite3.Connection, invoice_id: int) -> None:
        self.connection = connection
        self.invoice_id = invoice_id
        self.profile = CompanyProfile(connection)
        self.profile.ensure_default()
        self.company = self.profile.load()
        self.saved_once = False

    def _invoice_record(self) -> dict[str, str]:
        try:
            cursor = self.connection.execute(
                "SELECT * FROM invoices inv, customers cst "
                "WHERE inv.id = ? AND inv.customer_id = cst.id",
                (self.invoice_id,),
            )
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise DocumentError(f"Query failed loadCustomerData: {exc}") from exc
        if row is None:
            return {}
        record: dict[str, str] = {}
        for description, value in zip(cursor.description, row):
            record[description[0]] = _text(value)
        return record

    def invoice_summary(self) -> InvoiceSummary:
        """The invoice's fields; blank where the invoice does not exist."""
        record = self._invoice_record()
        field = lambda name: format_amount(record.get(name, ""))  # noqa: E731
        subtotal = self.subtotal()
        vat_percent = _parse_number(field("vat")) or 0.0
        vat_amount = vat_percent / 100 * subtotal
        return InvoiceSummary(
            date=field("date"),
            invoice_number=field("invoice_id"),
            vat=field("vat"),
            discount=field("discount"),
            total_discount=field("total_discount"),
            total=field("total"),
            bill_to=record.get("name", ""),
            subtotal=format_amount(_grouped(subtotal)),
            vat_amount=format_amount(_grouped(vat_amount)),
            balance_due=field("total"),
        )

    def subtotal(self) -> float:
        """Sum of the amounts of the invoice's lines."""
        try:
            row = self.connection.execute(
                "SELECT SUM(amount) FROM InvoiceDetails WHERE invoice_id = ?",
                (self.invoice_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise DocumentError(
                f"Failed to calculate the sum of the current row: {exc}"
            ) from exc
        return 0.0 if row is None else _real(row[0])

    def vat_amount(self) -> float:
        """VAT on the subtotal at the invoice's VAT rate."""
        vat_percent = _parse_number(self.invoice_summary().vat) or 0.0
        return vat_percent / 100 * self.subtotal()

    def table_rows_html(self) -> str:
        """HTML table rows for the invoice's lines."""
        try:
            cursor = self.connection.execute(
                "SELECT * FROM InvoiceDetails WHERE invoice_id = ?", (self.invoice_id,)
            )
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            raise DocumentError(f"Failed to read invoice lines: {exc}") from exc
        names = [description[0].lower() for description in cursor.description]
        parts = []
        for row in rows:
            line = dict(zip(names, row))
            parts.append(
                "<tr>"
                f"<td>{_text(line.get('products'))}</td>"
                f"<td class='quantity' >{_whole(line.get('quantity'))}</td>"
                f"<td class='rate'>{format_fixed(_real(line.get('rate')), 2)}</td>"
                f"<td class='amount' >{format_fixed(_real(line.get('amount')), 2)}</td>"
                "</tr>"
            )
        return "".join(parts)

    def template_values(self) -> dict[str, str]:
        """Values for the invoice template's placeholders %1 to %22."""
        summary = self.invoice_summary()
        company = self.company
        ordered = (
            company.get("address", ""),
            company.get("post_number", ""),
            company.get("vat_number", ""),
            company.get("mobile", ""),
            company.get("phone", ""),
            company.get("email", ""),
            company.get("website", ""),
            summary.date,
            summary.invoice_number,
            summary.bill_to,
            self.table_rows_html(),
            company.get("accountNumber", ""),
            company.get("sort_code", ""),
            company.get("bank_name", ""),
            company.get("bank_address", ""),
            summary.subtotal,
            summary.vat,
            summary.vat_amount,
            summary.discount,
            summary.total_discount,
            summary.total,
            summary.balance_due,
        )
        return {f"%{number}": value for number, value in enumerate(ordered, start=1)}

    def document_name(self) -> str:
        """The name the invoice is saved under."""
        summary = self.invoice_summary()
        return f"{summary.bill_to}-invoice-{summary.invoice_number}"

    def insert_document(
        self, file_name: str, file_data: str, today: Optional[date] = None
    ) -> int:
        """Store a document and return its row id."""
        size = len(file_data.encode("utf-8"))
        file_date = (today or date.today()).isoformat()
        try:
            with self.connection:
                cursor = self.connection.execute(
                    "INSERT INTO Documents (FileName, FileSize, FileDate, FileData) "
                    "VALUES (?, ?, ?, ?)",
                    (file_name, size, file_date, file_data),
                )
        except sqlite3.Error as exc:
            raise DocumentError(f"Error inserting document: {exc}") from exc
        self.saved_once = True
        return int(cursor.lastrowid)