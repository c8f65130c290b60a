"""The company details printed on every invoice."""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping

PROFILE_ID = 1

FIELDS = (
    "address",
    "post_number",
    "vat_number",
    "mobile",
    "phone",
    "email",
    "website",
    "accountNumber",
    "sort_code",
    "bank_name",
    "bank_address",
)

DEFAULT_PROFILE = {
    "address": "123 Main St",
    "post_number": "12345",
    "vat_number": "VAT123456",
    "mobile": "555-1234",
    "phone": "555-5678",
    "email": "user@example.com",
    "website": "www.example.com",
    "accountNumber": "12345678",
    "sort_code": "1234",
    "bank_name": "Example Bank",
    "bank_address": "Bank Address",
}


class ProfileError(Exception):
    """Raised when the company profile cannot be read or written."""


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CompanyProfile:
    """The single row of company information kept in ``userInformation``."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def ensure_default(self) -> None:
        """Insert the placeholder profile unless one already exists."""
        columns = ", ".join(("id",) + FIELDS)
        placeholders = ", ".join("?" for _ in range(len(FIELDS) + 1))
        values = (PROFILE_ID,) + tuple(DEFAULT_PROFILE[field] for field in FIELDS)
        sql = (
            f"INSERT INTO userInformation ({columns}) SELECT {placeholders} "
            "WHERE NOT EXISTS (SELECT 1 FROM userInformation WHERE id = ?)"
        )
        try:
            with self.connection:
                self.connection.execute(sql, values + (PROFILE_ID,))
        except sqlite3.Error as exc:
            raise ProfileError(f"Query failed: {exc}") from exc

    def load(self) -> dict[str, str]:
        """The stored profile as text by column, without its id; empty if absent."""
        try:
            cursor = self.connection.execute(
                "SELECT * FROM userInformation WHERE id = ?", (PROFILE_ID,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise ProfileError(f"Query failed: {exc}") from exc
        if row is None:
            return {}
        names = [description[0] for description in cursor.description]
        return {
            name: _text(value)
            for name, value in zip(names, row)
            if name.lower() != "id"
        }

    def save(self, info: Mapping[str, str]) -> None:
        """Write every profile field from a mapping of column to text."""
        unknown = sorted(set(info) - set(FIELDS))
        if unknown:
            raise ProfileError(f"Unknown profile fields: {', '.join(unknown)}")
        missing = [field for field in FIELDS if field not in info]
        if missing:
            raise ProfileError(f"Missing profile fields: {', '.join(missing)}")
        assignments = ", ".join(f"{field} = ?" for field in FIELDS)
        values = tuple(info[field] for field in FIELDS)
        try:
            with self.connection:
                self.connection.execute(
                    f"UPDATE userInformation SET {assignments} WHERE id = ?",
                    values + (PROFILE_ID,),
                )
        except sqlite3.Error as exc:
            raise ProfileError(f"Query failed: {exc}") from exc