"""Invoicing on SQLite: invoices and totals, company profile, invoice documents and paged tables."""

__version__ = "0.1.0"