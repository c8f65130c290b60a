"""Paged views over SQLite tables."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Optional

PageCallback = Callable[[str], None]


class PaginationError(Exception):
    """Raised when a paged query cannot be run."""


def _run_query(connection: sqlite3.Connection, sql: str) -> tuple[list[str], list[tuple]]:
    try:
        cursor = connection.execute(sql)
        rows = cursor.fetchall()
    except sqlite3.Error as exc:
        raise PaginationError(f"Failed to execute query: {exc}") from exc
    columns = [description[0] for description in cursor.description or ()]
    return columns, rows


def _count_rows(connection: sqlite3.Connection, table_name: str) -> int:
    try:
        row = connection.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()
    except sqlite3.Error as exc:
        raise PaginationError(f"Failed to execute count query: {exc}") from exc
    if row is None:
        raise PaginationError(f"Failed to retrieve row count for {table_name}")
    return int(row[0])


class PaginationModel:
    """A table view that pages through a table or a custom selection query."""

    page_size = 50

    def __init__(
        self,
        connection: sqlite3.Connection,
        table_name: str,
        selection_query: str = "",
        on_page_update: Optional[PageCallback] = None,
    ) -> None:
        self.connection = connection
        self.table_name = table_name
        self.selection_query = selection_query
        self.on_page_update = on_page_update
        self.current_page = 0
        self.total_rows = 0
        self.columns: list[str] = []
        self.rows: list[tuple] = []
        self.column_defaults: dict[str, str] = {}
        self.read_only = False
        self._filtering = False

    def _page_query(self) -> str:
        if self._filtering or self.selection_query:
            query = self.selection_query
        else:
            query = f"SELECT * FROM {self.table_name} ORDER BY ID DESC"
        if "ORDER BY" not in query.upper():
            query += " ORDER BY ID DESC "
        return query

    def select(self) -> None:
        """Count the table's rows and load the current selection."""
        self.total_rows = _count_rows(self.connection, self.table_name)
        self.columns, self.rows = _run_query(self.connection, self._page_query())
        if self.on_page_update is not None:
            self.on_page_update(self.status_text())

    def refresh(self) -> None:
        """Load the data again from the database."""
        self.select()

    def reload(self) -> None:
        """Drop what is loaded and select again."""
        self.columns = []
        self.rows = []
        self.select()

    def page_count(self) -> int:
        return (self.total_rows + self.page_size - 1) // self.page_size

    def next_page(self) -> None:
        if self.current_page < self.page_count() - 1:
            self.current_page += 1
            self.select()

    def previous_page(self) -> None:
        if self.current_page > 0:
            self.current_page -= 1
            self.select()

    def row_count(self) -> int:
        """Number of rows a page shows."""
        return self.page_size

    def data(self, row: int, column: int) -> Any:
        """Value at a row of the current page, or None outside the data."""
        real_row = row + self.current_page * self.page_size
        if row < 0 or column < 0 or real_row >= len(self.rows):
            return None
        values = self.rows[real_row]
        if column >= len(values):
            return None
        return values[column]

    @contextmanager
    def _temporary_query(self, query: str) -> Iterator[None]:
        saved = self.selection_query
        self._filtering = True
        self.selection_query = query
        try:
            yield
        finally:
            self.selection_query = saved
            self._filtering = False

    def _filter_query(self, filter_text: str) -> str:
        if filter_text:
            if not self.selection_query:
                return (
                    f"SELECT * FROM {self.table_name} WHERE {filter_text} ORDER BY ID DESC"
                )
            return self.selection_query + f" WHERE {filter_text}  ORDER BY ID DESC "
        if not self.selection_query:
            return f"SELECT * FROM {self.table_name} ORDER BY ID DESC "
        return self.selection_query

    def set_filter(self, filter_text: str) -> None:
        """Select the rows matching an SQL condition, keeping the base query."""
        with self._temporary_query(self._filter_query(filter_text)):
            self.select()

    def filter_by_query(self, query: str) -> None:
        """Select with a whole query once, keeping the base query."""
        with self._temporary_query(query):
            self.select()

    def status_text(self) -> str:
        return f"Current Page: {self.current_page + 1}"

    def is_editable(self, column: int) -> bool:
        """Whether cells of a column may be edited."""
        return not self.read_only


class RelationPaginationModel(PaginationModel):
    """A paged model that limits each select to one page of rows."""

    page_size = 10

    def __init__(
        self,
        connection: sqlite3.Connection,
        table_name: str,
        selection_query: str = "",
        on_page_update: Optional[PageCallback] = None,
    ) -> None:
        super().__init__(connection, table_name, selection_query, on_page_update)
        self.select()

    def _page_query(self) -> str:
        if self._filtering:
            query = self.selection_query
        else:
            offset = self.current_page * self.page_size
            query = (
                f"SELECT * FROM {self.table_name} ORDER BY ID DESC "
                f"LIMIT {self.page_size} OFFSET {offset}"
            )
        if "ORDER BY ID DESC" not in query.upper():
            query += " ORDER BY ID DESC"
        return query

    def select(self) -> None:
        super().select()

    def _filter_query(self, filter_text: str) -> str:
        if filter_text:
            return f"SELECT * FROM {self.table_name} WHERE {filter_text} ORDER BY ID DESC"
        return f"SELECT * FROM {self.table_name} ORDER BY ID DESC"

    def set_filter(self, filter_text: str) -> None:
        super().set_filter(filter_text)


class PaginatedTableModel:
    """A table read one page at a time with LIMIT and OFFSET."""

    def __init__(
        self, connection: sqlite3.Connection, table_name: str, page_size: int = 10
    ) -> None:
        self.connection = connection
        self.table_name = table_name
        self._page_size = page_size
        self._current_page = 0
        self.columns: list[str] = []
        self.rows: list[tuple] = []

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    def set_page_size(self, page_size: int) -> None:
        self._page_size = page_size
        self.select()

    def set_current_page(self, page: int) -> None:
        if page >= 0 and page != self._current_page:
            self._current_page = page
            self.select()

    def next_page(self) -> None:
        self.set_current_page(self._current_page + 1)

    def previous_page(self) -> None:
        if self._current_page > 0:
            self.set_current_page(self._current_page - 1)

    def select(self) -> None:
        """Load the rows of the current page."""
        offset = self._current_page * self._page_size
        query = f"SELECT * FROM {self.table_name} LIMIT {self._page_size} OFFSET {offset}"
        self.columns, self.rows = _run_query(self.connection, query)