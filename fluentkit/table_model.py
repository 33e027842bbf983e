"""A table of rows held as dictionaries, with column descriptions."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable, Mapping

__all__ = ["TableRole", "TableModel"]


class TableRole(IntEnum):
    """Data roles the table model answers."""

    ROW_MODEL = 0x0101
    COLUMN_MODEL = 0x0102


class TableModel:
    """Rows of mappings, plus a list of column descriptions."""

    def __init__(
        self,
        column_source: Iterable[Mapping[str, Any]] | None = None,
        rows: Iterable[Mapping[str, Any]] | None = None,
    ) -> None:
        self._column_source = [dict(c) for c in column_source or ()]
        self._rows = [dict(r) for r in rows or ()]
        self._revision = 0

    @property
    def revision(self) -> int:
        """A counter that grows every time the rows or columns change."""
        return self._revision

    def _touch(self) -> None:
        self._revision += 1

    @property
    def column_source(self) -> list[dict[str, Any]]:
        return self._column_source

    @column_source.setter
    def column_source(self, value: Iterable[Mapping[str, Any]]) -> None:
        self._column_source = [dict(c) for c in value]
        self._touch()

    @property
    def rows(self) -> list[dict[str, Any]]:
        return self._rows

    @rows.setter
    def rows(self, value: Iterable[Mapping[str, Any]]) -> None:
        self._rows = [dict(r) for r in value]
        self._touch()

    def _check_row(self, row_index: int) -> None:
        if not 0 <= row_index < len(self._rows):
            raise IndexError(f"row index {row_index} out of range")

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return len(self._column_source)

    def data(self, row: int, column: int, role: int) -> dict[str, Any] | None:
        """Return the row mapping or column description for ``role``; None for others."""
        if role == TableRole.ROW_MODEL:
            self._check_row(row)
            return self._rows[row]
        if role == TableRole.COLUMN_MODEL:
            if not 0 <= column < len(self._column_source):
                raise IndexError(f"column index {column} out of range")
            return self._column_source[column]
        return None

    def role_names(self) -> dict[int, str]:
        return {TableRole.ROW_MODEL: "rowModel", TableRole.COLUMN_MODEL: "columnModel"}

    def clear(self) -> None:
        self._rows = []
        self._touch()

    def get_row(self, row_index: int) -> dict[str, Any]:
        self._check_row(row_index)
        return self._rows[row_index]

    def set_row(self, row_index: int, row: Mapping[str, Any]) -> None:
        self._check_row(row_index)
        self._rows[row_index] = dict(row)
        self._touch()

    def insert_row(self, row_index: int, row: Mapping[str, Any]) -> None:
        if not 0 <= row_index <= len(self._rows):
            raise IndexError(f"insert position {row_index} out of range")
        self._rows.insert(row_index, dict(row))
        self._touch()

    def remove_row(self, row_index: int, rows: int = 1) -> None:
        """Remove ``rows`` consecutive rows starting at ``row_index``."""
        if rows < 1:
            raise ValueError("rows must be at least 1")
        if row_index < 0 or row_index + rows > len(self._rows):
            raise IndexError(f"cannot remove {rows} rows at {row_index}")
        self._rows = self._rows[:row_index] + self._rows[row_index + rows:]
        self._touch()

    def append_row(self, row: Mapping[str, Any]) -> None:
        self.insert_row(self.row_count(), row)