"""A filtering and sorting view over a TableModel."""

from __future__ import annotations

from enum import IntEnum
from functools import cmp_to_key
from typing import Any, Callable, Mapping

from fluentkit.table_model import TableModel

__all__ = ["SortOrder", "TableSortProxyModel"]

Comparator = Callable[[int, int], Any]
RowFilter = Callable[[int], Any]


class SortOrder(IntEnum):
    ASCENDING = 0
    DESCENDING = 1


class TableSortProxyModel:
    """Shows the rows of a model that a filter accepts, in comparator order.

    The comparator and filter receive source row indexes. Every call to
    :meth:`set_comparator` flips the sort order.
    """

    def __init__(self, model: TableModel | None = None) -> None:
        self._model = model
        self._filter: RowFilter | None = None
        self._comparator: Comparator | None = None
        self._sort_column = -1
        self._sort_order = SortOrder.ASCENDING
        self._mapping: list[int] | None = None
        self._seen_revision: int | None = None

    @property
    def model(self) -> TableModel | None:
        return self._model

    @model.setter
    def model(self, value: TableModel | None) -> None:
        self._model = value
        self._mapping = None

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def sort_column(self) -> int:
        return self._sort_column

    def filter_accepts_row(self, source_row: int) -> bool:
        if self._filter is None:
            return True
        return bool(self._filter(source_row))

    def less_than(self, source_left: int, source_right: int) -> bool:
        if self._comparator is None:
            return True
        flag = bool(self._comparator(source_left, source_right))
        if self._sort_order == SortOrder.ASCENDING:
            return not flag
        return flag

    def sort(self, column: int, order: SortOrder = SortOrder.ASCENDING) -> None:
        """Sort by ``column``; a negative column keeps the source order."""
        self._sort_column = column
        self._sort_order = SortOrder(order)
        self._mapping = None

    def _source(self) -> TableModel:
        if self._model is None:
            raise RuntimeError("no source model is set")
        return self._model

    def _build_mapping(self, model: TableModel) -> list[int]:
        rows = [r for r in range(model.row_count()) if self.filter_accepts_row(r)]
        if 0 <= self._sort_column < model.column_count():
            if self._sort_order == SortOrder.ASCENDING:
                def before(a: int, b: int) -> bool:
                    return self.less_than(a, b)
            else:
                def before(a: int, b: int) -> bool:
                    return self.less_than(b, a)

            def compare(a: int, b: int) -> int:
                if before(a, b):
                    return -1
                if before(b, a):
                    return 1
                return 0

            rows.sort(key=cmp_to_key(compare))
        return rows

    def _rows(self) -> list[int]:
        if self._model is None:
            return []
        if self._mapping is None or self._seen_revision != self._model.revision:
            self._mapping = self._build_mapping(self._model)
            self._seen_revision = self._model.revision
        return self._mapping

    def row_count(self) -> int:
        return len(self._rows())

    def map_to_source(self, row_index: int) -> int:
        """Return the source row shown at ``row_index``."""
        rows = self._rows()
        if not 0 <= row_index < len(rows):
            raise IndexError(f"row index {row_index} out of range")
        return rows[row_index]

    def set_comparator(self, comparator: Comparator | None) -> None:
        column = -1 if comparator is None else 0
        self._comparator = comparator
        if self._sort_order == SortOrder.ASCENDING:
            self.sort(column, SortOrder.DESCENDING)
        else:
            self.sort(column, SortOrder.ASCENDING)

    def set_filter(self, filter_func: RowFilter | None) -> None:
        self._filter = filter_func
        self._mapping = None

    def get_row(self, row_index: int) -> dict[str, Any]:
        model = self._source()
        return model.get_row(self.map_to_source(row_index))

    def set_row(self, row_index: int, value: Mapping[str, Any]) -> None:
        model = self._source()
        model.set_row(self.map_to_source(row_index), value)

    def insert_row(self, row_index: int, value: Mapping[str, Any]) -> None:
        model = self._source()
        model.insert_row(self.map_to_source(row_index), value)

    def remove_row(self, row_index: int, rows: int = 1) -> None:
        model = self._source()
        model.remove_row(self.map_to_source(row_index), rows)