import pytest

from fluentkit.sort_proxy import SortOrder, TableSortProxyModel
from fluentkit.table_model import TableModel


def _model():
    return TableModel(
        column_source=[{"title": "age"}],
        rows=[{"age": 3}, {"age": 1}, {"age": 2}],
    )


def _ages(proxy):
    return [proxy.get_row(i)["age"] for i in range(proxy.row_count())]


def test_without_comparator_keeps_source_order():
    model = _model()
    proxy = TableSortProxyModel(model)
    assert _ages(proxy) == [r["age"] for r in model.rows]
    assert proxy.sort_order == SortOrder.ASCENDING
    assert proxy.sort_column == -1


def test_first_comparator_call_sorts_descending():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_comparator(lambda l, r: model.get_row(l)["age"] < model.get_row(r)["age"])
    assert proxy.sort_order == SortOrder.DESCENDING
    assert proxy.sort_column == 0
    ages = _ages(proxy)
    assert ages == sorted(ages, reverse=True)


def test_comparator_calls_toggle_order():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_comparator(lambda l, r: l < r)
    proxy.set_comparator(lambda l, r: l < r)
    assert proxy.sort_order == SortOrder.ASCENDING


def test_clearing_comparator_restores_source_order():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_comparator(lambda l, r: model.get_row(l)["age"] < model.get_row(r)["age"])
    proxy.set_comparator(None)
    assert proxy.sort_column == -1
    assert _ages(proxy) == [r["age"] for r in model.rows]


def test_filter_and_mapping():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_filter(lambda row: model.get_row(row)["age"] != 1)
    assert proxy.row_count() == 2
    assert [proxy.map_to_source(i) for i in range(2)] == [0, 2]
    with pytest.raises(IndexError):
        proxy.map_to_source(2)


def test_set_row_goes_to_mapped_source_row():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_filter(lambda row: row != 0)
    proxy.set_row(0, {"age": 9})
    assert model.get_row(1) == {"age": 9}


def test_remove_and_insert_through_proxy():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_filter(lambda row: row != 0)
    proxy.remove_row(0, 1)
    assert model.rows == [{"age": 3}, {"age": 2}]
    proxy.insert_row(0, {"age": 7})
    assert model.rows == [{"age": 3}, {"age": 7}, {"age": 2}]


def test_source_changes_resort():
    model = _model()
    proxy = TableSortProxyModel(model)
    proxy.set_comparator(lambda l, r: model.get_row(l)["age"] < model.get_row(r)["age"])
    model.append_row({"age": 10})
    ages = _ages(proxy)
    assert ages[0] == 10
    assert ages == sorted(ages, reverse=True)


def test_no_model():
    proxy = TableSortProxyModel()
    assert proxy.row_count() == 0
    with pytest.raises(RuntimeError):
        proxy.get_row(0)