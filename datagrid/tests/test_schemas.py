"""Unit tests for query result adaptation and table defaults."""

from __future__ import annotations

import pytest

from datagrid.errors import MalformedResultError
from datagrid.schemas import (
    DataResult,
    ItemsResult,
    PaginationInfo,
    QueryParams,
    RowListResult,
    adapt_query_result,
    default_table_state,
    parse_query_result,
)


class TestAdaptQueryResult:
    """Each accepted executor shape maps to the canonical page."""

    def test_bare_list(self):
        page = adapt_query_result([{"id": 1}, {"id": 2}])
        assert page.rows == [{"id": 1}, {"id": 2}]
        assert page.total == 2

    def test_tuple_counts_as_row_sequence(self):
        page = adapt_query_result(({"id": 1},))
        assert page.rows == [{"id": 1}]
        assert page.total == 1

    def test_items_with_total(self):
        page = adapt_query_result({"items": [{"id": 1}], "total": 5})
        assert page.rows == [{"id": 1}]
        assert page.total == 5

    def test_data_with_total(self):
        page = adapt_query_result({"data": [{"id": 7}], "total": 40})
        assert page.rows == [{"id": 7}]
        assert page.total == 40

    def test_items_win_over_data(self):
        page = adapt_query_result({"items": [1], "data": [2, 3], "total": 9})
        assert page.rows == [1]

    def test_none_items_fall_back_to_data(self):
        page = adapt_query_result({"items": None, "data": [2, 3], "total": 2})
        assert page.rows == [2, 3]

    def test_missing_total_is_zero(self):
        assert adapt_query_result({"items": [1, 2]}).total == 0
        assert adapt_query_result({"items": [1, 2], "total": None}).total == 0

    def test_mapping_without_rows_is_empty_page(self):
        page = adapt_query_result({"total": 3})
        assert page.rows == []
        assert page.total == 3

    def test_numeric_string_total_is_coerced(self):
        assert adapt_query_result({"items": [], "total": "7"}).total == 7

    @pytest.mark.parametrize("raw", [None, "rows", b"rows", 42, object()])
    def test_unsupported_types_are_malformed(self, raw):
        with pytest.raises(MalformedResultError):
            adapt_query_result(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            {"items": "not-a-list", "total": 1},
            {"data": {"id": 1}},
            {"items": [], "total": "many"},
        ],
    )
    def test_wrong_field_types_are_malformed(self, raw):
        with pytest.raises(MalformedResultError):
            adapt_query_result(raw)


def test_parse_query_result_tags_the_shape() -> None:
    assert isinstance(parse_query_result([]), RowListResult)
    assert isinstance(parse_query_result({"items": []}), ItemsResult)
    assert isinstance(parse_query_result({"data": []}), DataResult)
    assert parse_query_result({"data": []}).kind == "data"


def test_query_params_defaults() -> None:
    params = QueryParams(page=PaginationInfo(current_page=2, page_size=10, total=0))
    assert params.form == {}
    assert params.sort == {}
    assert params.page.current_page == 2


def test_default_table_state() -> None:
    state = default_table_state()
    pager = state["grid_options"]["pager_config"]
    assert pager["enabled"] is True
    assert pager["current_page"] == 1
    assert pager["total"] == 0
    assert state["grid_options"]["proxy_config"]["auto_load"] is True
    assert state["show_search_form"] is True
    # every call returns independent containers
    pager["page_sizes"].append(1000)
    assert 1000 not in default_table_state()["grid_options"]["pager_config"]["page_sizes"]
