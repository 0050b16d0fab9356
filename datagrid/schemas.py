"""Schemas for table state, query parameters and query results."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Annotated, Any, Literal, TypedDict, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from datagrid import config
from datagrid.errors import MalformedResultError


# ---------------------------------------------------------------------------
# Query parameters -----------------------------------------------------------
# ---------------------------------------------------------------------------


class PaginationInfo(BaseModel):
    """Current page position of a table."""

    current_page: int = Field(default=1, description="1-based page index")
    page_size: int = Field(default=config.DEFAULT_PAGE_SIZE, description="Rows per page")
    total: int = Field(default=0, description="Total rows reported by the executor")


class QueryParams(BaseModel):
    """Arguments handed to the query executor on every reload."""

    page: PaginationInfo = Field(default_factory=PaginationInfo)
    form: dict[str, Any] = Field(
        default_factory=dict, description="Search form values merged with explicit params"
    )
    sort: dict[str, Any] = Field(default_factory=dict, description="Reserved, always empty")


class QueryAllParams(TypedDict):
    """Arguments handed to the ``query_all`` executor."""

    form: dict[str, Any]
    sort: dict[str, Any]


QueryExecutor = Callable[[QueryParams], Union[Awaitable[Any], Any]]
QueryAllExecutor = Callable[[QueryAllParams], Union[Awaitable[Any], Any]]


# ---------------------------------------------------------------------------
# Table state ----------------------------------------------------------------
# ---------------------------------------------------------------------------


class AjaxConfig(TypedDict, total=False):
    query: QueryExecutor
    query_all: QueryAllExecutor


class ProxyConfig(TypedDict, total=False):
    enabled: bool
    auto_load: bool
    ajax: AjaxConfig


class PagerConfig(TypedDict, total=False):
    enabled: bool
    page_size: int
    page_sizes: list[int]
    current_page: int
    total: int
    layout: str
    background: bool


class ToolbarConfig(TypedDict, total=False):
    title: str
    search: bool  # show the search-form toggle button
    refresh: bool
    zoom: bool
    custom: bool  # column settings
    tools: list[Any]


class GridOptions(TypedDict, total=False):
    columns: list[Any]
    data: list[Any]
    proxy_config: ProxyConfig
    pager_config: PagerConfig
    toolbar_config: ToolbarConfig
    height: int | str


class SeparatorOptions(TypedDict, total=False):
    background_color: str
    show: bool


# ``class`` is a keyword, hence the functional syntax
TableState = TypedDict(
    "TableState",
    {
        "class": str,
        "grid_class": str,
        "table_title": str,
        "table_title_help": str,
        "grid_options": GridOptions,
        "grid_events": dict[str, Callable[..., Any]],
        "form_options": dict[str, Any],
        "show_search_form": bool,
        "separator": Union[bool, SeparatorOptions],
    },
    total=False,
)


def default_table_state() -> TableState:
    """Return the defaults every table starts from."""
    return {
        "class": "",
        "grid_class": "",
        "grid_options": {
            "proxy_config": {"auto_load": True},
            "pager_config": {
                "enabled": True,
                "page_size": config.DEFAULT_PAGE_SIZE,
                "page_sizes": list(config.DEFAULT_PAGE_SIZES),
                "current_page": 1,
                "total": 0,
            },
        },
        "grid_events": {},
        "form_options": None,
        "show_search_form": True,
    }


# ---------------------------------------------------------------------------
# Query results --------------------------------------------------------------
# ---------------------------------------------------------------------------


class QueryPage(BaseModel):
    """Canonical page of rows written into the table view state."""

    rows: list[Any] = Field(default_factory=list)
    total: int = 0


class RowListResult(BaseModel):
    """Executor returned a bare sequence of rows."""

    kind: Literal["rows"] = "rows"
    rows: list[Any]

    def to_page(self) -> QueryPage:
        return QueryPage(rows=self.rows, total=len(self.rows))


class ItemsResult(BaseModel):
    """Executor returned ``{"items": [...], "total": n}``."""

    kind: Literal["items"] = "items"
    items: list[Any] = Field(default_factory=list)
    total: int = 0

    def to_page(self) -> QueryPage:
        return QueryPage(rows=self.items, total=self.total)


class DataResult(BaseModel):
    """Executor returned ``{"data": [...], "total": n}``."""

    kind: Literal["data"] = "data"
    data: list[Any]
    total: int = 0

    def to_page(self) -> QueryPage:
        return QueryPage(rows=self.data, total=self.total)


QueryResult = Annotated[
    Union[RowListResult, ItemsResult, DataResult], Field(discriminator="kind")
]

_QUERY_RESULT_ADAPTER: TypeAdapter[QueryResult] = TypeAdapter(QueryResult)


def _tag_result(raw: Any) -> dict[str, Any]:
    """Classify a raw executor response into a tagged payload."""
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        return {"kind": "rows", "rows": list(raw)}

    if isinstance(raw, Mapping):
        total = raw.get("total")
        total = 0 if total is None else total
        if raw.get("items") is not None:
            return {"kind": "items", "items": raw["items"], "total": total}
        if raw.get("data") is not None:
            return {"kind": "data", "data": raw["data"], "total": total}
        # A mapping without rows is an empty page, not a malformed one
        return {"kind": "items", "items": [], "total": total}

    raise MalformedResultError(
        f"Query executor returned unsupported type {type(raw).__name__}; "
        "expected a row sequence or a mapping with 'items'/'data' and 'total'"
    )


def parse_query_result(raw: Any) -> RowListResult | ItemsResult | DataResult:
    """Validate a raw executor response into one of the tagged result models.

    Raises:
        MalformedResultError: If the response shape is not recognised or its
            fields have the wrong types (e.g. ``items`` is not a list).
    """
    payload = _tag_result(raw)
    try:
        return _QUERY_RESULT_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise MalformedResultError(f"Invalid {payload['kind']} result: {exc}") from exc


def adapt_query_result(raw: Any) -> QueryPage:
    """Convert a raw executor response into a :class:`QueryPage`.

    Examples:
        >>> adapt_query_result([{"id": 1}, {"id": 2}]).total
        2
        >>> adapt_query_result({"items": [{"id": 1}], "total": 5}).total
        5
    """
    return parse_query_result(raw).to_page()


__all__ = [
    "AjaxConfig",
    "DataResult",
    "GridOptions",
    "ItemsResult",
    "PagerConfig",
    "PaginationInfo",
    "ProxyConfig",
    "QueryAllExecutor",
    "QueryAllParams",
    "QueryExecutor",
    "QueryPage",
    "QueryParams",
    "QueryResult",
    "RowListResult",
    "SeparatorOptions",
    "TableState",
    "ToolbarConfig",
    "adapt_query_result",
    "default_table_state",
    "parse_query_result",
]
