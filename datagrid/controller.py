"""Table controller: pagination, search form values and remote loading.

The controller owns two stores:

* ``store`` holds the table configuration (:class:`~datagrid.schemas.TableState`).
  ``grid_options.pager_config`` inside it is the only place pagination is kept;
  :attr:`TableController.pagination` is derived from it on read.
* ``view`` holds what the rendering layer displays: ``loading``, ``rows`` and
  ``total``.

Usage:
uv run -m datagrid.controller
"""

# %%
from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypedDict, TypeVar

from datagrid import config
from datagrid.errors import MissingFetchFunctionError
from datagrid.form_bridge import FormProvider, ReadyCondition, read_form_values
from datagrid.merge import merge_with_array_override
from datagrid.schemas import (
    PaginationInfo,
    QueryAllParams,
    QueryPage,
    QueryParams,
    TableState,
    adapt_query_result,
    default_table_state,
)
from datagrid.store import Store


logger = logging.getLogger(__name__)

T = TypeVar("T")

StateUpdater = Callable[[TableState], Mapping[str, Any]]


class ViewState(TypedDict):
    """Reactive values consumed by the rendering layer."""

    loading: bool
    rows: list[Any]
    total: int


class TableController(Generic[T]):
    """Binds pagination, form values and a remote query into one reactive unit."""

    def __init__(
        self,
        options: TableState | None = None,
        *,
        form_timeout: float = config.FORM_VALUES_TIMEOUT_SEC,
        discard_stale_responses: bool = config.DISCARD_STALE_RESPONSES,
    ) -> None:
        self.form_timeout = form_timeout
        self.discard_stale_responses = discard_stale_responses

        self.view: Store[ViewState] = Store({"loading": False, "rows": [], "total": 0})
        self.store: Store[TableState] = Store(
            merge_with_array_override(options or {}, default_table_state()),
            on_update=self._sync_static_data,
        )

        self._form_provider: FormProvider | None = None
        self._mounted = False
        self._ready = ReadyCondition()
        self._request_seq = 0
        self._applied_seq = 0
        self._in_flight: set[int] = set()
        self._syncing_static_data = False

        self._sync_static_data(self.store.state)

    # ------------------------------------------------------------------
    # Reactive reads
    # ------------------------------------------------------------------
    @property
    def state(self) -> TableState:
        return self.store.state

    @property
    def loading(self) -> bool:
        return self.view.state["loading"]

    @property
    def rows(self) -> list[T]:
        return self.view.state["rows"]

    @property
    def total(self) -> int:
        return self.view.state["total"]

    @property
    def pagination(self) -> PaginationInfo:
        """Current page position, read from ``grid_options.pager_config``."""
        pager = self._pager_config()
        defaults = PaginationInfo()
        return PaginationInfo(
            current_page=pager.get("current_page", defaults.current_page),
            page_size=pager.get("page_size", defaults.page_size),
            total=pager.get("total", defaults.total),
        )

    @property
    def form_provider(self) -> FormProvider | None:
        return self._form_provider

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback()`` once after every configuration or view update.

        A configuration update that also re-syncs ``grid_options.data`` into
        the rows notifies once, after both stores are up to date.
        """
        off_store = self.store.subscribe(lambda _state: callback())

        def _on_view(_state: ViewState) -> None:
            if not self._syncing_static_data:
                callback()

        off_view = self.view.subscribe(_on_view)

        def _unsubscribe() -> None:
            off_store()
            off_view()

        return _unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def mount(self, form_provider: FormProvider | None = None) -> None:
        """Attach the search form provider. Calls while mounted are ignored."""
        if self._mounted:
            return
        self._form_provider = form_provider
        self._ready.set_true()
        self._mounted = True

    def unmount(self) -> None:
        self._mounted = False
        self._form_provider = None
        self._ready.reset()

    async def wait_until_mounted(self, timeout: float | None = None) -> bool:
        """Wait for :meth:`mount`; return ``False`` if ``timeout`` expires first."""
        return await self._ready.wait(timeout)

    # ------------------------------------------------------------------
    # State updates
    # ------------------------------------------------------------------
    def set_state(self, state_or_fn: Mapping[str, Any] | StateUpdater) -> None:
        """Merge a partial state, or the partial an updater derives from the live state."""
        if callable(state_or_fn):
            self.store.set_state(lambda prev: state_or_fn(prev))
        else:
            self.store.set_state(lambda _prev: state_or_fn)

    def set_grid_options(self, options: Mapping[str, Any]) -> None:
        self.set_state({"grid_options": options})

    def set_loading(self, is_loading: bool) -> None:
        self.view.set_state(lambda _prev: {"loading": is_loading})

    def toggle_search_form(self, show: bool | None = None) -> bool:
        """Show/hide the search panel; without ``show`` the current value is inverted."""
        visible = show if isinstance(show, bool) else not self.state.get("show_search_form")
        self.set_state({"show_search_form": visible})
        return self.state["show_search_form"]

    async def handle_page_change(self, current_page: int, page_size: int) -> None:
        """Move to another page and reload it with the current form filters."""
        self.set_state(
            {
                "grid_options": {
                    "pager_config": {
                        "current_page": current_page,
                        "page_size": page_size,
                    }
                }
            }
        )
        await self.reload()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def query(self, params: Mapping[str, Any] | None = None) -> None:
        await self.reload(params)

    async def reload(self, params: Mapping[str, Any] | None = None) -> None:
        """Fetch the current page and write its rows into the view state.

        Failures never propagate: a missing executor is a logged no-op, an
        unreadable form counts as empty, and executor errors (including
        malformed results) are logged while the previous rows stay visible.
        The loading flag is cleared on every exit path, unless another
        reload is still in flight whose response may yet be applied. A
        response is dropped only after a newer one has been applied.
        """
        proxy_config = self._grid_options().get("proxy_config") or {}
        query_fn = (proxy_config.get("ajax") or {}).get("query")
        if query_fn is None:
            logger.warning("No ajax.query configured, proxy_config: %s", proxy_config)
            self.set_loading(False)
            return

        self._request_seq += 1
        request_id = self._request_seq
        self._in_flight.add(request_id)

        self.set_loading(True)
        try:
            form_values = await self._read_form_values()
            query_params = QueryParams(
                page=self.pagination,
                form={**form_values, **(params or {})},
                sort={},
            )
            result = await _call_executor(query_fn, query_params)
            page = adapt_query_result(result)

            if self._is_superseded(request_id):
                logger.debug(
                    "Discarding response of reload #%s (reload #%s already applied)",
                    request_id,
                    self._applied_seq,
                )
                return
            self._applied_seq = request_id
            self._apply_page(page)
        except Exception:
            logger.exception("Load data failed")
        finally:
            self._in_flight.discard(request_id)
            if not self._awaiting_response():
                self.set_loading(False)

    async def query_all(self, params: Mapping[str, Any] | None = None) -> QueryPage:
        """Fetch every row matching the form filters, e.g. for an export.

        Pagination and the displayed rows are left untouched.

        Raises:
            MissingFetchFunctionError: If ``proxy_config.ajax.query_all`` is not set.
            MalformedResultError: If the executor response cannot be adapted.
        """
        proxy_config = self._grid_options().get("proxy_config") or {}
        query_all_fn = (proxy_config.get("ajax") or {}).get("query_all")
        if query_all_fn is None:
            raise MissingFetchFunctionError("No ajax.query_all configured")

        form_values = await self._read_form_values()
        query_params: QueryAllParams = {
            "form": {**form_values, **(params or {})},
            "sort": {},
        }
        result = await _call_executor(query_all_fn, query_params)
        return adapt_query_result(result)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _grid_options(self) -> Mapping[str, Any]:
        return self.state.get("grid_options") or {}

    def _pager_config(self) -> Mapping[str, Any]:
        return self._grid_options().get("pager_config") or {}

    async def _read_form_values(self) -> dict[str, Any]:
        if not self._mounted:
            return {}
        return await read_form_values(self._form_provider, self.form_timeout)

    def _is_superseded(self, request_id: int) -> bool:
        # only a newer response that was actually applied makes this one stale
        return self.discard_stale_responses and request_id < self._applied_seq

    def _awaiting_response(self) -> bool:
        # another reload is still in flight and may yet apply its rows
        return self.discard_stale_responses and any(
            other > self._applied_seq for other in self._in_flight
        )

    def _apply_page(self, page: QueryPage) -> None:
        # pager total first: a store update re-syncs static grid data into rows
        self.set_state({"grid_options": {"pager_config": {"total": page.total}}})
        self.view.set_state(lambda _prev: {"rows": page.rows, "total": page.total})

    def _sync_static_data(self, state: TableState) -> None:
        data = (state.get("grid_options") or {}).get("data")
        if data is None:
            return
        self._syncing_static_data = True
        try:
            self.view.set_state(lambda _prev: {"rows": list(data)})
        finally:
            self._syncing_static_data = False


async def _call_executor(fn: Callable[[Any], Any], params: Any) -> Any:
    result = fn(params)
    if inspect.isawaitable(result):
        result = await result
    return result


if __name__ == "__main__":
    import asyncio

    config.configure_logging("DEBUG")

    USERS = [{"id": i, "name": f"user-{i}"} for i in range(1, 43)]

    async def fake_query(params: QueryParams) -> dict[str, Any]:
        """Serve a slice of USERS filtered by an optional ``name`` substring."""
        await asyncio.sleep(0.05)
        needle = params.form.get("name", "")
        matches = [u for u in USERS if needle in u["name"]]
        start = (params.page.current_page - 1) * params.page.page_size
        return {"items": matches[start : start + params.page.page_size], "total": len(matches)}

    class DemoForm:
        async def get_values(self) -> dict[str, Any]:
            return {"name": "user-1"}

    async def main() -> None:
        """Load two pages through the controller and print what a view would show."""
        table: TableController[dict[str, Any]] = TableController(
            {"grid_options": {"proxy_config": {"ajax": {"query": fake_query}}}}
        )
        table.mount(DemoForm())
        await table.reload()
        print(table.pagination, [row["id"] for row in table.rows])
        await table.handle_page_change(2, 5)
        print(table.pagination, [row["id"] for row in table.rows])

    asyncio.run(main())
