"""Factory pairing a :class:`TableController` with a rendering-layer binding.

Example:
-------

>>> binding, table = use_table(
...     {"grid_options": {"proxy_config": {"ajax": {"query": fetch_users}}}},
...     registry=registry,
... )
>>> await binding.attach()          # when the grid appears
>>> await table.handle_page_change(2, 20)
>>> binding.detach()                # when the grid goes away
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from datagrid.controller import TableController
from datagrid.form_bridge import FormProvider
from datagrid.registry import TableRegistry
from datagrid.schemas import TableState


class TableBinding:
    """Lifecycle hooks a grid component calls around its controller."""

    def __init__(
        self,
        controller: TableController,
        registry: TableRegistry | None = None,
    ) -> None:
        self.controller = controller
        self.registry = registry
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    async def attach(self, form_provider: FormProvider | None = None, **props: Any) -> None:
        """Apply component props, mount the search form and run the first load.

        Args:
            form_provider: Explicit search form. When omitted and the table has
                ``form_options``, the registry builds one.
            **props: Extra table options merged into the state.
        """
        if props:
            self.controller.set_state(props)

        provider = form_provider if form_provider is not None else self._create_form()
        self.controller.mount(provider)
        self._attached = True

        proxy_config = (self.controller.state.get("grid_options") or {}).get(
            "proxy_config"
        ) or {}
        has_query = (proxy_config.get("ajax") or {}).get("query") is not None
        if proxy_config.get("auto_load") and has_query:
            await self.controller.reload()

    def detach(self) -> None:
        self.controller.unmount()
        self._attached = False

    def select(self, selector: Callable[[TableState], Any] | None = None) -> Any:
        return self.controller.store.select(selector)

    def watch(
        self,
        selector: Callable[[TableState], Any],
        callback: Callable[[Any], None],
    ) -> Callable[[], None]:
        return self.controller.store.watch(selector, callback)

    def _create_form(self) -> FormProvider | None:
        form_options = self.controller.state.get("form_options")
        if self.registry is None or form_options is None:
            return None
        return self.registry.create_form(form_options)


def use_table(
    options: TableState | None = None,
    *,
    registry: TableRegistry | None = None,
    **controller_kwargs: Any,
) -> tuple[TableBinding, TableController]:
    """Create a controller for ``options`` and the binding that drives it."""
    controller: TableController = TableController(options, **controller_kwargs)
    return TableBinding(controller, registry), controller


__all__ = ["TableBinding", "use_table"]
