"""Setup registry wiring a search-form factory into the table system.

Create one :class:`TableRegistry` at application startup, call
:meth:`TableRegistry.setup` with the form factory of the UI toolkit, and pass
the registry to :func:`datagrid.use_table.use_table`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from datagrid.errors import RegistryNotInitializedError
from datagrid.form_bridge import FormProvider


logger = logging.getLogger(__name__)

FormFactory = Callable[[Mapping[str, Any]], FormProvider]


class TableRegistry:
    """Init-once holder of the form factory used by tables with search forms."""

    def __init__(self) -> None:
        self._form_factory: FormFactory | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def setup(self, form_factory: FormFactory) -> None:
        """Record ``form_factory``; only the first call has an effect."""
        if self._initialized:
            logger.debug("TableRegistry already initialised, ignoring setup()")
            return
        self._form_factory = form_factory
        self._initialized = True

    def create_form(self, form_options: Mapping[str, Any] | None = None) -> FormProvider:
        """Build a form provider for a table's ``form_options``.

        Raises:
            RegistryNotInitializedError: If :meth:`setup` was never called.
        """
        if self._form_factory is None:
            raise RegistryNotInitializedError(
                "TableRegistry.setup() must be called before creating forms"
            )
        return self._form_factory(dict(form_options or {}))


__all__ = ["FormFactory", "TableRegistry"]
