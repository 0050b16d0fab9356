"""Package *datagrid* – reactive controller for remote paginated tables.

The package separates a paginated remote dataset from the widget that renders
it and from the search form that filters it:

1. ``store`` – observable state container with array-override merges.
2. ``controller`` – loading flag, pagination and the reload lifecycle.
3. ``form_bridge`` – timeout-bounded access to the external search form.
4. ``registry`` / ``use_table`` – startup wiring and component bindings.

Rendering and the remote endpoints themselves stay outside the package: the
caller supplies the query function and subscribes to the stores.
"""

from datagrid.errors import (
    DataGridError,
    FormValuesUnavailable,
    MalformedResultError,
    MissingFetchFunctionError,
    RegistryNotInitializedError,
)
from datagrid.merge import clone_tree, merge_with_array_override
from datagrid.store import Store
from datagrid.schemas import (
    PaginationInfo,
    QueryPage,
    QueryParams,
    TableState,
    adapt_query_result,
    default_table_state,
)
from datagrid.form_bridge import FormProvider, ReadyCondition, read_form_values
from datagrid.controller import TableController
from datagrid.registry import TableRegistry
from datagrid.use_table import TableBinding, use_table


__all__ = [
    "DataGridError",
    "FormProvider",
    "FormValuesUnavailable",
    "MalformedResultError",
    "MissingFetchFunctionError",
    "PaginationInfo",
    "QueryPage",
    "QueryParams",
    "ReadyCondition",
    "RegistryNotInitializedError",
    "Store",
    "TableBinding",
    "TableController",
    "TableRegistry",
    "TableState",
    "adapt_query_result",
    "clone_tree",
    "default_table_state",
    "merge_with_array_override",
    "read_form_values",
    "use_table",
]
