"""Exceptions raised by the datagrid package."""

from __future__ import annotations


class DataGridError(Exception):
    """Base class for every datagrid error."""


class MissingFetchFunctionError(DataGridError):
    """No executor is configured under ``grid_options.proxy_config.ajax``."""


class MalformedResultError(DataGridError):
    """The query executor returned a value that is not a recognised page shape."""


class FormValuesUnavailable(DataGridError):
    """The search form values could not be read in time (or at all)."""


class RegistryNotInitializedError(DataGridError):
    """A form was requested from a registry that was never set up."""


__all__ = [
    "DataGridError",
    "FormValuesUnavailable",
    "MalformedResultError",
    "MissingFetchFunctionError",
    "RegistryNotInitializedError",
]
