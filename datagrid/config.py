"""Project-wide configuration constants.

Values are read from the environment (a ``.env`` file is honoured through
``python-dotenv``) so that deployments can tune the controller without
touching code.
"""

# %%
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from datagrid.errors import DataGridError


load_dotenv(override=False)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def _env_int_list(name: str, default: str) -> list[int]:
    raw = os.getenv(name, default)
    return [int(tok) for tok in raw.split(",") if tok.strip()]


# Upper bound for reading the search form values before loading data
FORM_VALUES_TIMEOUT_MS: int = int(os.getenv("DATAGRID_FORM_TIMEOUT_MS", "100"))
FORM_VALUES_TIMEOUT_SEC: float = FORM_VALUES_TIMEOUT_MS / 1000

# Pager defaults applied to every new table
DEFAULT_PAGE_SIZE: int = int(os.getenv("DATAGRID_PAGE_SIZE", "20"))
DEFAULT_PAGE_SIZES: list[int] = _env_int_list("DATAGRID_PAGE_SIZES", "10,20,50,100")

# True  -> only the most recent reload may write rows / clear loading
# False -> whichever reload finishes last wins
DISCARD_STALE_RESPONSES: bool = _env_bool("DATAGRID_DISCARD_STALE", True)

LOG_LEVEL: str = os.getenv("DATAGRID_LOG_LEVEL", "WARNING")
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging for scripts and demos.

    Library modules only create their own loggers; call this from an entry
    point when console output is wanted.
    """
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)


def load_table_options(path: str | Path) -> dict[str, Any]:
    """Load static table options from a YAML file.

    The file holds a mapping with the same shape as the controller options,
    e.g.::

        grid_options:
          pager_config:
            page_size: 50
            page_sizes: [25, 50, 100]
          toolbar_config:
            refresh: true
        show_search_form: false

    Args:
        path: Location of the YAML document.

    Returns:
        The parsed options mapping (empty when the file is empty).

    Raises:
        DataGridError: If the document cannot be parsed or is not a mapping.
    """
    yaml_path = Path(path)
    try:
        data = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise DataGridError(f"Invalid table options file {yaml_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DataGridError(
            f"Table options file {yaml_path} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data
