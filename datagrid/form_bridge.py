"""Bridge between the table controller and an external search form.

The form itself lives in the rendering layer. The controller only needs an
object exposing ``get_values()``; when that object is missing, broken or too
slow the table loads without extra filters instead of waiting on it.
"""

# %%
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable

from datagrid import config
from datagrid.errors import FormValuesUnavailable


logger = logging.getLogger(__name__)

# Reads still running after a timeout; the event loop only keeps weak references
_pending_reads: set[asyncio.Future] = set()


@runtime_checkable
class FormProvider(Protocol):
    """Anything that can report the current search form values."""

    def get_values(self) -> Mapping[str, Any] | Awaitable[Mapping[str, Any]]:
        """Return the current values, directly or as an awaitable."""


def _consume_result(task: asyncio.Future) -> None:
    _pending_reads.discard(task)
    # Abandoned reads may still fail later; retrieving the exception silences asyncio
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Form read failed: %r", task.exception())


async def _get_values(provider: Any, timeout: float) -> Mapping[str, Any]:
    get_values = getattr(provider, "get_values", None)
    if not callable(get_values):
        raise FormValuesUnavailable("form provider exposes no get_values()")

    try:
        result = get_values()
    except Exception as exc:
        raise FormValuesUnavailable(f"get_values() raised {exc!r}") from exc

    if inspect.isawaitable(result):
        task = asyncio.ensure_future(result)
        _pending_reads.add(task)
        task.add_done_callback(_consume_result)
        try:
            # shield: on timeout the read is ignored, not cancelled
            result = await asyncio.wait_for(asyncio.shield(task), timeout)
        except asyncio.TimeoutError as exc:
            raise FormValuesUnavailable(
                f"get_values() did not answer within {timeout:.3f}s"
            ) from exc
        except Exception as exc:
            raise FormValuesUnavailable(f"get_values() failed: {exc!r}") from exc

    if not isinstance(result, Mapping):
        raise FormValuesUnavailable(
            f"get_values() returned {type(result).__name__}, expected a mapping"
        )
    return result


async def read_form_values(
    provider: FormProvider | None,
    timeout: float = config.FORM_VALUES_TIMEOUT_SEC,
) -> dict[str, Any]:
    """Read the provider's values, bounded by ``timeout`` seconds.

    Args:
        provider: The mounted form provider, or ``None``.
        timeout: Maximum time to wait for an asynchronous ``get_values()``.

    Returns:
        A copy of the form values, or ``{}`` when the provider is absent,
        raises, returns something other than a mapping, or times out.
    """
    if provider is None:
        return {}
    try:
        values = await _get_values(provider, timeout)
    except FormValuesUnavailable as exc:
        logger.debug("Using empty form values: %s", exc)
        return {}
    return dict(values)


class ReadyCondition:
    """A flag that coroutines can wait on until it becomes true."""

    def __init__(self) -> None:
        self._ready = False
        self._waiters: list[asyncio.Future] = []

    @property
    def is_true(self) -> bool:
        return self._ready

    def set_true(self) -> None:
        self._ready = True
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(True)

    def reset(self) -> None:
        self._ready = False

    async def wait(self, timeout: float | None = None) -> bool:
        """Wait until the condition is true; return ``False`` on timeout."""
        if self._ready:
            return True

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            return await asyncio.wait_for(waiter, timeout)
        except asyncio.TimeoutError:
            return False
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)


__all__ = ["FormProvider", "ReadyCondition", "read_form_values"]
