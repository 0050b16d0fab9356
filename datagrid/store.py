"""Observable state container used by the table controller.

The store holds a nested mapping, applies partial updates with
:func:`~datagrid.merge.merge_with_array_override` and notifies subscribers
synchronously after every update. Rendering layers read :attr:`Store.state`
(or a selection of it) and re-render from their subscriber callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from datagrid.merge import clone_tree, merge_with_array_override


logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Mapping[str, Any])

Subscriber = Callable[[Any], None]
Updater = Callable[[Any], Mapping[str, Any] | None]


class Store(Generic[S]):
    """Publish-on-mutation container with array-override merge semantics.

    Every :meth:`set_state` call notifies every subscriber exactly once, in
    registration order. A subscriber may call :meth:`set_state` again; the
    nested update (and its notifications) completes before the outer round
    continues.
    """

    def __init__(
        self,
        initial_state: S,
        *,
        on_update: Subscriber | None = None,
    ) -> None:
        self._state: S = clone_tree(initial_state)
        self._subscribers: list[Subscriber] = []
        if on_update is not None:
            self._subscribers.append(on_update)

    @property
    def state(self) -> S:
        """Current state. Treat it as read-only; write through :meth:`set_state`."""
        return self._state

    def snapshot(self) -> S:
        """Return a structural copy of the current state."""
        return clone_tree(self._state)

    def set_state(self, updater: Updater) -> S:
        """Merge the partial produced by ``updater(state)`` and notify subscribers."""
        partial = updater(self._state)
        self._state = merge_with_array_override(partial, self._state)

        # Copy so that (un)subscribing during notification only affects later rounds
        for callback in list(self._subscribers):
            callback(self._state)
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            logger.debug("unsubscribe: callback %r was not registered", callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def select(self, selector: Callable[[S], Any] | None = None) -> Any:
        """Read the whole state, or the value ``selector`` derives from it."""
        return selector(self._state) if selector else self._state

    def watch(
        self,
        selector: Callable[[S], Any],
        callback: Callable[[Any], None],
    ) -> Callable[[], None]:
        """Call ``callback(value)`` whenever the selected value changes.

        The comparison uses ``==`` against the value seen on the previous
        update; the current value is recorded at registration time and is not
        reported.
        """
        last: list[Any] = [selector(self._state)]

        def _on_update(state: S) -> None:
            value = selector(state)
            if value != last[0]:
                last[0] = value
                callback(value)

        return self.subscribe(_on_update)


__all__ = ["Store"]
