"""Lifecycle events and the hook registry.

The persistence layer announces each step of a save through
``HookRegistry.notify()``; callbacks registered for the document's schema
and that event run in registration order.  Exceptions raised by a
callback propagate to the caller of the save.

Usage:
    from doc_denorm.documents.lifecycle import HookRegistry, LifecycleEvent

    hooks = HookRegistry()
    hooks.register("Child", LifecycleEvent.BEFORE_SAVE, lambda doc: None)
    hooks.notify(LifecycleEvent.BEFORE_SAVE, child)
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from doc_denorm.schema.builder import underscore

if TYPE_CHECKING:
    from doc_denorm.documents.document import Document

logger = logging.getLogger(__name__)

Hook = Callable[["Document"], None]


class LifecycleEvent(str, Enum):
    """Points in a save at which hooks run."""

    BEFORE_VALIDATE = "before_validate"
    BEFORE_SAVE = "before_save"
    BEFORE_CREATE = "before_create"
    BEFORE_UPDATE = "before_update"
    AFTER_CREATE = "after_create"
    AFTER_UPDATE = "after_update"
    AFTER_SAVE = "after_save"

    @classmethod
    def parse(cls, value: "str | LifecycleEvent") -> "LifecycleEvent":
        """Parse ``"BeforeSave"``, ``"before_save"`` or ``"BEFORE_SAVE"``.

        Raises:
            ValueError: If *value* names no event.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(underscore(value).lower())
        except ValueError:
            valid = ", ".join(e.value for e in cls)
            raise ValueError(f"Unknown lifecycle event '{value}'. Valid: {valid}") from None

    @property
    def is_before(self) -> bool:
        return self.value.startswith("before_")


class HookRegistry:
    """Ordered lifecycle callbacks keyed by schema name and event."""

    def __init__(self) -> None:
        self._hooks: dict[tuple[str, LifecycleEvent], list[Hook]] = defaultdict(list)

    def register(self, schema: str, event: "LifecycleEvent | str", callback: Hook) -> None:
        event = LifecycleEvent.parse(event)
        self._hooks[(schema, event)].append(callback)
        logger.debug("Registered %s hook on %s: %r", event.value, schema, callback)

    def callbacks(self, schema: str, event: "LifecycleEvent | str") -> tuple[Hook, ...]:
        return tuple(self._hooks.get((schema, LifecycleEvent.parse(event)), ()))

    def notify(self, event: "LifecycleEvent | str", document: "Document") -> None:
        """Run every callback for *document*'s schema and *event*."""
        for callback in self.callbacks(document.schema.name, event):
            callback(document)

    def clear(self) -> None:
        self._hooks.clear()
