"""Listener registry and notification pass.

A :class:`ModifierEventBus` runs one synchronous pass per
:class:`ItemAttributeModifierEvent`: listeners run one at a time, ordered by
:class:`EventPriority` and then by registration order. Later listeners see
the edits of earlier ones through ``event.modifiers``.

:func:`compute_attribute_modifiers` is the usual entry point: it builds the
event from an item stack's defaults, posts it and returns the final
persistent entries.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from itertools import count
from typing import Callable, Hashable, Iterator, List, Tuple

from pyrsistent import pmap

from item_attributes.components import ItemStack
from item_attributes.event import ItemAttributeModifierEvent
from item_attributes.multimap import Entries


logger = logging.getLogger(__name__)

ModifierListener = Callable[[ItemAttributeModifierEvent], None]


class EventPriority(IntEnum):
    """Dispatch order; lower values run first."""

    HIGHEST = 0
    HIGH = 1
    NORMAL = 2
    LOW = 3
    LOWEST = 4


@dataclass(frozen=True)
class _Registration:
    listener: ModifierListener
    priority: EventPriority
    sequence: int


class ModifierEventBus:
    """Ordered collection of modifier listeners."""

    def __init__(self) -> None:
        self._registrations: List[_Registration] = []
        self._sequence: Iterator[int] = count()

    def register(
        self,
        listener: ModifierListener,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> ModifierListener:
        """Add ``listener`` at ``priority`` and return it unchanged.

        Returning the listener lets ``register`` double as a decorator::

            @bus.register
            def add_reach(event): ...

        Raises:
            ValueError: If ``listener`` is already registered at ``priority``.
        """
        priority = EventPriority(priority)
        if any(
            r.listener == listener and r.priority == priority
            for r in self._registrations
        ):
            raise ValueError(f"Listener {listener!r} already registered at {priority.name}")
        self._registrations.append(_Registration(listener, priority, next(self._sequence)))
        self._registrations.sort(key=lambda r: (r.priority, r.sequence))
        logger.debug("Registered %r at %s", listener, priority.name)
        return listener

    def unregister(self, listener: ModifierListener) -> bool:
        """Remove every registration of ``listener``; False if there was none."""
        remaining = [r for r in self._registrations if r.listener != listener]
        removed = len(remaining) != len(self._registrations)
        self._registrations = remaining
        if removed:
            logger.debug("Unregistered %r", listener)
        return removed

    @property
    def listeners(self) -> Tuple[ModifierListener, ...]:
        """Listeners in dispatch order."""
        return tuple(r.listener for r in self._registrations)

    def post(self, event: ItemAttributeModifierEvent) -> ItemAttributeModifierEvent:
        """Run every listener on ``event`` and return it.

        Listener exceptions propagate and end the pass.
        """
        listeners = self.listeners
        logger.debug("Posting %r to %d listeners", event, len(listeners))
        for listener in listeners:
            listener(event)
        return event


def compute_attribute_modifiers(
    bus: ModifierEventBus,
    item_stack: ItemStack,
    slot: Hashable,
    allow_duplicates: bool = True,
) -> Entries:
    """Return the modifiers of ``item_stack`` in ``slot`` after all listeners.

    Args:
        bus (ModifierEventBus): Listeners to notify.
        item_stack (ItemStack): Stack being equipped, unequipped or described.
        slot (Hashable): Slot the stack occupies.
        allow_duplicates (bool): Duplicate policy of the posted event.

    Returns:
        Entries: Final persistent ``attribute -> modifiers`` map.
    """
    defaults = item_stack.default_modifiers.get(slot, pmap())
    event = bus.post(
        ItemAttributeModifierEvent(item_stack, slot, defaults, allow_duplicates=allow_duplicates)
    )
    return event.modifiers.snapshot()
