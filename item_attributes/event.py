"""Item attribute modifier event.

Fired whenever the attribute modifiers of an :class:`ItemStack` are
calculated for a slot: when equipping and unequipping (both must agree) and
when describing the item. Listeners receive the same event in turn and edit
its modifiers through :meth:`ItemAttributeModifierEvent.add_modifier` and
friends.

Design notes:

* The event starts :class:`Unmodified`: ``modifiers`` *is*
  ``original_modifiers`` and nothing has been allocated.
* The first edit performs the single ``Unmodified -> Modified`` transition:
  a :class:`MultimapStorage` owned by the event is created from the
  original's persistent entries and ``modifiers`` is rebound to a view over
  it. The transition never reverses.
* Every view handed out is a read-only :class:`AttributeMultimap`. The
  modified view reads entries through the event, so the owned storage never
  leaves it.

Adding modifiers based on ``modifiers`` makes the result depend on listener
order. Reading ``original_modifiers`` instead gives consistent results.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, Tuple, Union

from item_attributes.components import Attribute, AttributeModifier, ItemStack
from item_attributes.multimap import (
    AttributeMultimap,
    Entries,
    MultimapSource,
    MultimapStorage,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unmodified:
    """No listener has edited the event; ``view`` is the original."""

    view: AttributeMultimap[Attribute, AttributeModifier]


@dataclass(frozen=True)
class Modified:
    """The event owns ``storage``; ``view`` is its read-only façade."""

    storage: MultimapStorage
    view: AttributeMultimap[Attribute, AttributeModifier]


ModifierState = Union[Unmodified, Modified]


class ItemAttributeModifierEvent:
    """Mutable payload shared by the listeners of one notification pass.

    Args:
        item_stack (ItemStack): Stack whose modifiers are being calculated.
        slot_type (Hashable): Slot the stack is in, usually an
            :class:`item_attributes.types.EquipmentSlot`.
        modifiers (MultimapSource): Starting associations. A view is reused
            without copying; mappings and pair iterables are frozen once.
        allow_duplicates (bool): If True (the default) an identical pair can
            be added twice. If False the editable copy keeps each pair once
            and adding an existing pair does nothing.

    Raises:
        ValueError: If ``modifiers`` is ``None``.
    """

    def __init__(
        self,
        item_stack: ItemStack,
        slot_type: Hashable,
        modifiers: MultimapSource,
        allow_duplicates: bool = True,
    ) -> None:
        if modifiers is None:
            raise ValueError("Attribute modifier event requires a modifier collection")
        original: AttributeMultimap[Attribute, AttributeModifier] = AttributeMultimap.of(
            modifiers
        )
        self._item_stack = item_stack
        self._slot_type = slot_type
        self._allow_duplicates = allow_duplicates
        self._original = original
        self._state: ModifierState = Unmodified(view=original)

    @property
    def item_stack(self) -> ItemStack:
        return self._item_stack

    @property
    def slot_type(self) -> Hashable:
        return self._slot_type

    @property
    def modifiers(self) -> AttributeMultimap[Attribute, AttributeModifier]:
        """Read-only view of the current modifiers.

        Use the methods of this event to change them.
        """
        return self._state.view

    @property
    def original_modifiers(self) -> AttributeMultimap[Attribute, AttributeModifier]:
        """Modifiers as they were before any listener changed them."""
        return self._original

    @property
    def is_modified(self) -> bool:
        return isinstance(self._state, Modified)

    @property
    def allow_duplicates(self) -> bool:
        return self._allow_duplicates

    def _current_entries(self) -> Entries:
        if isinstance(self._state, Modified):
            return self._state.storage.entries
        return self._original.snapshot()

    def _modifiable_storage(self) -> MultimapStorage:
        """Return the owned storage, creating it on first use."""
        if isinstance(self._state, Modified):
            return self._state.storage
        storage = MultimapStorage(
            entries=self._original.snapshot(), allow_duplicates=self._allow_duplicates
        )
        self._state = Modified(storage=storage, view=AttributeMultimap(self._current_entries))
        logger.debug(
            "Copied %d modifiers of %r in slot %s for editing",
            len(self._original),
            self._item_stack,
            self._slot_type,
        )
        return storage

    def add_modifier(self, attribute: Attribute, modifier: AttributeModifier) -> bool:
        """Add ``modifier`` to ``attribute``.

        The modifier id must be the same on every calculation so that
        unequipping removes exactly what equipping added.

        Returns:
            bool: True if the pair was stored. False only when duplicates
            are not allowed and the pair is already present.
        """
        return self._modifiable_storage().put(attribute, modifier)

    def remove_modifier(self, attribute: Attribute, modifier: AttributeModifier) -> bool:
        """Remove one occurrence of ``modifier`` from ``attribute``.

        Returns:
            bool: True if a modifier was removed, False if none matched.
        """
        return self._modifiable_storage().remove(attribute, modifier)

    def remove_attribute(self, attribute: Attribute) -> Tuple[AttributeModifier, ...]:
        """Remove every modifier of ``attribute`` and return them."""
        return self._modifiable_storage().remove_all(attribute)

    def clear_modifiers(self) -> None:
        """Remove all modifiers for all attributes."""
        self._modifiable_storage().clear()

    def __repr__(self) -> str:
        state = "modified" if self.is_modified else "unmodified"
        return (
            f"{type(self).__name__}(item_stack={self._item_stack!r}, "
            f"slot_type={self._slot_type!r}, {state})"
        )
