"""Common type aliases and enumerations.

``EquipmentSlot`` is the slot context carried by every
:class:`item_attributes.event.ItemAttributeModifierEvent`; the event treats it
as an opaque value, so callers may pass their own slot identifiers as well.
"""

from enum import StrEnum, auto


ModifierID = str


class EquipmentSlot(StrEnum):
    """Slots an item stack can be equipped into."""

    MAINHAND = auto()
    OFFHAND = auto()
    FEET = auto()
    LEGS = auto()
    CHEST = auto()
    HEAD = auto()
    BODY = auto()


class AttributeModifierOperation(StrEnum):
    """How a modifier's amount combines with the attribute value."""

    ADD_VALUE = auto()
    ADD_MULTIPLIED_BASE = auto()
    ADD_MULTIPLIED_TOTAL = auto()
