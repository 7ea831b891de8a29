"""Attribute modifier component.

A modifier is compared by value. Its ``modifier_id`` must be stable between
equipping and unequipping an item, otherwise the holder cannot remove what it
previously applied.
"""

from dataclasses import dataclass

from item_attributes.types import AttributeModifierOperation, ModifierID


@dataclass(frozen=True)
class AttributeModifier:
    """Single change applied to an attribute.

    Attributes:
        modifier_id: Stable identifier, ideally prefixed with the owning module.
        amount: Magnitude of the change.
        operation: How ``amount`` is combined with the attribute value.
    """

    modifier_id: ModifierID
    amount: float
    operation: AttributeModifierOperation = AttributeModifierOperation.ADD_VALUE
