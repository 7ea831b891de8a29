"""item_attributes
=================

Copy-on-write event payload for editing the attribute modifiers of an item
stack in an equipment slot.

Typical usage::

    from item_attributes import ModifierEventBus, compute_attribute_modifiers

    bus = ModifierEventBus()

    @bus.register
    def sharpen(event):
        event.add_modifier(ATTACK_DAMAGE, AttributeModifier("mymod:sharp", 2.0))

    final = compute_attribute_modifiers(bus, stack, EquipmentSlot.MAINHAND)
"""

from .bus import EventPriority, ModifierEventBus, ModifierListener, compute_attribute_modifiers
from .components import Attribute, AttributeModifier, ItemStack
from .event import ItemAttributeModifierEvent, Modified, ModifierState, Unmodified
from .multimap import AttributeMultimap, UnsupportedOperationError
from .types import AttributeModifierOperation, EquipmentSlot, ModifierID

__all__ = [
    "Attribute",
    "AttributeModifier",
    "AttributeModifierOperation",
    "AttributeMultimap",
    "EquipmentSlot",
    "EventPriority",
    "ItemAttributeModifierEvent",
    "ItemStack",
    "ModifierEventBus",
    "ModifierID",
    "ModifierListener",
    "ModifierState",
    "Modified",
    "Unmodified",
    "UnsupportedOperationError",
    "compute_attribute_modifiers",
]
