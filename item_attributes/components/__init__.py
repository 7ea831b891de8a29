"""item_attributes.components
=================================

Aggregate import surface for the value types the event operates on.

All component classes are frozen ``@dataclass`` value objects: hashable,
comparable by value and free of behavior, so they can serve as multimap keys
and values::

    from item_attributes.components import Attribute, AttributeModifier
"""

from .attribute import Attribute
from .item import ItemStack
from .modifier import AttributeModifier

__all__ = [
    "Attribute",
    "AttributeModifier",
    "ItemStack",
]
