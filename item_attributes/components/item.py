"""Item stack component.

Carries the intrinsic, unedited modifiers of an item per slot. The dispatcher
in :mod:`item_attributes.bus` uses them as the starting collection of an
:class:`item_attributes.event.ItemAttributeModifierEvent`.
"""

from dataclasses import dataclass
from typing import Hashable

from pyrsistent import pmap
from pyrsistent.typing import PMap, PVector

from item_attributes.components.attribute import Attribute
from item_attributes.components.modifier import AttributeModifier


DefaultModifiers = PMap[Hashable, PMap[Attribute, PVector[AttributeModifier]]]


@dataclass(frozen=True)
class ItemStack:
    """A count of one item together with its default modifiers.

    Attributes:
        item_id: Registry name of the item.
        count: Number of items in the stack; zero means an empty stack.
        default_modifiers: Intrinsic modifiers keyed by equipment slot.

    Raises:
        ValueError: If ``count`` is negative.
    """

    item_id: str
    count: int = 1
    default_modifiers: DefaultModifiers = pmap()

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Item stack {self.item_id} has negative count: {self.count}")

    @property
    def is_empty(self) -> bool:
        return self.count <= 0
