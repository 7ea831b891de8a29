import logging
from typing import List

import pytest
from pyrsistent import pmap, pvector

from item_attributes.bus import EventPriority, ModifierEventBus, compute_attribute_modifiers
from item_attributes.components import AttributeModifier, ItemStack
from item_attributes.event import ItemAttributeModifierEvent
from item_attributes.types import EquipmentSlot
from tests.test_utils import (
    ARMOR,
    ATTACK_DAMAGE,
    ATTACK_SPEED,
    SHARPNESS,
    SWORD_DAMAGE,
    SWORD_SPEED,
    make_event,
    make_sword_stack,
    recording_listener,
)


def test_no_listeners_returns_defaults() -> None:
    bus = ModifierEventBus()
    result = compute_attribute_modifiers(bus, make_sword_stack(), EquipmentSlot.MAINHAND)
    assert result == pmap(
        {
            ATTACK_DAMAGE: pvector([SWORD_DAMAGE]),
            ATTACK_SPEED: pvector([SWORD_SPEED]),
        }
    )


def test_slot_without_defaults_starts_empty() -> None:
    bus = ModifierEventBus()
    seen: List[int] = []
    bus.register(lambda event: seen.append(len(event.original_modifiers)))
    result = compute_attribute_modifiers(bus, make_sword_stack(), EquipmentSlot.OFFHAND)
    assert result == pmap()
    assert seen == [0]


def test_listeners_edit_in_turn() -> None:
    bus = ModifierEventBus()

    @bus.register
    def sharpen(event: ItemAttributeModifierEvent) -> None:
        event.add_modifier(ATTACK_DAMAGE, SHARPNESS)

    @bus.register
    def unwieldy(event: ItemAttributeModifierEvent) -> None:
        assert event.modifiers.contains_entry(ATTACK_DAMAGE, SHARPNESS)
        assert not event.original_modifiers.contains_entry(ATTACK_DAMAGE, SHARPNESS)
        event.remove_attribute(ATTACK_SPEED)

    result = compute_attribute_modifiers(bus, make_sword_stack(), EquipmentSlot.MAINHAND)
    assert result == pmap({ATTACK_DAMAGE: pvector([SWORD_DAMAGE, SHARPNESS])})


def test_defaults_on_stack_are_untouched() -> None:
    stack = make_sword_stack()
    bus = ModifierEventBus()
    bus.register(lambda event: event.clear_modifiers())
    assert compute_attribute_modifiers(bus, stack, EquipmentSlot.MAINHAND) == pmap()
    assert len(stack.default_modifiers[EquipmentSlot.MAINHAND]) == 2


def test_priority_then_registration_order() -> None:
    calls: List[str] = []
    bus = ModifierEventBus()
    bus.register(recording_listener("normal_1", calls))
    bus.register(recording_listener("lowest", calls), EventPriority.LOWEST)
    bus.register(recording_listener("highest", calls), EventPriority.HIGHEST)
    bus.register(recording_listener("normal_2", calls))
    bus.register(recording_listener("high", calls), EventPriority.HIGH)
    bus.post(make_event())
    assert calls == ["highest", "high", "normal_1", "normal_2", "lowest"]


def test_duplicate_registration_rejected() -> None:
    calls: List[str] = []
    listener = recording_listener("once", calls)
    bus = ModifierEventBus()
    bus.register(listener)
    with pytest.raises(ValueError):
        bus.register(listener)
    bus.register(listener, EventPriority.LOW)
    bus.post(make_event())
    assert calls == ["once", "once"]


def test_unregister() -> None:
    calls: List[str] = []
    listener = recording_listener("gone", calls)
    bus = ModifierEventBus()
    bus.register(listener)
    bus.register(listener, EventPriority.HIGH)
    assert bus.unregister(listener)
    assert not bus.unregister(listener)
    assert bus.listeners == ()
    bus.post(make_event())
    assert calls == []


def test_listener_error_stops_pass() -> None:
    calls: List[str] = []
    bus = ModifierEventBus()

    def broken(event: ItemAttributeModifierEvent) -> None:
        event.modifiers.put(ARMOR, SHARPNESS)

    bus.register(broken, EventPriority.HIGH)
    bus.register(recording_listener("after", calls))
    with pytest.raises(TypeError):
        bus.post(make_event())
    assert calls == []


def test_equip_and_unequip_agree() -> None:
    bonus = AttributeModifier(modifier_id="test:stable_bonus", amount=1.0)
    bus = ModifierEventBus()
    bus.register(lambda event: event.add_modifier(ARMOR, bonus))
    stack = ItemStack(item_id="chainmail")
    equip = compute_attribute_modifiers(bus, stack, EquipmentSlot.CHEST)
    unequip = compute_attribute_modifiers(bus, stack, EquipmentSlot.CHEST)
    assert equip == unequip == pmap({ARMOR: pvector([bonus])})


def test_untouched_event_is_never_copied() -> None:
    bus = ModifierEventBus()
    bus.register(lambda event: len(event.modifiers))
    event = bus.post(make_event((ARMOR, SHARPNESS)))
    assert not event.is_modified
    assert event.modifiers is event.original_modifiers


def test_post_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    bus = ModifierEventBus()
    with caplog.at_level(logging.DEBUG, logger="item_attributes.bus"):
        bus.register(recording_listener("quiet", []))
        bus.post(make_event())
    messages = [r.getMessage() for r in caplog.records if r.name == "item_attributes.bus"]
    assert any(m.startswith("Registered") for m in messages)
    assert any("to 1 listeners" in m for m in messages)


def test_set_semantics_through_dispatcher() -> None:
    bus = ModifierEventBus()
    added: List[bool] = []
    bus.register(lambda event: added.append(event.add_modifier(ATTACK_DAMAGE, SWORD_DAMAGE)))
    stack = make_sword_stack()
    distinct = compute_attribute_modifiers(
        bus, stack, EquipmentSlot.MAINHAND, allow_duplicates=False
    )
    assert distinct[ATTACK_DAMAGE] == pvector([SWORD_DAMAGE])
    repeated = compute_attribute_modifiers(bus, stack, EquipmentSlot.MAINHAND)
    assert repeated[ATTACK_DAMAGE] == pvector([SWORD_DAMAGE, SWORD_DAMAGE])
    assert added == [False, True]
