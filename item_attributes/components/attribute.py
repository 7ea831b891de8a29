from dataclasses import dataclass


@dataclass(frozen=True)
class Attribute:
    """Named, hashable attribute identifier.

    Attributes:
        name: Registry name, e.g. ``"attack_damage"``.
        default_value: Base value before any modifier applies.
    """

    name: str
    default_value: float = 0.0
