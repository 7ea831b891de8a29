"""Read-only multimap façade and its owned storage.

Associations are held as a persistent ``PMap[key, PVector[value]]``. Keys
must be hashable; values only need equality, they are never hashed. A key is
only present while it has at least one value.

:class:`MultimapStorage` is the single mutable cell owned by an event once a
listener edits it. Every edit rebinds ``entries`` to a new persistent map, so
snapshots taken earlier (including the original the storage started from)
are never affected.

Callers only ever receive an :class:`AttributeMultimap`. It reads entries
through a getter, holds no reference to the storage, and rejects every
mutation with :class:`UnsupportedOperationError`.

Insertion uses *bag* semantics by default: putting a pair that is already
present stores a second occurrence. A storage created with
``allow_duplicates=False`` uses *set* semantics instead: duplicates are
dropped when it is created and ``put`` of an existing pair is a no-op.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    NoReturn,
    Tuple,
    TypeVar,
    Union,
)

from pyrsistent import pmap, pvector
from pyrsistent.typing import PMap, PVector


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Entries = PMap[Any, PVector[Any]]
EntriesGetter = Callable[[], Entries]
MultimapSource = Union[
    "AttributeMultimap[Any, Any]",
    Mapping[Any, Iterable[Any]],
    Iterable[Tuple[Any, Any]],
]


class UnsupportedOperationError(TypeError):
    """Raised when a read-only multimap view is asked to mutate."""


def freeze_entries(source: MultimapSource) -> Entries:
    """Return persistent entries for any supported multimap source.

    Args:
        source (MultimapSource): Another view (its snapshot is reused as is),
            a mapping of key to values, or an iterable of ``(key, value)``
            pairs.

    Returns:
        Entries: Persistent map with no empty value vectors.
    """
    if isinstance(source, AttributeMultimap):
        return source.snapshot()

    grouped: Dict[Any, List[Any]] = {}
    if isinstance(source, Mapping):
        for key, values in source.items():
            grouped.setdefault(key, []).extend(values)
    else:
        for key, value in source:
            grouped.setdefault(key, []).append(value)
    return pmap({key: pvector(values) for key, values in grouped.items() if values})


def distinct_entries(entries: Entries) -> Entries:
    """Return ``entries`` with repeated values under a key dropped.

    The first occurrence of each value is kept. Returns ``entries`` itself
    when nothing repeats.
    """
    distinct = entries
    for key, values in entries.items():
        kept: List[Any] = []
        for value in values:
            if value not in kept:
                kept.append(value)
        if len(kept) != len(values):
            distinct = distinct.set(key, pvector(kept))
    return distinct


@dataclass(eq=False)
class MultimapStorage:
    """Owned, mutable storage cell.

    Only the owning event holds a reference to this object; observers see
    its entries through an :class:`AttributeMultimap`.

    Attributes:
        entries: Current persistent entries.
        allow_duplicates: Bag semantics if True, set semantics if False.
    """

    entries: Entries
    allow_duplicates: bool = True

    def __post_init__(self) -> None:
        if not self.allow_duplicates:
            self.entries = distinct_entries(self.entries)

    def put(self, key: Hashable, value: Any) -> bool:
        """Add ``value`` under ``key``.

        Returns:
            bool: False only under set semantics when the pair is present.
        """
        values = self.entries.get(key, pvector())
        if not self.allow_duplicates and value in values:
            return False
        self.entries = self.entries.set(key, values.append(value))
        return True

    def remove(self, key: Hashable, value: Any) -> bool:
        """Remove one occurrence of ``(key, value)``; False if absent."""
        values = self.entries.get(key)
        if values is None or value not in values:
            return False
        values = values.remove(value)
        if values:
            self.entries = self.entries.set(key, values)
        else:
            self.entries = self.entries.remove(key)
        return True

    def remove_all(self, key: Hashable) -> Tuple[Any, ...]:
        """Remove and return every value under ``key``."""
        values = self.entries.get(key)
        if values is None:
            return ()
        self.entries = self.entries.remove(key)
        return tuple(values)

    def clear(self) -> None:
        self.entries = pmap()


def _same_values(left: Iterable[Any], right: Iterable[Any]) -> bool:
    """Compare two value sequences as bags using equality only."""
    remaining = list(right)
    for value in left:
        try:
            remaining.remove(value)
        except ValueError:
            return False
    return not remaining


class AttributeMultimap(Generic[K, V]):
    """Read-only view over persistent entries.

    The view is live: every read calls ``entries_getter``, so a view over an
    event's storage reports the latest edits. It keeps only the getter, never
    the storage; :meth:`snapshot` returns the immutable persistent entries.
    """

    def __init__(self, entries_getter: EntriesGetter) -> None:
        self._entries = entries_getter

    @classmethod
    def of(cls, source: MultimapSource) -> "AttributeMultimap[K, V]":
        """Build a permanently frozen view from ``source``."""
        entries = freeze_entries(source)
        return cls(lambda: entries)

    @classmethod
    def empty(cls) -> "AttributeMultimap[K, V]":
        return cls.of(pmap())

    # Reads

    def snapshot(self) -> Entries:
        """Return the current entries as an immutable persistent map."""
        return self._entries()

    def get(self, key: K) -> Tuple[V, ...]:
        """Return the values under ``key``; empty if there are none."""
        return tuple(self._entries().get(key, ()))

    def __getitem__(self, key: K) -> Tuple[V, ...]:
        return self.get(key)

    def keys(self) -> FrozenSet[K]:
        return frozenset(self._entries().keys())

    def values(self) -> Tuple[V, ...]:
        return tuple(value for values in self._entries().values() for value in values)

    def entries(self) -> Tuple[Tuple[K, V], ...]:
        return tuple(
            (key, value)
            for key, values in self._entries().items()
            for value in values
        )

    def contains_key(self, key: K) -> bool:
        return key in self._entries()

    def contains_entry(self, key: K, value: V) -> bool:
        return value in self._entries().get(key, ())

    def is_empty(self) -> bool:
        return not self._entries()

    def __contains__(self, entry: object) -> bool:
        """Check for a ``(key, value)`` pair, matching what iteration yields."""
        if not isinstance(entry, tuple) or len(entry) != 2:
            return False
        key, value = entry
        return self.contains_entry(key, value)

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        return iter(self.entries())

    def __len__(self) -> int:
        return sum(len(values) for values in self._entries().values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeMultimap):
            return NotImplemented
        mine, theirs = self.snapshot(), other.snapshot()
        if set(mine) != set(theirs):
            return False
        return all(_same_values(values, theirs[key]) for key, values in mine.items())

    # Views change with their backing, so they cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {list(values)!r}" for key, values in self.snapshot().items())
        return f"{type(self).__name__}({{{body}}})"

    # Mutations are rejected

    def _read_only(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise UnsupportedOperationError(
            f"{type(self).__name__} is read-only; "
            "use the event's modifier methods to change it"
        )

    put = _read_only
    put_all = _read_only
    remove = _read_only
    remove_all = _read_only
    clear = _read_only
    __setitem__ = _read_only
    __delitem__ = _read_only
