from typing import Any, Iterable, Iterator, Mapping, MutableMapping

type Key = int | str


class AttributeStore[V](MutableMapping[Key, V]):
    """
    Ordered table mixing named and ordinal keys.

    The store behaves like a standard mutable mapping whose keys are either
    names (``str``) or ordinals (non-negative ``int``). Insertion order is
    preserved, which gives list-like ``first``/``last`` semantics on top of
    map-like named access.

    Parameters
    ----------
    items : Mapping[Key, V] | Iterable[tuple[Key, V]] | None, optional
        Initial entries, copied into the store in iteration order.

    Attributes
    ----------
    _dict : dict[Key, V]
        Internal storage. Users should treat this as private and prefer item
        access.

    Notes
    -----
    - Accessing a missing key raises a `KeyError`.
    - :meth:`append` stores a value under the next free ordinal: one more
      than the largest integer key present, or ``0`` for a store without
      integer keys. Deleting entries never renumbers the remaining ones.

    Examples
    --------
    >>> store = AttributeStore({'name': 'svc'})
    >>> store.append('first')
    0
    >>> store.append('second')
    1
    >>> list(store)
    ['name', 0, 1]
    """

    _dict: dict[Key, V]

    def __init__(self, items: Mapping[Key, V] | Iterable[tuple[Key, V]] | None = None) -> None:
        self._dict = dict(items or {})

    def __getitem__(self, key: Key) -> V:
        return self._dict[key]

    def __setitem__(self, key: Key, value: V) -> None:
        self._dict[key] = value

    def __delitem__(self, key: Key) -> None:
        del self._dict[key]

    def __iter__(self) -> Iterator[Key]:
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, key: object) -> bool:
        return key in self._dict

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._dict!r})'

    def next_ordinal(self) -> int:
        ordinals = [key for key in self._dict if is_ordinal(key)]
        return max(ordinals) + 1 if ordinals else 0

    def append(self, value: V) -> int:
        """Store ``value`` under the next free ordinal and return that ordinal."""
        ordinal = self.next_ordinal()
        self._dict[ordinal] = value
        return ordinal

    def first(self) -> V | None:
        for value in self._dict.values():
            return value
        return None

    def last(self) -> V | None:
        for value in reversed(self._dict.values()):
            return value
        return None

    def snapshot(self) -> dict[Key, V]:
        return dict(self._dict)


def is_ordinal(key: Any) -> bool:
    # bool is an int subclass but never an ordinal
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0
