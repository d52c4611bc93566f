"""List/map duality for values nested under a single top-level key.

A sub-collection is either a mutable mapping (named or ordinal keys) or a
mutable sequence (positional keys). Every helper here dispatches on that
kind once, so callers can treat both the same way.
"""

from typing import Any, Callable, Iterator, MutableMapping, MutableSequence

from attrhandler.registry import HandlerRegistry, ensure_callables
from attrhandler.store import AttributeStore, Key, is_ordinal

type SubCollection = MutableMapping[Key, Any] | MutableSequence[Any]

_SCALAR_SEQUENCES = (str, bytes, bytearray)


def is_collection(value: Any) -> bool:
    if isinstance(value, MutableMapping):
        return True
    return isinstance(value, MutableSequence) and not isinstance(value, _SCALAR_SEQUENCES)


def entries(collection: SubCollection) -> Iterator[tuple[Key, Any]]:
    if isinstance(collection, MutableMapping):
        return iter(list(collection.items()))
    return iter(list(enumerate(collection)))


def append(collection: SubCollection, value: Any) -> None:
    if isinstance(collection, AttributeStore):
        collection.append(value)
    elif isinstance(collection, MutableMapping):
        ordinals = [key for key in collection if is_ordinal(key)]
        collection[max(ordinals) + 1 if ordinals else 0] = value
    else:
        collection.append(value)


def has_offset(collection: SubCollection, offset: Any) -> bool:
    if isinstance(collection, MutableMapping):
        return offset in collection
    return is_ordinal(offset) and offset < len(collection)


def first(collection: SubCollection) -> Any:
    for _, value in entries(collection):
        return value
    return None


def last(collection: SubCollection) -> Any:
    if isinstance(collection, MutableMapping):
        for key in reversed(list(collection)):
            return collection[key]
        return None
    return collection[-1] if collection else None


def find_offset(collection: SubCollection, predicate: Callable[[Any], Any]) -> Key | None:
    for key, value in entries(collection):
        if predicate(value):
            return key
    return None


def retain(collection: SubCollection, predicate: Callable[[Any], Any]) -> None:
    """Keep only the elements for which ``predicate`` is truthy.

    The predicate is evaluated for every element before the collection is
    touched, so an exception raised by it leaves the collection unchanged.
    Mapping survivors keep their keys; sequence survivors are compacted.
    """
    verdicts = [(key, value, bool(predicate(value))) for key, value in entries(collection)]

    if isinstance(collection, MutableMapping):
        for key, _, keep in verdicts:
            if not keep:
                del collection[key]
    else:
        collection[:] = [value for _, value, keep in verdicts if keep]


def transform(collection: SubCollection, func: Callable[[Any], Any]) -> None:
    results = [(key, func(value)) for key, value in entries(collection)]
    if isinstance(collection, HandlerRegistry):
        ensure_callables(results)
    for key, value in results:
        collection[key] = value  # type: ignore[index]
