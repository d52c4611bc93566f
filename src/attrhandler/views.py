from typing import Any, Iterator, Mapping, MutableSequence

from attrhandler.store import Key


def snapshot(value: Any) -> Any:
    """Copy the container structure of ``value``.

    Mappings (stores and registries included) become plain dicts and mutable
    sequences become lists, recursively. Leaf values are shared, not copied,
    so callables keep their identity.
    """
    if isinstance(value, Mapping):
        return {key: snapshot(item) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, MutableSequence) and not isinstance(value, bytearray):
        return [snapshot(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def to_array(attributes: Mapping[Key, Any]) -> dict[Key, Any]:
    return snapshot(attributes)


def iterate(attributes: Mapping[Key, Any]) -> Iterator[tuple[Key, Any]]:
    # The snapshot is taken when called, not when the iterator is first advanced.
    return iter(list(to_array(attributes).items()))


def debug_summary(attributes: Mapping[Key, Any]) -> dict[str, list[Key]]:
    return {'attributes': list(attributes)}
