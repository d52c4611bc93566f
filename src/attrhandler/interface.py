from typing import Any, Callable, Iterable, Iterator, Mapping, Protocol, Self, Sequence, runtime_checkable

from attrhandler.store import Key


@runtime_checkable
class Exportable(Protocol):
    """Objects which can be merged into a handler."""

    def to_array(self) -> Mapping[Key, Any]: ...


@runtime_checkable
class HandlerInterface(Protocol):
    """Public contract of a handler container.

    Domain objects which expose a :class:`~attrhandler.handler.Handler`
    through composition can declare this protocol to advertise the full
    operation set.
    """

    # Basic CRUD
    def get(self, key: Key, default: Any = None) -> Any: ...
    def set(self, key: Key, value: Any) -> Self: ...
    def push(self, value: Any, key: Key | None = None) -> Self: ...
    def push_items(self, *items: Any, key: Key | None = None) -> Self: ...
    def pull(self, key: Key, default: Any = None) -> Any: ...
    def fill(self, values: Mapping[Key, Any]) -> Self: ...
    def clear(self) -> Self: ...

    # Count and access
    def count(self, key: Key | None = None) -> int: ...
    def first(self, key: Key | None = None) -> Any: ...
    def last(self, key: Key | None = None) -> Any: ...

    # Existence checks
    def is_set(self, key: Key) -> bool: ...
    def has(self, key: Key, *offset_sets: Iterable[Key]) -> bool: ...

    # Search and transforms
    def find(self, key: Key, predicate: Callable[[Any], Any]) -> Any: ...
    def filter(self, key: Key, predicate: Callable[[Any], Any]) -> Self: ...
    def map(self, key: Key, transform: Callable[[Any], Any]) -> Self: ...

    # Merge and offsets
    def merge(self, source: Mapping[Key, Any] | Exportable) -> Self: ...
    def offset_exists(self, key: Key) -> bool: ...
    def offset_get(self, key: Key) -> Any: ...
    def offset_set(self, key: Key, value: Any) -> Self: ...
    def offset_sets(self, keys: Iterable[Key], value: Any) -> Self: ...
    def offset_unset(self, key: Key) -> Self: ...
    def offset_unsets(self, keys: Iterable[Key]) -> Self: ...
    def get_offset(self, key: Key, predicate: Callable[[Any], Any]) -> Key | bool: ...
    def set_offset(self, key: Key, predicate: Callable[[Any], Any]) -> Self: ...

    # Handlers
    def get_handler(self, offset: Key | None = None) -> Callable[..., Any] | None: ...
    def push_handler(self, callback: Callable[..., Any], offset: Key | None = None) -> Self: ...
    def push_handlers(self, handlers: Mapping[Key, Callable[..., Any]] | Sequence[Callable[..., Any]]) -> Self: ...
    def pull_handler(self, offset: Key | None = None, default: Any = None) -> Any: ...
    def fill_handlers(self, handlers: Mapping[Key, Callable[..., Any]] | Sequence[Callable[..., Any]]) -> Self: ...
    def clear_handlers(self) -> Self: ...

    # Iteration and export
    def iterate(self) -> Iterator[tuple[Key, Any]]: ...
    def to_array(self) -> dict[Key, Any]: ...
    def debug_summary(self) -> dict[str, list[Key]]: ...
