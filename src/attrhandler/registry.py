from typing import Any, Callable, Iterable, Mapping, Sequence

from attrhandler.errors import InvalidArgument
from attrhandler.store import AttributeStore, Key

type HandlerFunc = Callable[..., Any]
type HandlerItems = Mapping[Key, HandlerFunc] | Sequence[HandlerFunc]


class HandlerRegistry(AttributeStore[HandlerFunc]):
    """Ordered registry of callbacks living under the ``handlers`` key.

    The registry is an :class:`AttributeStore` restricted to callable
    values. Handlers are addressed by an explicit offset (name or ordinal)
    or appended under the next free ordinal. Omitting the offset on a read
    addresses the most recently appended handler.

    A plain sequence of callables is accepted on construction and stored
    under ordinals ``0..n-1``.
    """

    def __init__(self, items: HandlerItems | None = None) -> None:
        entries = handler_entries(items)
        ensure_callables(entries)
        super().__init__(entries)

    def __setitem__(self, key: Key, value: HandlerFunc) -> None:
        _ensure_callable(value, key)
        super().__setitem__(key, value)

    def append(self, value: HandlerFunc) -> int:
        _ensure_callable(value, None)
        return super().append(value)

    def lookup(self, offset: Key | None = None) -> HandlerFunc | None:
        if offset is None:
            return self.last()
        return self.get(offset)

    def register(self, callback: HandlerFunc, offset: Key | None = None) -> Key:
        """Store ``callback`` and return the offset it was stored under.

        Parameters
        ----------
        callback : HandlerFunc
            The handler to register.
        offset : Key | None, optional
            Explicit offset. When omitted the callback is appended under the
            next free ordinal. An existing handler at ``offset`` is replaced.

        Returns
        -------
        Key
            The offset of the stored handler.

        Raises
        ------
        InvalidArgument
            When ``callback`` is not callable.
        """
        if offset is None:
            return self.append(callback)
        self[offset] = callback
        return offset

    def remove(self, offset: Key | None = None, default: Any = None) -> Any:
        if offset is None:
            if not self:
                return default
            offset = list(self)[-1]
        return self.pop(offset, default)


def handler_entries(items: Any) -> list[tuple[Key, Any]]:
    """Normalize a mapping or a sequence of handlers into ``(offset, value)`` pairs.

    Raises
    ------
    InvalidArgument
        When ``items`` is neither a mapping nor a non-string sequence.
    """
    if items is None:
        return []
    if isinstance(items, Mapping):
        return list(items.items())  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(items, Sequence) and not isinstance(items, (str, bytes, bytearray)):
        return list(enumerate(items))  # pyright: ignore[reportUnknownArgumentType]
    raise InvalidArgument(
        f'Handlers must be given as a mapping or a list, {type(items).__name__} given'
    )


def ensure_callables(entries: Iterable[tuple[Key, Any]]) -> None:
    for offset, value in entries:
        _ensure_callable(value, offset)


def _ensure_callable(value: Any, offset: Key | None) -> None:
    if not callable(value):
        where = 'appended' if offset is None else f'at offset {offset!r}'
        raise InvalidArgument(
            f'Handlers must be callable, {type(value).__name__} {where} given'
        )
