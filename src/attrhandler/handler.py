from logging import Logger, getLogger
from typing import Any, Callable, Iterable, Iterator, Mapping, MutableMapping, Self, Sequence

from attrhandler import subcollection, views
from attrhandler.errors import InvalidArgument, NotFound, TypeMismatch
from attrhandler.interface import Exportable
from attrhandler.policy import RESERVED_HANDLERS_KEY, FillablePolicy
from attrhandler.registry import HandlerFunc, HandlerItems, HandlerRegistry, handler_entries
from attrhandler.store import AttributeStore, Key, is_ordinal
from attrhandler.subcollection import SubCollection


class Handler(MutableMapping[Key, Any]):
    """Mixed ordinal/named attribute container with a write allow-list.

    A handler is an ordered table of attributes. Named writes are gated by
    the ``fillable`` allow-list, while ordinal pushes append like a list and
    bypass it. The reserved ``handlers`` attribute holds a
    :class:`HandlerRegistry` of callbacks, managed through the
    ``*_handler(s)`` operations.

    Subclasses declare their allow-list with the ``fillable`` class
    attribute. On an instance, ``fillable`` reports the keys of the policy
    actually in force, including a constructor override:

    >>> class Service(Handler):
    ...     fillable = frozenset({'handlers', 'name', 'tags'})
    >>> service = Service({'name': 'svc', 'age': 5})
    >>> service.to_array()
    {'name': 'svc'}

    Instances are not thread-safe. Callers sharing a handler between threads
    must serialize every call.
    """

    fillable: frozenset[Key] = frozenset({RESERVED_HANDLERS_KEY})

    _attributes: AttributeStore[Any]
    _policy: FillablePolicy
    _logger: Logger

    def __init__(
        self,
        attributes: Mapping[Key, Any] | None = None,
        *,
        fillable: Iterable[Key] | FillablePolicy | None = None,
        logger: Logger | None = None,
    ) -> None:
        """
        Initialize the handler.

        Parameters
        ----------
        attributes : Mapping[Key, Any] | None, optional
            Initial attributes. Filtered through the allow-list exactly like
            :meth:`fill`, so disallowed keys are dropped silently.
        fillable : Iterable[Key] | FillablePolicy | None, optional
            Allow-list for this instance, replacing the class default.
        logger : Logger | None, optional
            Logger receiving debug records, by default the module logger.
        """
        self._attributes = AttributeStore()
        self._policy = FillablePolicy.of(type(self).fillable if fillable is None else fillable)
        self.fillable = self._policy.keys
        self._logger = logger or getLogger(__name__)

        if attributes:
            self.fill(attributes)

    @property
    def policy(self) -> FillablePolicy:
        return self._policy

    @property
    def handlers(self) -> HandlerRegistry:
        return self._handlers('Handler.handlers')

    # Mapping protocol

    def __getitem__(self, key: Key) -> Any:
        return self._attributes[key]

    def __setitem__(self, key: Key, value: Any) -> None:
        self.offset_set(key, value)

    def __delitem__(self, key: Key) -> None:
        del self._attributes[key]

    def __iter__(self) -> Iterator[Key]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, key: object) -> bool:
        return key in self._attributes

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails. Private names never fall
        # back to attributes, which keeps copy/pickle away from the store.
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeError(
                f'{type(self).__name__!r} object has no attribute {name!r}'
            ) from None

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.debug_summary()!r})'

    # Basic CRUD

    def get(self, key: Key, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: Key, value: Any) -> Self:
        self._assign('Handler.set()', key, value)
        return self

    def push(self, value: Any, key: Key | None = None) -> Self:
        """Append ``value`` to the store or to the sub-collection at ``key``.

        Without ``key`` the value is stored under the next top-level ordinal
        and the allow-list is not consulted. With ``key`` the push is a named
        write: ``key`` must be fillable, a missing entry becomes a new list,
        and an existing entry must be a sub-collection.

        Raises
        ------
        PolicyViolation
            When ``key`` is given and not fillable.
        TypeMismatch
            When the entry at ``key`` is a scalar.
        """
        if key is None:
            self._attributes.append(value)
            return self

        self._policy.check('Handler.push()', key)
        if key == RESERVED_HANDLERS_KEY:
            self._handlers('Handler.push()').append(value)
        elif key not in self._attributes:
            self._attributes[key] = [value]
        else:
            target = self._collection('Handler.push()', key)
            if isinstance(target, Handler):
                # nested handlers append through their own ordinal push
                target.push(value)
            else:
                subcollection.append(target, value)
        return self

    def push_items(self, *items: Any, key: Key | None = None) -> Self:
        for item in items:
            self.push(item, key)
        return self

    def pull(self, key: Key, default: Any = None) -> Any:
        return self._attributes.pop(key, default)

    def fill(self, values: Mapping[Key, Any]) -> Self:
        for key, value in values.items():
            if not self._policy.allows(key):
                self._logger.debug('Skipping non-fillable attribute %r', key)
                continue
            self._assign('Handler.fill()', key, value)
        return self

    def clear(self) -> Self:
        self._logger.debug('Clearing %d attributes', len(self._attributes))
        self._attributes.clear()
        return self

    # Count and access

    def count(self, key: Key | None = None) -> int:
        if key is None:
            return len(self._attributes)
        if key not in self._attributes:
            raise NotFound('Handler.count()', key)
        return len(self._collection('Handler.count()', key))

    def first(self, key: Key | None = None) -> Any:
        if key is None:
            return self._attributes.first()
        if key not in self._attributes:
            return None
        return subcollection.first(self._collection('Handler.first()', key))

    def last(self, key: Key | None = None) -> Any:
        if key is None:
            return self._attributes.last()
        if key not in self._attributes:
            return None
        return subcollection.last(self._collection('Handler.last()', key))

    # Existence checks

    def is_set(self, key: Key) -> bool:
        return key in self._attributes

    def has(self, key: Key, *offset_sets: Iterable[Key]) -> bool:
        target = self._attributes.get(key)
        if not subcollection.is_collection(target):
            return False
        for offsets in offset_sets:
            if isinstance(offsets, str):
                offsets = (offsets,)
            for offset in offsets:
                if not subcollection.has_offset(target, offset):
                    return False
        return True

    # Search and transforms

    def find(self, key: Key, predicate: Callable[[Any], Any]) -> Any:
        if key not in self._attributes:
            return None
        for _, value in subcollection.entries(self._collection('Handler.find()', key)):
            if predicate(value):
                return value
        return None

    def filter(self, key: Key, predicate: Callable[[Any], Any]) -> Self:
        subcollection.retain(self._existing_collection('Handler.filter()', key), predicate)
        return self

    def map(self, key: Key, transform: Callable[[Any], Any]) -> Self:
        subcollection.transform(self._existing_collection('Handler.map()', key), transform)
        return self

    # Merge and offsets

    def merge(self, source: Mapping[Key, Any] | Exportable) -> Self:
        """Merge ``source`` into the store without consulting the allow-list.

        Named keys of ``source`` overwrite existing entries; ordinal keys are
        appended under fresh ordinals. Values are copied structurally so the
        source and the handler never share nested containers.

        Raises
        ------
        InvalidArgument
            When ``source`` is neither a mapping nor exportable, or when a
            ``handlers`` collection holds non-callables.
        """
        data = self._exported(source)

        prepared: list[tuple[Key | None, Any]] = []
        for key, value in data.items():
            if is_ordinal(key):
                prepared.append((None, value))
            elif key == RESERVED_HANDLERS_KEY and subcollection.is_collection(value):
                prepared.append((key, HandlerRegistry(value)))  # pyright: ignore[reportUnknownArgumentType]
            else:
                prepared.append((key, value))

        for key, value in prepared:
            if key is None:
                self._attributes.append(value)
            else:
                self._attributes[key] = value
        return self

    def offset_exists(self, key: Key) -> bool:
        return self.is_set(key)

    def offset_get(self, key: Key) -> Any:
        return self.get(key)

    def offset_set(self, key: Key, value: Any) -> Self:
        self._assign('Handler.offset_set()', key, value)
        return self

    def offset_sets(self, keys: Iterable[Key], value: Any) -> Self:
        """Set ``value`` under every key of ``keys``, in order.

        Not atomic: a non-fillable key raises ``PolicyViolation`` and leaves
        the assignments made before it in place.
        """
        for key in keys:
            self._assign('Handler.offset_sets()', key, value)
        return self

    def offset_unset(self, key: Key) -> Self:
        self._attributes.pop(key, None)
        return self

    def offset_unsets(self, keys: Iterable[Key]) -> Self:
        for key in keys:
            self._attributes.pop(key, None)
        return self

    def get_offset(self, key: Key, predicate: Callable[[Any], Any]) -> Key | bool:
        """Return the first sub-key at ``key`` whose element matches.

        Returns ``False`` when nothing matches or ``key`` does not hold a
        sub-collection. Compare the result with ``is False``, since ``0`` is
        a valid offset.
        """
        target = self._attributes.get(key)
        if not subcollection.is_collection(target):
            return False
        offset = subcollection.find_offset(target, predicate)
        return False if offset is None else offset

    def set_offset(self, key: Key, predicate: Callable[[Any], Any]) -> Self:
        """Remove every element of the sub-collection at ``key`` matching ``predicate``.

        This is a named write, so ``key`` must be fillable. The predicate is
        only used for matching and is never stored.
        """
        self._policy.check('Handler.set_offset()', key)
        if key not in self._attributes:
            return self
        target = self._collection('Handler.set_offset()', key)
        subcollection.retain(target, lambda value: not predicate(value))
        return self

    # Handlers

    def get_handler(self, offset: Key | None = None) -> HandlerFunc | None:
        registry = self._existing_handlers('Handler.get_handler()')
        if registry is None:
            return None
        return registry.lookup(offset)

    def push_handler(self, callback: HandlerFunc, offset: Key | None = None) -> Self:
        self._handlers('Handler.push_handler()').register(callback, offset)
        return self

    def push_handlers(self, handlers: HandlerItems) -> Self:
        """Register every ``(offset, callback)`` pair, in order.

        A plain list of callables is appended under fresh ordinals.

        Not atomic: a non-callable raises ``InvalidArgument`` after the
        preceding handlers were registered.
        """
        if isinstance(handlers, Mapping):
            for offset, callback in handlers.items():
                self.push_handler(callback, offset)
        else:
            for _, callback in handler_entries(handlers):
                self.push_handler(callback)
        return self

    def pull_handler(self, offset: Key | None = None, default: Any = None) -> Any:
        registry = self._existing_handlers('Handler.pull_handler()')
        if registry is None:
            return default
        return registry.remove(offset, default)

    def fill_handlers(self, handlers: HandlerItems) -> Self:
        self._attributes[RESERVED_HANDLERS_KEY] = HandlerRegistry(handlers)
        return self

    def clear_handlers(self) -> Self:
        self._logger.debug('Clearing handlers')
        self._attributes[RESERVED_HANDLERS_KEY] = HandlerRegistry()
        return self

    # Iteration and export

    def iterate(self) -> Iterator[tuple[Key, Any]]:
        return views.iterate(self._attributes)

    def to_array(self) -> dict[Key, Any]:
        return views.to_array(self._attributes)

    def debug_summary(self) -> dict[str, list[Key]]:
        return views.debug_summary(self._attributes)

    # Internals

    def _assign(self, operation: str, key: Key, value: Any) -> None:
        self._policy.check(operation, key)
        if key == RESERVED_HANDLERS_KEY:
            if not isinstance(value, (Mapping, Sequence)) or isinstance(value, (str, bytes, bytearray)):
                raise InvalidArgument(
                    f'{operation} expects a mapping or a list of handlers, {type(value).__name__} given'
                )
            if not isinstance(value, HandlerRegistry):
                value = HandlerRegistry(value)  # pyright: ignore[reportUnknownArgumentType]
        self._attributes[key] = value

    def _collection(self, operation: str, key: Key) -> SubCollection:
        target = self._attributes[key]
        if not subcollection.is_collection(target):
            raise TypeMismatch(
                f'{operation} expects {key!r} to be a mapping or a list, '
                f'{type(target).__name__} given'
            )
        return target

    def _existing_collection(self, operation: str, key: Key) -> SubCollection:
        if key not in self._attributes:
            raise NotFound(operation, key)
        return self._collection(operation, key)

    def _exported(self, source: Any) -> dict[Key, Any]:
        if isinstance(source, Exportable) and callable(source.to_array):
            data = source.to_array()
        elif isinstance(source, Mapping):
            data = source
        else:
            raise InvalidArgument(
                'Handler.merge() expects a mapping or an object with a to_array() method, '
                f'{type(source).__name__} given'
            )

        if not isinstance(data, Mapping):
            raise InvalidArgument(
                f'Handler.merge() expects to_array() to return a mapping, {type(data).__name__} given'
            )
        return views.to_array(data)  # pyright: ignore[reportUnknownArgumentType]

    def _existing_handlers(self, operation: str) -> HandlerRegistry | None:
        if RESERVED_HANDLERS_KEY not in self._attributes:
            return None
        return self._handlers(operation)

    def _handlers(self, operation: str) -> HandlerRegistry:
        if RESERVED_HANDLERS_KEY not in self._attributes:
            self._logger.debug('Creating handler registry')
            self._attributes[RESERVED_HANDLERS_KEY] = HandlerRegistry()

        registry = self._attributes[RESERVED_HANDLERS_KEY]
        if not isinstance(registry, HandlerRegistry):
            raise InvalidArgument(
                f'{operation} expects {RESERVED_HANDLERS_KEY!r} to hold a mapping of handlers, '
                f'{type(registry).__name__} given'
            )
        return registry
