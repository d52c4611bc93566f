from dataclasses import dataclass, field
from typing import Iterable

from attrhandler.errors import PolicyViolation
from attrhandler.store import Key

RESERVED_HANDLERS_KEY = 'handlers'


@dataclass(frozen=True)
class FillablePolicy:
    """Allow-list of keys which may be written by name.

    Instances are immutable so a single policy can be shared by every
    container of a class. Use :meth:`extend` to derive a wider policy.

    Attributes
    ----------
    keys:
        The keys eligible for named writes.
    """

    keys: frozenset[Key] = field(default_factory=lambda: frozenset({RESERVED_HANDLERS_KEY}))

    @classmethod
    def of(cls, keys: 'Iterable[Key] | FillablePolicy') -> 'FillablePolicy':
        if isinstance(keys, FillablePolicy):
            return keys
        if isinstance(keys, str):
            # A bare string is one key, not an iterable of characters.
            return cls(frozenset({keys}))
        return cls(frozenset(keys))

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def allows(self, key: Key) -> bool:
        return key in self.keys

    def check(self, operation: str, key: Key) -> None:
        """Raise when ``key`` may not be written by name.

        Parameters
        ----------
        operation:
            Name of the calling operation, used in the error message.
        key:
            The key about to be written.

        Raises
        ------
        PolicyViolation
            When ``key`` is not part of the allow-list.
        """
        if key not in self.keys:
            raise PolicyViolation(operation, key)

    def extend(self, *keys: Key) -> 'FillablePolicy':
        return FillablePolicy(self.keys | frozenset(keys))
