class HandlerError(Exception):
    """Base class for every error raised by :mod:`attrhandler`."""


class PolicyViolation(HandlerError):
    """Raised when a named write targets a key outside the fillable allow-list.

    Only strict writes raise this error; :meth:`Handler.fill` skips
    disallowed keys instead.
    """

    def __init__(self, operation: str, key: object) -> None:
        super().__init__(f'{operation} expects a fillable key, {key!r} given')
        self.operation = operation
        self.key = key


class TypeMismatch(HandlerError, TypeError):
    """Raised when a collection operation meets a scalar value."""


class InvalidArgument(HandlerError, ValueError):
    """Raised for unusable arguments.

    Covers merge sources without an export capability, a ``handlers`` slot
    which is not a mapping, and handlers which are not callable.
    """


class NotFound(HandlerError, LookupError):
    """Raised when a query needs an existing key and the key is absent."""

    def __init__(self, operation: str, key: object) -> None:
        super().__init__(f'{operation} found no attribute named {key!r}')
        self.operation = operation
        self.key = key
