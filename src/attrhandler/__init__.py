# pyright: reportUnusedImport=false
from attrhandler.errors import HandlerError, InvalidArgument, NotFound, PolicyViolation, TypeMismatch
from attrhandler.handler import Handler
from attrhandler.interface import Exportable, HandlerInterface
from attrhandler.policy import RESERVED_HANDLERS_KEY, FillablePolicy
from attrhandler.registry import HandlerRegistry
from attrhandler.store import AttributeStore, Key
