from .bus import MessageBus
from .catalog import DictCatalog, MessageCatalog
from .pointer import L, SemanticPointer
from .protocols import MessageSource, Renderer

__all__ = [
    "MessageBus",
    "MessageCatalog",
    "DictCatalog",
    "L",
    "SemanticPointer",
    "MessageSource",
    "Renderer",
]
