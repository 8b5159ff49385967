import os
from pathlib import Path
from typing import Union

from .messaging import L, MessageBus, MessageCatalog, SemanticPointer

# --- Composition Root for aliaser's reporting services ---


def _create_catalog() -> MessageCatalog:
    lang = os.getenv("ALIASER_LANG", "en")
    roots = [Path(__file__).parent / "assets" / "messages"]

    # Overrides are layered on top of the packaged templates
    override = os.getenv("ALIASER_MESSAGES_DIR")
    if override:
        roots.append(Path(override))

    return MessageCatalog(roots, lang=lang)


catalog = _create_catalog()


def text(msg_id: Union[str, SemanticPointer]) -> str:
    key = str(msg_id)
    return catalog.get(key) or key


# Global singleton instance
bus = MessageBus(catalog)

__all__ = ["bus", "catalog", "text", "L", "MessageBus"]
