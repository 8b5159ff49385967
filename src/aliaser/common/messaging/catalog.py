import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

log = logging.getLogger(__name__)


class MessageCatalog:
    """
    Message templates keyed by dotted ids, loaded from JSON files.

    Later roots override earlier ones, so project-local overrides can be
    layered on top of the packaged defaults.
    """

    def __init__(self, roots: List[Path], lang: str = "en"):
        self.roots = roots
        self.lang = lang
        self._registry: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        registry: Dict[str, str] = {}
        for root in self.roots:
            path = root / f"{self.lang}.json"
            if not path.is_file():
                continue
            try:
                with path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                log.warning(f"Could not load message catalog {path}: {e}")
                continue
            if isinstance(data, dict):
                for key, value in data.items():
                    registry[str(key)] = str(value)
        return registry

    def get(self, key: str) -> Optional[str]:
        if self._registry is None:
            self._registry = self._load()
        return self._registry.get(key)


class DictCatalog:
    def __init__(self, templates: Dict[str, str]):
        self._templates = templates

    def get(self, key: str) -> Optional[str]:
        return self._templates.get(key)
