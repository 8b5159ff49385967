from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Union

import aliaser.common
from aliaser.common.messaging import SemanticPointer
from aliaser.common.messaging.protocols import Renderer


class SpyRenderer(Renderer):
    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def render(self, message: str, level: str) -> None:
        pass

    def record(self, level: str, msg_id: str, params: Dict[str, Any]):
        self.messages.append({"level": level, "id": msg_id, "params": params})


class SpyBus:
    """
    A test utility that spies on the global aliaser.common.bus singleton.

    Modules hold the instance via `from aliaser.common import bus`, so the
    instance is patched in place rather than replaced.
    """

    def __init__(self):
        self._spy_renderer = SpyRenderer()

    @contextmanager
    def patch(self, monkeypatch: Any):
        real_bus = aliaser.common.bus

        def intercept_render(
            level: str, msg_id: Union[str, SemanticPointer], **kwargs: Any
        ) -> None:
            self._spy_renderer.record(level, str(msg_id), kwargs)

        monkeypatch.setattr(real_bus, "_render", intercept_render)
        monkeypatch.setattr(real_bus, "_renderer", self._spy_renderer)

        yield self

    def get_messages(self) -> List[Dict[str, Any]]:
        return self._spy_renderer.messages

    def ids(self, level: Optional[str] = None) -> List[str]:
        return [
            m["id"]
            for m in self.get_messages()
            if level is None or m["level"] == level
        ]

    def assert_id_called(
        self, msg_id: Union[str, SemanticPointer], level: Optional[str] = None
    ):
        key = str(msg_id)
        if key not in self.ids(level):
            ids_seen = self.ids()
            raise AssertionError(
                f"Message with ID '{key}' was not sent.\nCaptured IDs: {ids_seen}"
            )

    def assert_id_not_called(self, msg_id: Union[str, SemanticPointer]):
        key = str(msg_id)
        if key in self.ids():
            raise AssertionError(f"Message with ID '{key}' was sent unexpectedly.")
