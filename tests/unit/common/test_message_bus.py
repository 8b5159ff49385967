import json
from typing import List, Tuple

import pytest

from aliaser.common import L, text
from aliaser.common.messaging import DictCatalog, MessageBus, MessageCatalog


class RecordingRenderer:
    def __init__(self):
        self.rendered: List[Tuple[str, str]] = []

    def render(self, message: str, level: str) -> None:
        self.rendered.append((level, message))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def message_bus(renderer) -> MessageBus:
    catalog = DictCatalog(
        {
            "run.updated": "Updated {count} files.",
            "run.broken": "Missing {name}",
        }
    )
    message_bus = MessageBus(catalog)
    message_bus.set_renderer(renderer)
    return message_bus


def test_messages_are_formatted_with_their_level(message_bus, renderer):
    message_bus.success(L.run.updated, count=3)
    message_bus.warning("run.updated", count=0)

    assert renderer.rendered == [
        ("success", "Updated 3 files."),
        ("warning", "Updated 0 files."),
    ]


def test_unknown_ids_render_as_the_id(message_bus, renderer):
    message_bus.info(L.not_in.catalog)

    assert renderer.rendered == [("info", "not_in.catalog")]


def test_missing_parameters_do_not_raise(message_bus, renderer):
    message_bus.error(L.run.broken)

    assert renderer.rendered == [("error", "<formatting_error for 'run.broken'>")]


def test_bus_without_renderer_is_silent():
    MessageBus(DictCatalog({})).info(L.anything)


def test_pointer_paths():
    assert str(L.shorten.run.updated) == "shorten.run.updated"
    assert L.shorten.run == "shorten.run"
    assert {L.a.b: 1}[L.a.b] == 1


def test_catalog_later_roots_override_earlier_ones(tmp_path):
    base = tmp_path / "base"
    local = tmp_path / "local"
    base.mkdir()
    local.mkdir()
    (base / "en.json").write_text(
        json.dumps({"greeting": "hello", "farewell": "bye"}), encoding="utf-8"
    )
    (local / "en.json").write_text(json.dumps({"greeting": "hi"}), encoding="utf-8")

    catalog = MessageCatalog([base, local], lang="en")

    assert catalog.get("greeting") == "hi"
    assert catalog.get("farewell") == "bye"
    assert catalog.get("missing") is None


def test_catalog_skips_unreadable_files(tmp_path):
    (tmp_path / "en.json").write_text("{not json", encoding="utf-8")

    assert MessageCatalog([tmp_path]).get("anything") is None


def test_packaged_catalog_has_cli_texts():
    assert text(L.cli.error.write_and_dry_run) != "cli.error.write_and_dry_run"
    assert text(L.shorten.run.scanned).format(count=2) == "Scanned 2 files."
