from pathlib import Path

import pytest
from typer.testing import CliRunner

from aliaser.cli.main import app
from aliaser.common import L
from aliaser.test_utils import SpyBus, WorkspaceFactory

runner = CliRunner()

RELATIVE_IMPORT = 'import Card from "../../components/Card";\n'


@pytest.fixture
def project(workspace_factory: WorkspaceFactory) -> Path:
    return (
        workspace_factory.with_tsconfig(
            ".", paths={"@/*": ["src/*"], "~/*": ["src/*"]}
        )
        .with_raw("src/components/Button.tsx", "export default () => null;\n")
        .with_source("src/pages/a/Page.ts", RELATIVE_IMPORT)
        .with_source(
            "src/Button.test.tsx",
            """\
            import Button from "components/Button";
            jest.mock("components/Button");
            """,
        )
        .build()
    )


def test_without_write_nothing_changes(project, monkeypatch):
    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["shorten", str(project)], catch_exceptions=False)

    assert result.exit_code == 0
    assert (project / "src/pages/a/Page.ts").read_text() == RELATIVE_IMPORT
    spy_bus.assert_id_called(L.shorten.run.scanning, level="info")
    spy_bus.assert_id_called(L.shorten.run.would_update, level="info")


def test_write_applies_changes(project):
    result = runner.invoke(app, ["shorten", str(project), "--write"])

    assert result.exit_code == 0
    assert "Updated 2 files." in result.output
    assert (project / "src/pages/a/Page.ts").read_text() == (
        'import Card from "@/components/Card";\n'
    )


def test_dry_run_is_the_default_behaviour(project):
    result = runner.invoke(app, ["shorten", str(project), "--dry-run"])

    assert result.exit_code == 0
    assert "Would update 2 files. Use --write to apply." in result.output
    assert (project / "src/pages/a/Page.ts").read_text() == RELATIVE_IMPORT


def test_write_and_dry_run_are_exclusive(project, monkeypatch):
    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["shorten", str(project), "--write", "--dry-run"])

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.cli.error.write_and_dry_run, level="error")
    assert (project / "src/pages/a/Page.ts").read_text() == RELATIVE_IMPORT


def test_root_must_be_a_directory(tmp_path, monkeypatch):
    missing = tmp_path / "missing"

    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["shorten", str(missing)])

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.cli.error.not_a_directory, level="error")


def test_broken_tsconfig_is_a_fatal_error(workspace_factory: WorkspaceFactory, monkeypatch):
    root = (
        workspace_factory.with_raw("tsconfig.json", "{ not valid")
        .with_source("src/a.ts", RELATIVE_IMPORT)
        .build()
    )

    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["shorten", str(root), "--write"])

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.error.config_parse, level="error")
    message = next(
        m for m in spy_bus.get_messages() if m["id"] == str(L.error.config_parse)
    )
    assert "tsconfig.json" in message["params"]["error"]


def test_update_refs_rewrites_mock_keys(project):
    result = runner.invoke(app, ["shorten", str(project), "--write", "--update-refs"])

    assert result.exit_code == 0
    assert "Post-processed 1 files." in result.output
    assert (project / "src/Button.test.tsx").read_text() == (
        'import Button from "@/components/Button";\n'
        'jest.mock("@/components/Button");\n'
    )


def test_update_refs_can_come_from_settings(workspace_factory: WorkspaceFactory):
    root = (
        workspace_factory.with_tsconfig(".", paths={"@/*": ["src/*"]})
        .with_settings({"update_refs": True})
        .with_raw("src/components/Button.tsx", "export default () => null;\n")
        .with_source(
            "src/Button.test.tsx",
            """\
            import Button from "components/Button";
            jest.mock("components/Button");
            """,
        )
        .build()
    )

    result = runner.invoke(app, ["shorten", str(root), "--write"])

    assert result.exit_code == 0
    assert 'jest.mock("@/components/Button");' in (
        root / "src/Button.test.tsx"
    ).read_text()


def test_verbose_lists_every_scanned_file(project):
    result = runner.invoke(app, ["--verbose", "shorten", str(project)])

    assert result.exit_code == 0
    assert "[scan]" in result.output
    assert "Page.ts" in result.output


def test_equal_length_aliases_fall_back_to_lexicographic_order(project):
    runner.invoke(app, ["shorten", str(project), "--write"])

    # "@" sorts before "~"
    assert (project / "src/pages/a/Page.ts").read_text() == (
        'import Card from "@/components/Card";\n'
    )


def test_prefer_declaration_order(workspace_factory: WorkspaceFactory):
    root = (
        workspace_factory.with_tsconfig(
            ".", paths={"~/*": ["src/*"], "@/*": ["src/*"]}
        )
        .with_source("src/pages/a/Page.ts", RELATIVE_IMPORT)
        .build()
    )

    result = runner.invoke(
        app, ["shorten", str(root), "--write", "--prefer-declaration-order"]
    )

    assert result.exit_code == 0
    assert (root / "src/pages/a/Page.ts").read_text() == (
        'import Card from "~/components/Card";\n'
    )


def test_verbose_is_an_application_option(project):
    result = runner.invoke(app, ["shorten", str(project), "--verbose"])

    assert result.exit_code != 0
    assert (project / "src/pages/a/Page.ts").read_text() == RELATIVE_IMPORT


def test_undecodable_source_is_reported_not_raised(
    workspace_factory: WorkspaceFactory, monkeypatch
):
    root = workspace_factory.with_tsconfig(".", paths={"@/*": ["src/*"]}).build()
    (root / "src").mkdir()
    (root / "src" / "latin1.ts").write_bytes(b'const s = "caf\xe9";\n')

    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["shorten", str(root)], catch_exceptions=False)

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.error.generic, level="error")
