from pathlib import Path

import pytest

from aliaser.config import load_tsconfig
from aliaser.errors import ConfigParseError
from aliaser.test_utils import WorkspaceFactory


def test_load_accepts_comments_and_trailing_commas(tmp_path: Path):
    (tmp_path / "tsconfig.json").write_text(
        """
        {
          // Generated by the scaffolder
          "compilerOptions": {
            "baseUrl": ".", /* project root */
            "paths": {
              "@/*": ["src/*",],
            },
          },
        }
        """
    )

    config = load_tsconfig(tmp_path / "tsconfig.json")

    assert config.base_url == tmp_path
    assert config.paths == {"@/*": ["src/*"]}


def test_extends_inherits_paths_and_base_url(tmp_path: Path):
    factory = WorkspaceFactory(tmp_path)
    factory.with_tsconfig(
        "config", paths={"@/*": ["src/*"]}, base_url="..", filename="base.json"
    )
    factory.with_tsconfig(".", base_url=None, extends="./config/base").build()

    config = load_tsconfig(tmp_path / "tsconfig.json")

    # baseUrl stays relative to the file that declared it
    assert config.base_url == tmp_path
    assert config.paths == {"@/*": ["src/*"]}


def test_child_options_override_extended_ones(tmp_path: Path):
    factory = WorkspaceFactory(tmp_path)
    factory.with_tsconfig(".", paths={"@/*": ["lib/*"]}, filename="base.json")
    factory.with_tsconfig(
        "app", paths={"~/*": ["*"]}, base_url=None, extends="../base.json"
    ).build()

    config = load_tsconfig(tmp_path / "app" / "tsconfig.json")

    assert config.paths == {"~/*": ["*"]}
    assert config.base_url == tmp_path


def test_extends_resolves_packages_from_node_modules(tmp_path: Path):
    factory = WorkspaceFactory(tmp_path)
    factory.with_tsconfig(
        "node_modules/@acme/tsconfig", paths={"@/*": ["src/*"]}, base_url=None
    )
    factory.with_tsconfig(".", extends="@acme/tsconfig").build()

    config = load_tsconfig(tmp_path / "tsconfig.json")

    assert config.paths == {"@/*": ["src/*"]}


def test_circular_extends_is_a_parse_error(tmp_path: Path):
    factory = WorkspaceFactory(tmp_path)
    factory.with_tsconfig(".", extends="./other.json")
    factory.with_tsconfig(".", extends="./tsconfig.json", filename="other.json").build()

    with pytest.raises(ConfigParseError, match="circular"):
        load_tsconfig(tmp_path / "tsconfig.json")


def test_missing_extended_file_is_a_parse_error(tmp_path: Path):
    WorkspaceFactory(tmp_path).with_tsconfig(".", extends="./nope.json").build()

    with pytest.raises(ConfigParseError) as exc_info:
        load_tsconfig(tmp_path / "tsconfig.json")

    assert exc_info.value.path == tmp_path / "tsconfig.json"


def test_malformed_file_names_the_file(tmp_path: Path):
    (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {')

    with pytest.raises(ConfigParseError) as exc_info:
        load_tsconfig(tmp_path / "tsconfig.json")

    assert exc_info.value.path == tmp_path / "tsconfig.json"
    assert "tsconfig.json" in str(exc_info.value)
