import os
from pathlib import Path

import typer

from aliaser.common import L, bus, text
from aliaser.config import load_settings
from aliaser.errors import ConfigParseError
from aliaser.refactor import ShortenRunner
from aliaser.workspace import iter_source_files


def shorten_command(
    ctx: typer.Context,
    root: Path = typer.Argument(..., help=text(L.cli.option.root.help)),
    write: bool = typer.Option(False, "--write", help=text(L.cli.option.write.help)),
    dry_run: bool = typer.Option(
        False, "--dry-run", help=text(L.cli.option.dry_run.help)
    ),
    update_refs: bool = typer.Option(
        False, "--update-refs", help=text(L.cli.option.update_refs.help)
    ),
    prefer_declaration_order: bool = typer.Option(
        False,
        "--prefer-declaration-order",
        help=text(L.cli.option.prefer_declaration_order.help),
    ),
):
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    if write and dry_run:
        bus.error(L.cli.error.write_and_dry_run)
        raise typer.Exit(code=1)

    root_path = Path(os.path.abspath(root))
    if not root_path.is_dir():
        bus.error(L.cli.error.not_a_directory, path=root_path)
        raise typer.Exit(code=1)

    try:
        # Flags only ever switch settings on; the settings file supplies the rest
        settings = load_settings(root_path).with_overrides(
            update_refs=True if update_refs else None,
            tie_break="declaration" if prefer_declaration_order else None,
        )

        bus.info(L.shorten.run.scanning, root=root_path)
        runner = ShortenRunner(root_path, settings)
        files = iter_source_files(
            root_path,
            extensions=settings.extensions,
            ignore_dirs=settings.ignore_dirs,
        )
        runner.run(files, write=write, verbose=verbose)
    except ConfigParseError as e:
        bus.error(L.error.config_parse, error=str(e))
        raise typer.Exit(code=1)
    except (OSError, UnicodeDecodeError) as e:
        bus.error(L.error.generic, error=str(e))
        raise typer.Exit(code=1)
