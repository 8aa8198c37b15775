"""nippo command line (click).

Commands:
  nippo format   reconcile front-matter of documents modified since the checkpoint
  nippo status   show the configured folder and the last sync checkpoint
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from nippo import __version__
from nippo.application.commands.format_documents import format_documents
from nippo.config.logging import configure_logging
from nippo.config.settings import get_settings
from nippo.container import create_container
from nippo.domain.exceptions import NippoError, PersistenceError

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(__version__, prog_name="nippo")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Keep journal front-matter in shape."""
    ctx.ensure_object(dict)
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj["settings"] = settings


@cli.command("format")
@click.option(
    "--folder",
    "folder_id",
    default=None,
    help="Document folder (defaults to NIPPO_DRIVE_FOLDER_ID).",
)
@click.option(
    "--checkpoint",
    "checkpoint_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Checkpoint file (defaults to NIPPO_CHECKPOINT_PATH).",
)
@click.option("-q", "--quiet", is_flag=True, help="Hide unchanged files.")
@click.pass_context
def format_cmd(
    ctx: click.Context,
    folder_id: str | None,
    checkpoint_path: Path | None,
    quiet: bool,
) -> None:
    """Add missing front-matter and resolve `updated: now` placeholders."""
    container = create_container(
        ctx.obj["settings"],
        folder_id=folder_id,
        checkpoint_path=checkpoint_path,
        quiet=quiet,
    )

    try:
        with container.presenter.interruptible():
            result = format_documents(
                container.folder_id,
                document_store=container.document_store,
                checkpoint_store=container.checkpoint_store,
                presenter=container.presenter,
                event_bus=container.event_bus,
                tz=container.tz,
            )
    except PersistenceError as e:
        raise click.ClickException(f"{e.message} (sync checkpoint not advanced)")
    except NippoError as e:
        raise click.ClickException(e.message)

    if result.cancelled:
        click.echo("Cancelled; sync checkpoint not advanced.")
    if result.failed:
        click.echo("Sync checkpoint not advanced; failed files will be retried next run.")
        ctx.exit(1)


@cli.command()
@click.option(
    "--checkpoint",
    "checkpoint_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
)
@click.pass_context
def status(ctx: click.Context, checkpoint_path: Path | None) -> None:
    """Show the configured folder and last sync time."""
    container = create_container(ctx.obj["settings"], checkpoint_path=checkpoint_path)
    try:
        last_sync = container.checkpoint_store.get_last_sync_time()
    except NippoError as e:
        raise click.ClickException(e.message)

    click.echo(f"Folder:     {container.folder_id or '(not configured)'}")
    click.echo(f"Checkpoint: {checkpoint_path or container.settings.checkpoint_path}")
    click.echo(f"Last sync:  {last_sync.isoformat() if last_sync else 'never'}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
