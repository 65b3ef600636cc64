"""
Command-line interface for Speech Review.

Runs the API server and provides a terminal client for reviewing a dataset
against a running server.
"""

import os
from pathlib import Path

import click
from rich.console import Console

from app.client.api_client import ReviewApiClient, ReviewApiError
from app.client.list_view import ReviewListView, VirtualListWindow
from app.client.player import PlaybackCoordinator, SubprocessPlayer
from app.client.render import render_item, render_list, render_summary
from app.client.summary_panel import SummaryPanel
from app.config import get_settings
from app.db.database import configure_database
from app.utils.logger import setup_logging

console = Console()


def client_options(func):
    """Decorator to add options shared by the client commands."""
    func = click.option(
        '--api-url',
        envvar='API_URL',
        default=None,
        help='Base URL of the Speech Review API (default: http://localhost:8000)',
    )(func)
    func = click.option(
        '--log-level',
        type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
        default='WARNING',
        help='Logging level (default: WARNING)',
    )(func)
    return func


def build_list_view(api: ReviewApiClient, rows: int, with_player: bool = False) -> ReviewListView:
    settings = get_settings()
    player = None
    if with_player:
        player = PlaybackCoordinator(lambda source: SubprocessPlayer(source, settings.player_command))
    window = VirtualListWindow(settings.row_height, viewport_height=settings.row_height * rows)
    return ReviewListView(api, player=player, window=window)


@click.group()
@click.version_option(version=get_settings().app_version, prog_name='speech-review')
@click.pass_context
def cli(ctx):
    """
    Speech Review CLI.

    Serve an audio + transcript dataset and review its transcripts.
    """
    ctx.ensure_object(dict)


@cli.command()
@click.option(
    '--dataset',
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    required=True,
    help='Dataset directory containing metadata.tsv and wavs/',
)
@click.option(
    '--database-url',
    default=None,
    help='SQLAlchemy URL of the review store (default: sqlite:///<dataset>/reviews.db)',
)
@click.option('--host', default='127.0.0.1', help='Interface to bind (default: 127.0.0.1)')
@click.option('--port', default=8000, type=int, help='Port to listen on (default: 8000)')
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Logging level (default: INFO)',
)
def serve(dataset, database_url, host, port, log_level):
    """Run the review API for a dataset directory."""
    import uvicorn

    dataset = dataset.resolve()
    os.environ['DATASET_PATH'] = str(dataset)
    os.environ['DATABASE_URL'] = database_url or f"sqlite:///{dataset / 'reviews.db'}"
    os.environ['LOG_LEVEL'] = log_level.upper()
    get_settings.cache_clear()
    configure_database(os.environ["DATABASE_URL"])

    click.echo(f"Serving {dataset} on http://{host}:{port}")
    uvicorn.run("app.main:app", host=host, port=port, log_level=log_level.lower())


@cli.command()
@client_options
def summary(api_url, log_level):
    """Show total, saved, dropped, and remaining counts."""
    setup_logging(log_level, "console")
    with ReviewApiClient(api_url) as api:
        panel = SummaryPanel(api)
        try:
            panel.refresh()
        except ReviewApiError as e:
            raise click.ClickException(str(e))
        console.print(render_summary(panel))


@cli.command(name='list')
@client_options
@click.option('--start', default=0, type=int, help='First row to show (default: 0)')
@click.option('--rows', default=5, type=int, help='Rows per screen (default: 5)')
def list_items(api_url, log_level, start, rows):
    """Show one screen of dataset items."""
    setup_logging(log_level, "console")
    with ReviewApiClient(api_url) as api:
        list_view = build_list_view(api, rows)
        try:
            list_view.load()
        except ReviewApiError as e:
            raise click.ClickException(str(e))
        list_view.scroll_to(start)
        console.print(render_list(list_view))


def _submit(api_url, filename, text, action):
    with ReviewApiClient(api_url) as api:
        list_view = build_list_view(api, rows=1)
        try:
            list_view.load()
            if text is not None:
                list_view.edit_text(filename, text)
            item = getattr(list_view, action)(filename)
        except KeyError as e:
            raise click.ClickException(str(e.args[0]))
        except ReviewApiError as e:
            raise click.ClickException(str(e))
        console.print(render_item(list_view.index_of(filename), item))


@cli.command()
@client_options
@click.argument('filename')
@click.option('--text', default=None, help='Corrected transcript (default: keep the current text)')
def save(api_url, log_level, filename, text):
    """Mark FILENAME as reviewed (status normal)."""
    setup_logging(log_level, "console")
    _submit(api_url, filename, text, "save")


@cli.command()
@client_options
@click.argument('filename')
@click.option('--text', default=None, help='Corrected transcript (default: keep the current text)')
def drop(api_url, log_level, filename, text):
    """Mark FILENAME as dropped from the dataset."""
    setup_logging(log_level, "console")
    _submit(api_url, filename, text, "drop")


REVIEW_HELP = (
    "[n]ext [b]ack [e]dit [s]ave [d]rop [p]lay "
    "[r]efresh [l]ast [t]op [q]uit"
)


@cli.command()
@client_options
@click.option('--rows', default=3, type=int, help='Rows per screen (default: 3)')
def review(api_url, log_level, rows):
    """Review the dataset interactively, one item at a time."""
    setup_logging(log_level, "console")
    with ReviewApiClient(api_url) as api:
        list_view = build_list_view(api, rows, with_player=True)
        panel = SummaryPanel(api)
        try:
            list_view.load()
            panel.refresh()
        except ReviewApiError as e:
            raise click.ClickException(str(e))

        if not list_view.items:
            console.print("Dataset is empty")
            return

        cursor = 0
        try:
            while True:
                console.print(render_summary(panel))
                console.print(render_list(list_view))
                item = list_view.items[cursor]
                console.print(f"[bold]{cursor + 1}/{len(list_view.items)}[/bold] {item.filename}")

                command = click.prompt(REVIEW_HELP, default="n", show_default=False).strip().lower()
                previous = cursor

                try:
                    if command == "q":
                        break
                    elif command == "n":
                        cursor = min(cursor + 1, len(list_view.items) - 1)
                    elif command == "b":
                        cursor = max(cursor - 1, 0)
                    elif command == "e":
                        text = click.prompt("Text", default=item.text or "")
                        list_view.edit_text(item.filename, text)
                    elif command in ("s", "d"):
                        if command == "s":
                            list_view.save(item.filename)
                        else:
                            list_view.drop(item.filename)
                        console.print("Saved", style="green")
                        cursor = min(cursor + 1, len(list_view.items) - 1)
                    elif command == "p":
                        list_view.play(item.filename)
                    elif command == "r":
                        panel.refresh()
                    elif command == "l":
                        index = panel.jump_to_last(list_view)
                        if index is not None:
                            cursor = index
                    elif command == "t":
                        list_view.jump_to_top()
                        cursor = 0
                    else:
                        console.print(f"Unknown command: {command}", style="red")
                except ReviewApiError as e:
                    console.print(f"Request failed: {e}", style="red")

                if cursor != previous:
                    list_view.window.scroll_to_index(cursor, alignment="start")
        finally:
            if list_view.player is not None:
                list_view.player.stop()


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
