"""
Search commands for albumnote (`albumnote search`).

`albumnote search album` is the terminal counterpart of an interactive
suggestion list: it queries Spotify, shows the matches as a numbered table
and turns the chosen album into a note. At the prompt, a number picks an
album, `/text` always runs a new search (so numeric titles such as "1999"
can be searched) and any other text runs a new search too.

One SpotifyPlugin serves the whole session, so follow-up searches reuse the
cached access token.
"""

import asyncio
import json
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from ..core.config import get_settings, resolve_credentials
from ..core.models import SpotifyAlbum
from ..core.notes import AlbumNoteCreator
from ..core.notify import Notifier
from ..core.vault import Vault, WriteOutcome
from ..plugins.spotify import MISSING_CREDENTIALS_MESSAGE, SpotifyPlugin

console = Console()
logger = logging.getLogger(__name__)
app = typer.Typer(no_args_is_help=True, help="Search Spotify and create album notes.")

NEW_SEARCH_PREFIX = "/"


def _suggestion_row(album: SpotifyAlbum) -> dict:
    return {
        "id": album.id,
        "title": album.name,
        "artist": album.artist_names,
        "year": album.year,
        "tracks": album.total_tracks,
        "url": album.spotify_url,
        "thumbnail": album.smallest_image_url,
    }


def _print_suggestions(albums: List[SpotifyAlbum]) -> None:
    table = Table(show_header=True, header_style="bold")
    for col in ("#", "Title", "Artist", "Year", "Thumbnail"):
        table.add_column(col)
    for i, album in enumerate(albums, start=1):
        table.add_row(
            str(i),
            escape(album.name),
            escape(album.artist_names),
            album.year,
            album.smallest_image_url,
        )
    console.print(table)


async def _choose_interactively(
    plugin: SpotifyPlugin, albums: List[SpotifyAlbum]
) -> Optional[SpotifyAlbum]:
    while True:
        if albums:
            _print_suggestions(albums)
            answer = Prompt.ask(
                "Pick an album number, or type a new search (/text searches for text, empty to quit)",
                default="",
            )
        else:
            console.print("[yellow]No albums found.[/yellow]")
            answer = Prompt.ask("Search for an album... (empty to quit)", default="")
        answer = answer.strip()
        if not answer:
            return None

        if answer.startswith(NEW_SEARCH_PREFIX):
            query = answer[len(NEW_SEARCH_PREFIX):].strip()
            if not query:
                continue
        elif answer.isdigit() and albums:
            index = int(answer)
            if 1 <= index <= len(albums):
                return albums[index - 1]
            console.print(
                f"[red]Choose a number between 1 and {len(albums)}, "
                f"or type /{escape(answer)} to search for it.[/red]"
            )
            continue
        else:
            query = answer

        albums = await plugin.search_album(query)


async def _search_and_choose(
    client_id: str,
    client_secret: str,
    query: str,
    notifier: Notifier,
    *,
    pick: Optional[int],
    json_output: bool,
) -> Optional[SpotifyAlbum]:
    async with SpotifyPlugin(client_id, client_secret, notifier=notifier) as plugin:
        albums = await plugin.search_album(query)

        if json_output:
            typer.echo(
                json.dumps(
                    {
                        "provider": "spotify",
                        "type": "album",
                        "query": query,
                        "results": [_suggestion_row(a) for a in albums],
                    }
                )
            )
            return None

        if pick is not None:
            if not 1 <= pick <= len(albums):
                console.print(
                    f"[red]Cannot pick result {pick}: the search returned {len(albums)} album(s).[/red]"
                )
                raise typer.Exit(1)
            _print_suggestions(albums)
            return albums[pick - 1]

        return await _choose_interactively(plugin, albums)


@app.command("album")
def search_album(
    query: Optional[str] = typer.Argument(None, help="Album search text (prompted when omitted)"),
    pick: Optional[int] = typer.Option(
        None, "--pick", "-p", help="Pick result N (1-based) without prompting"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the suggestions as JSON and exit"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the rendered note instead of writing it"
    ),
    no_open: bool = typer.Option(False, "--no-open", help="Do not open the note afterwards"),
):
    """Search album: find an album on Spotify and create a note for it."""
    notifier = Notifier(console)
    settings = get_settings()
    client_id, client_secret = resolve_credentials(settings)
    if not client_id or not client_secret:
        notifier.notice(MISSING_CREDENTIALS_MESSAGE, "error")
        raise typer.Exit(1)

    if query is None:
        query = Prompt.ask("Search for an album...")

    album = asyncio.run(
        _search_and_choose(
            client_id, client_secret, query, notifier, pick=pick, json_output=json_output
        )
    )
    if album is None:
        raise typer.Exit()

    notifier.notice(f"Selected: {album.name}")
    creator = AlbumNoteCreator(
        settings, Vault(settings.vault_path), notifier, open_notes=not no_open
    )

    if dry_run:
        note = creator.prepare(album)
        console.print(f"[bold]Would write:[/bold] {escape(creator.note_path(note.filename))}", highlight=False)
        console.print(note.content, markup=False, highlight=False)
        return

    result = creator.create(album)
    if result.outcome is WriteOutcome.FAILED:
        logger.error("Failed to create album note %s: %s", result.path, result.error)
        raise typer.Exit(1)
