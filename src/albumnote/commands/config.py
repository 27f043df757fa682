"""
Configuration commands for albumnote (`albumnote config`).

This module is the settings screen of the tool:
- Spotify client credentials (settings file or system keyring)
- Vault location, note folder, file name format and template file
- Viewing and clearing stored settings
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ..core.auth import clear_credentials, get_credentials, store_credentials
from ..core.config import (
    get_settings,
    resolve_credentials,
    save_settings,
)
from ..core.template import PLACEHOLDERS

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    help="Manage Spotify credentials, note location and templates.",
)


def _credential_source(settings_value: str, key: str) -> Optional[str]:
    if settings_value:
        return "settings"
    if get_credentials("spotify", key):
        return "credential store"
    return None


@app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output configuration as JSON"),
):
    """
    Display the current configuration.

    Credentials are reported as set or not set; their values are never shown.
    """
    settings = get_settings()
    client_id, client_secret = resolve_credentials(settings)

    data = {
        "notes": {
            "vault": str(settings.vault_path),
            "folder": settings.folder,
            "fileNameFormat": settings.file_name_format,
            "templateFile": settings.template_file,
        },
        "spotify": {
            "client_id": bool(client_id),
            "client_id_source": _credential_source(settings.spotify_client_id, "client_id"),
            "client_secret": bool(client_secret),
            "client_secret_source": _credential_source(
                settings.spotify_client_secret, "client_secret"
            ),
        },
    }

    if json_output:
        typer.echo(json.dumps(data))
        return

    notes = data["notes"]
    console.print("[bold]Current Configuration[/bold]")
    console.print("\n[bold]Notes:[/bold]")
    console.print(f"  Vault:            [blue]{escape(notes['vault'])}[/blue]")
    console.print(f"  Folder:           [blue]{escape(notes['folder'])}[/blue]")
    console.print(f"  File name format: [blue]{escape(notes['fileNameFormat'])}[/blue]")
    template = notes["templateFile"] or "(built-in)"
    console.print(f"  Template file:    [blue]{escape(template)}[/blue]")

    console.print("\n[bold]Spotify Credentials:[/bold]")
    for label, key in (("Client ID:    ", "client_id"), ("Client secret:", "client_secret")):
        if data["spotify"][key]:
            source = data["spotify"][f"{key}_source"]
            console.print(f"  {label} [green]Set ({source})[/green]")
        else:
            console.print(f"  {label} [yellow]Not Set[/yellow]")


@app.command("set")
def config_set(
    folder: Optional[str] = typer.Option(None, "--folder", help="Folder (inside the vault) for new album notes."),
    file_name_format: Optional[str] = typer.Option(
        None,
        "--file-name-format",
        help="File name pattern, e.g. '{{artist}} - {{title}} ({{year}})'.",
    ),
    template_file: Optional[str] = typer.Option(
        None,
        "--template-file",
        help="Vault-relative path of a note template. Empty string = built-in template.",
    ),
    vault: Optional[Path] = typer.Option(None, "--vault", help="Root directory of your notes."),
):
    """Update note location and formatting preferences."""
    settings = get_settings()
    if folder is None and file_name_format is None and template_file is None and vault is None:
        console.print("Nothing to change. Available placeholders:")
        console.print("  " + escape(", ".join(PLACEHOLDERS)), highlight=False)
        return

    if folder is not None:
        settings.folder = folder
    if file_name_format is not None:
        settings.file_name_format = file_name_format
    if template_file is not None:
        settings.template_file = template_file
    if vault is not None:
        settings.vault_path = vault.expanduser().resolve()

    save_settings(settings)
    console.print("[green]✅ Settings saved.[/green]")


@app.command("spotify")
def config_spotify(
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Spotify application client ID."),
    client_secret: Optional[str] = typer.Option(
        None, "--client-secret", help="Spotify application client secret."
    ),
    use_keyring: bool = typer.Option(
        False,
        "--keyring",
        help="Store the credentials in the system keyring instead of the settings file.",
    ),
):
    """
    Store the Spotify client credentials used for album search.

    Create an app at https://developer.spotify.com/dashboard to obtain them.
    """
    client_id = (client_id or Prompt.ask("Spotify client ID")).strip()
    client_secret = (client_secret or Prompt.ask("Spotify client secret", password=True)).strip()
    if not client_id or not client_secret:
        console.print("[red]❌ Both a client ID and a client secret are required.[/red]")
        raise typer.Exit(1)

    settings = get_settings()
    if use_keyring:
        id_location = store_credentials("spotify", "client_id", client_id)
        secret_location = store_credentials("spotify", "client_secret", client_secret)
        settings.spotify_client_id = ""
        settings.spotify_client_secret = ""
    else:
        settings.spotify_client_id = client_id
        settings.spotify_client_secret = client_secret
        id_location = secret_location = "settings"
    save_settings(settings)

    console.print("[green]✅ Spotify credentials saved.[/green]")
    console.print(f"  client_id:     [blue]{escape(id_location)}[/blue]")
    console.print(f"  client_secret: [blue]{escape(secret_location)}[/blue]")


@app.command("clear")
def config_clear():
    """Forget the stored Spotify credentials (settings and keyring)."""
    settings = get_settings()
    settings.spotify_client_id = ""
    settings.spotify_client_secret = ""
    save_settings(settings)
    removed = clear_credentials("spotify")
    if removed:
        console.print(f"Removed from credential store: {', '.join(removed)}")
    console.print("[green]✅ Spotify credentials cleared.[/green]")
