"""
Configuration management using Dynaconf and Pydantic.

This module provides a layered configuration system. Dynaconf loads settings
from files (`settings.toml`, `.secrets.toml`, project-local and user-scoped)
and `ALB_*` environment variables. Pydantic then validates the merged data
into a typed `AlbumNoteSettings` object.

Persisted keys use the camelCase names of the Obsidian album-note plugin
(`fileNameFormat`, `spotifyClientId`, ...) so existing configuration blobs can
be reused; snake_case spellings are accepted as well.

`get_settings` returns a process-wide singleton. When `ALB_SETTINGS_PATH`
points at a JSON file, that file is the only persistence layer (used by tests
and isolated runs).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)

# Determine a user-scoped config directory (XDG-style)
USER_CONFIG_DIR = Path.home() / ".config" / "albumnote"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"
USER_SECRETS_FILE = USER_CONFIG_DIR / ".secrets.toml"

# Project-local settings (CWD) to support per-vault configuration
LOCAL_SETTINGS_FILE = Path("settings.toml")
LOCAL_SECRETS_FILE = Path(".secrets.toml")

settings_loader = Dynaconf(
    envvar_prefix="ALB",
    # Later files override earlier ones
    settings_files=[
        str(USER_SETTINGS_FILE),
        str(USER_SECRETS_FILE),
        "settings.toml",
        ".secrets.toml",
    ],
    load_dotenv=True,
)

DEFAULT_FOLDER = "Albums"
DEFAULT_FILE_NAME_FORMAT = "{{title}}"

# Keys written to .secrets.toml rather than settings.toml
SECRET_KEYS = ("spotifyClientId", "spotifyClientSecret")


class AlbumNoteSettings(BaseModel):
    """A Pydantic model that defines and validates all application settings."""

    vault_path: Path = Field(default_factory=Path.cwd, alias="vaultPath")
    folder: str = DEFAULT_FOLDER
    file_name_format: str = Field(default=DEFAULT_FILE_NAME_FORMAT, alias="fileNameFormat")
    template_file: str = Field(default="", alias="templateFile")
    spotify_client_id: str = Field(default="", alias="spotifyClientId")
    spotify_client_secret: str = Field(default="", alias="spotifyClientSecret", repr=False)

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    def to_persisted(self) -> Dict[str, Any]:
        """Return the camelCase key/value blob that is written to disk."""
        return self.model_dump(by_alias=True, mode="json")


def _field_lookup() -> Dict[str, str]:
    lookup: Dict[str, str] = {}
    for name, field in AlbumNoteSettings.model_fields.items():
        lookup[name.replace("_", "").lower()] = name
        if field.alias:
            lookup[field.alias.lower()] = name
    return lookup


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map any spelling (FOLDER, file_name_format, fileNameFormat) to field names.

    Dynaconf upper-cases keys; unknown keys are dropped.
    """
    lookup = _field_lookup()
    out: Dict[str, Any] = {}
    for key, value in (data or {}).items():
        name = lookup.get(str(key).replace("_", "").lower())
        if name is not None and value is not None:
            out[name] = value
    return out


_settings_instance: Optional[AlbumNoteSettings] = None


def _isolated_settings_path() -> Optional[Path]:
    env_settings_path = os.getenv("ALB_SETTINGS_PATH")
    return Path(env_settings_path) if env_settings_path else None


def get_settings() -> AlbumNoteSettings:
    """Get the application settings as a singleton Pydantic model."""
    global _settings_instance
    if _settings_instance is None:
        config_dict: Dict[str, Any] = {}

        isolated = _isolated_settings_path()
        if isolated is not None:
            # 1) Isolated JSON file (tests, explicit override)
            if isolated.exists():
                try:
                    config_dict.update(
                        _normalize_keys(json.loads(isolated.read_text(encoding="utf-8")) or {})
                    )
                except (OSError, ValueError) as e:
                    logger.warning("Ignoring unreadable settings file %s: %s", isolated, e)
        else:
            # 2) Dynaconf loader (user + project scope, ALB_* env)
            config_dict.update(_normalize_keys(settings_loader.as_dict() or {}))

        # 3) Explicit environment overrides
        env_vault = os.getenv("ALB_VAULT_PATH")
        env_folder = os.getenv("ALB_FOLDER")
        if env_vault:
            config_dict["vault_path"] = env_vault
        if env_folder:
            config_dict["folder"] = env_folder

        try:
            _settings_instance = AlbumNoteSettings(**config_dict)
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def save_settings(new_settings: AlbumNoteSettings) -> None:
    """Persist settings.

    With ALB_SETTINGS_PATH set, everything goes to that JSON file. Otherwise
    the non-secret keys go to the user settings.toml and the Spotify
    credentials to the user .secrets.toml.
    """
    global _settings_instance
    data = new_settings.to_persisted()

    isolated = _isolated_settings_path()
    if isolated is not None:
        isolated.parent.mkdir(parents=True, exist_ok=True)
        isolated.write_text(json.dumps(data, indent=2), encoding="utf-8")
    else:
        public = {k: v for k, v in data.items() if k not in SECRET_KEYS}
        secrets = _read_toml(USER_SECRETS_FILE)
        secrets.update({k: data[k] for k in SECRET_KEYS})
        USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        USER_SETTINGS_FILE.write_text(toml.dumps(public), encoding="utf-8")
        USER_SECRETS_FILE.write_text(toml.dumps(secrets), encoding="utf-8")
        for key, value in data.items():
            settings_loader.set(key, value)

    _settings_instance = new_settings


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        if path.exists():
            data = toml.loads(path.read_text(encoding="utf-8")) or {}
            if isinstance(data, dict):
                return data
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring malformed %s: %s", path, e)
    return {}


def create_default_settings() -> AlbumNoteSettings:
    """Create a default settings instance, useful for resets."""
    return AlbumNoteSettings()


def reset_settings() -> None:
    """Reset in-memory settings (do not delete on-disk settings)."""
    global _settings_instance
    _settings_instance = None


def resolve_credentials(settings: AlbumNoteSettings) -> Tuple[str, str]:
    """Return (client_id, client_secret), settings first, then the credential store."""
    from .auth import get_credentials

    client_id = settings.spotify_client_id or get_credentials("spotify", "client_id") or ""
    client_secret = (
        settings.spotify_client_secret or get_credentials("spotify", "client_secret") or ""
    )
    return client_id.strip(), client_secret.strip()
