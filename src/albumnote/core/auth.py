"""
Credential storage for the Spotify client credentials.

Primary store/retrieve is via `keyring` (macOS Keychain, Windows Credential
Locker, Secret Service, ...). Where keyring is unavailable or undesired:

- Opt-out via `ALB_DISABLE_KEYRING=1` to bypass keyring completely
- Environment variable overrides (e.g., `ALB_SPOTIFY_CLIENT_SECRET`)
- File fallback in `.secrets.toml` (user or project-local)

Keyring entries live under the service name "albumnote"; keys use the
format `{service}_{key}`.
"""

import logging
import os
from pathlib import Path

import keyring
import keyring.errors
import toml

from .config import LOCAL_SECRETS_FILE, USER_SECRETS_FILE

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "albumnote"

# Known keys per service so `clear_credentials` only removes what we own.
SERVICE_KEYS = {
    "spotify": ["client_id", "client_secret"],
}

_ENV_OVERRIDES = {
    ("spotify", "client_id"): ["ALB_SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_ID"],
    ("spotify", "client_secret"): ["ALB_SPOTIFY_CLIENT_SECRET", "SPOTIFY_CLIENT_SECRET"],
}


def _keyring_disabled() -> bool:
    return os.getenv("ALB_DISABLE_KEYRING") == "1"


def _secrets_key(service: str, key: str) -> str:
    return f"{service.lower()}_{key}"


def _load_secrets() -> dict:
    """Load combined secrets from project-local and user-scoped .secrets.toml."""
    data: dict = {}
    for p in (USER_SECRETS_FILE, LOCAL_SECRETS_FILE):
        try:
            if Path(p).exists():
                d = toml.loads(Path(p).read_text(encoding="utf-8")) or {}
                if isinstance(d, dict):
                    data.update(d)
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning("Ignoring malformed secrets file %s: %s", p, e)
    return data


def _write_secret_file(service: str, key: str, value: str | None) -> None:
    data = _load_secrets()
    if value is None:
        data.pop(_secrets_key(service, key), None)
    else:
        data[_secrets_key(service, key)] = value
    USER_SECRETS_FILE.parent.mkdir(parents=True, exist_ok=True)
    USER_SECRETS_FILE.write_text(toml.dumps(data), encoding="utf-8")


def store_credentials(service: str, key: str, value: str) -> str:
    """Store a credential, preferring the system keyring.

    Returns where the value ended up: "keyring" or ".secrets.toml".
    """
    if not _keyring_disabled():
        try:
            keyring.set_password(KEYRING_SERVICE, _secrets_key(service, key), value)
            return "keyring"
        except keyring.errors.KeyringError as e:
            logger.warning("Could not store %s.%s in keyring (%s); using .secrets.toml", service, key, e)

    _write_secret_file(service, key, value)
    return ".secrets.toml"


def get_credentials(service: str, key: str) -> str | None:
    """Retrieve a stored credential: keyring, then environment, then .secrets.toml."""
    if not _keyring_disabled():
        try:
            v = keyring.get_password(KEYRING_SERVICE, _secrets_key(service, key))
            if v:
                return v
        except keyring.errors.KeyringError as e:
            logger.debug("Keyring unavailable for %s.%s: %s", service, key, e)

    for env in _ENV_OVERRIDES.get((service.lower(), key), []):
        v = os.getenv(env)
        if v:
            return v

    v = _load_secrets().get(_secrets_key(service, key))
    return str(v) if v else None


def clear_credentials(service: str) -> list[str]:
    """Forget all stored credentials for a service. Returns the keys removed."""
    service = service.lower()
    removed: list[str] = []
    for key in SERVICE_KEYS.get(service, []):
        if not _keyring_disabled():
            try:
                if keyring.get_password(KEYRING_SERVICE, _secrets_key(service, key)) is not None:
                    keyring.delete_password(KEYRING_SERVICE, _secrets_key(service, key))
                    removed.append(key)
            except keyring.errors.PasswordDeleteError:
                # Already gone
                pass
            except keyring.errors.KeyringError as e:
                logger.warning("Keyring error while deleting %s.%s: %s", service, key, e)
        if _secrets_key(service, key) in _load_secrets():
            _write_secret_file(service, key, None)
            if key not in removed:
                removed.append(key)
    return removed
