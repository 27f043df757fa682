# Ensure the project src/ directory is on sys.path for imports during tests
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("PYTHONWARNINGS", "ignore")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real keyring, user config and env."""
    from albumnote.core import auth
    from albumnote.core.config import reset_settings

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ALB_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("ALB_DISABLE_KEYRING", "1")
    for env in (
        "ALB_VAULT_PATH",
        "ALB_FOLDER",
        "ALB_SPOTIFY_CLIENT_ID",
        "ALB_SPOTIFY_CLIENT_SECRET",
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
    ):
        monkeypatch.delenv(env, raising=False)
    monkeypatch.setattr(auth, "USER_SECRETS_FILE", tmp_path / "user" / ".secrets.toml")
    monkeypatch.setattr(auth, "LOCAL_SECRETS_FILE", tmp_path / ".secrets.toml")

    reset_settings()
    yield tmp_path
    reset_settings()


@pytest.fixture
def nevermind_payload():
    return {
        "id": "abc",
        "name": "Nevermind",
        "artists": [{"name": "Nirvana"}],
        "release_date": "1991-09-24",
        "images": [{"url": "big.jpg"}, {"url": "small.jpg"}],
        "total_tracks": 12,
        "external_urls": {"spotify": "http://x"},
        "album_type": "album",
    }


@pytest.fixture
def nevermind(nevermind_payload):
    from albumnote.core.models import SpotifyAlbum

    return SpotifyAlbum.model_validate(nevermind_payload)
