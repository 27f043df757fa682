import json
import logging

import pytest

from albumnote.core.logging_util import redact, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_redact_masks_auth_headers_and_access_tokens():
    text = 'Authorization: Basic aWQ6c2VjcmV0 {"access_token": "BQDx-123", "expires_in": 3600} Bearer tok.en'

    masked = redact(text)

    assert "aWQ6c2VjcmV0" not in masked
    assert "BQDx-123" not in masked
    assert "tok.en" not in masked
    assert '"access_token": "***"' in masked
    assert "Basic ***" in masked
    assert '"expires_in": 3600' in masked


def test_redact_leaves_ordinary_messages_alone():
    assert redact("spotify.search query='Nevermind' results=1") == "spotify.search query='Nevermind' results=1"


def test_json_lines_are_redacted_and_carry_provider(restore_root_logger, capsys):
    setup_logging(json_logs=True, verbose=True)
    log = logging.getLogger("albumnote.plugins.spotify")

    log.error("Spotify auth failed: HTTP %s %s", 400, '{"access_token": "leaked"}')
    log.debug("spotify.authenticate ok", extra={"provider": "spotify"})

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines[0]["level"] == "ERROR"
    assert lines[0]["logger"] == "albumnote.plugins.spotify"
    assert "leaked" not in lines[0]["message"]
    assert lines[0]["message"] == 'Spotify auth failed: HTTP 400 {"access_token": "***"}'
    assert "provider" not in lines[0]
    assert lines[1]["provider"] == "spotify"


def test_quiet_wins_over_verbose(restore_root_logger):
    setup_logging(verbose=True, quiet=True)
    assert logging.getLogger().level == logging.WARNING
