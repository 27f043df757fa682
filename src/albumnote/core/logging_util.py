"""
Logging setup for the albumnote CLI.

The Spotify plugin logs excerpts of raw HTTP responses, so every record
passes through `RedactingFilter` before it is written: Basic/Bearer
credentials and `access_token` values never reach the terminal or a JSON
log. JSON lines also carry the `provider` extra the plugins attach.
"""

import json
import logging
import re
import sys
from typing import Any, Dict

_AUTH_HEADER_RE = re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+")
_ACCESS_TOKEN_RE = re.compile(r'("access_token"\s*:\s*")[^"]*(")')


def redact(text: str) -> str:
    """Mask credentials in a log message."""
    text = _AUTH_HEADER_RE.sub(r"\1 ***", text)
    return _ACCESS_TOKEN_RE.sub(r"\1***\2", text)


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        provider = getattr(record, "provider", None)
        if provider:
            payload["provider"] = provider
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(
    *, json_logs: bool = False, verbose: bool | None = None, quiet: bool | None = None
) -> None:
    """Send albumnote logs to stdout; INFO by default, DEBUG if verbose, WARNING if quiet."""
    level = logging.DEBUG if verbose else logging.INFO
    if quiet:
        level = logging.WARNING

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.addFilter(RedactingFilter())
    if json_logs:
        handler.setFormatter(JsonLinesFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
    # aiohttp/asyncio chatter is only useful when debugging albumnote itself
    for name in ("asyncio", "aiohttp"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
