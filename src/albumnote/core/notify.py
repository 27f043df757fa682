"""
User-visible notices.

A notice is the short, one-line message shown to the user when something
noteworthy happens (a note was created, authentication failed, a template
could not be found). Notices are printed with rich and mirrored into the
DEBUG log.
"""

import logging
from typing import List, Tuple

from rich.console import Console

logger = logging.getLogger(__name__)

_STYLES = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


class Notifier:
    """Prints notices to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def notice(self, message: str, level: str = "info") -> None:
        style = _STYLES.get(level, "cyan")
        # Notices may contain user data such as album titles; never parse markup
        self.console.print(message, style=style, markup=False, highlight=False)
        logger.debug("notice[%s]: %s", level, message)


class RecordingNotifier(Notifier):
    """Collects notices in memory instead of printing them."""

    def __init__(self) -> None:
        self.notices: List[Tuple[str, str]] = []

    def notice(self, message: str, level: str = "info") -> None:
        self.notices.append((level, message))

    @property
    def messages(self) -> List[str]:
        return [m for _, m in self.notices]
