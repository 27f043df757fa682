"""
Local note storage and the note writer.

The vault is a plain directory of Markdown files. All paths handed to it are
vault-relative, forward-slash separated (`Albums/Nevermind (1991).md`).

`NoteWriter` implements the collision policy: an existing note is never
overwritten. It is opened instead and the caller gets `ALREADY_EXISTS`.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

import typer

from .errors import NoteWriteError
from .notify import Notifier

logger = logging.getLogger(__name__)


class Vault:
    """A directory of notes addressed by vault-relative paths."""

    def __init__(self, root: Path, opener: Optional[Callable[[Path], None]] = None) -> None:
        self.root = Path(root).expanduser()
        self._opener = opener

    def path(self, relative: str | PurePosixPath) -> Path:
        return self.root.joinpath(*PurePosixPath(relative).parts)

    def exists(self, relative: str) -> bool:
        return self.path(relative).exists()

    def is_file(self, relative: str) -> bool:
        return self.path(relative).is_file()

    def ensure_folder(self, relative: str | PurePosixPath) -> bool:
        """Create the folder if it is missing. Returns True if it was created."""
        folder = self.path(relative)
        if folder.is_dir():
            return False
        folder.mkdir(parents=True, exist_ok=True)
        logger.debug("Created folder %s", folder)
        return True

    def read_text(self, relative: str) -> str:
        return self.path(relative).read_text(encoding="utf-8")

    def create(self, relative: str, content: str) -> Path:
        """Create a new note; fails if anything already exists at `relative`."""
        target = self.path(relative)
        try:
            with target.open("x", encoding="utf-8") as fh:
                fh.write(content)
        except OSError as e:
            raise NoteWriteError(f"Could not create {target}: {e}") from e
        return target

    def open_note(self, relative: str) -> None:
        target = self.path(relative)
        if self._opener is not None:
            self._opener(target)
            return
        typer.launch(str(target))


class WriteOutcome(enum.Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class WriteResult:
    outcome: WriteOutcome
    path: str
    error: Optional[Exception] = None


class NoteWriter:
    def __init__(self, vault: Vault, notifier: Notifier, *, open_notes: bool = True) -> None:
        self.vault = vault
        self.notifier = notifier
        self.open_notes = open_notes

    def _open(self, path: str) -> None:
        if self.open_notes:
            self.vault.open_note(path)

    def write(self, path: str, content: str) -> WriteResult:
        name = PurePosixPath(path).name
        parent = PurePosixPath(path).parent

        try:
            if str(parent) not in ("", "."):
                self.vault.ensure_folder(parent)

            if self.vault.is_file(path):
                self.notifier.notice(f"File {name} already exists!", "warning")
                self._open(path)
                return WriteResult(WriteOutcome.ALREADY_EXISTS, path)
            if self.vault.exists(path):
                raise NoteWriteError(f"{self.vault.path(path)} exists and is not a note file")

            self.vault.create(path, content)
        except (NoteWriteError, OSError) as e:
            logger.error("Error creating album note %s: %s", path, e)
            self.notifier.notice("Error creating album note.", "error")
            return WriteResult(WriteOutcome.FAILED, path, error=e)

        self._open(path)
        self.notifier.notice(f"Created {name}", "success")
        return WriteResult(WriteOutcome.CREATED, path)
