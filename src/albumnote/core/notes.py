"""Turn a selected album into a note in the vault."""

import logging
from datetime import date
from typing import Optional

from .config import DEFAULT_FILE_NAME_FORMAT, AlbumNoteSettings
from .models import SpotifyAlbum
from .notify import Notifier
from .template import RenderedNote, load_body_template, render
from .vault import NoteWriter, Vault, WriteResult

logger = logging.getLogger(__name__)


class AlbumNoteCreator:
    def __init__(
        self,
        settings: AlbumNoteSettings,
        vault: Vault,
        notifier: Notifier,
        *,
        open_notes: bool = True,
    ) -> None:
        self.settings = settings
        self.vault = vault
        self.notifier = notifier
        self.writer = NoteWriter(vault, notifier, open_notes=open_notes)

    def note_path(self, filename: str) -> str:
        folder = self.settings.folder.strip().strip("/")
        return f"{folder}/{filename}" if folder else filename

    def prepare(self, album: SpotifyAlbum, today: Optional[date] = None) -> RenderedNote:
        """Render file name and body without touching the vault."""
        filename_pattern = self.settings.file_name_format or DEFAULT_FILE_NAME_FORMAT
        body_pattern = load_body_template(self.vault, self.settings.template_file, self.notifier)
        return render(album, filename_pattern, body_pattern, today=today)

    def create(self, album: SpotifyAlbum, today: Optional[date] = None) -> WriteResult:
        note = self.prepare(album, today=today)
        path = self.note_path(note.filename)
        logger.debug("Writing album note %s (album id=%s)", path, album.id)
        return self.writer.write(path, note.content)
