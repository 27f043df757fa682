# src/albumnote/core/errors.py


class AlbumNoteError(Exception):
    """Base application error for albumnote.

    Use this for predictable, user-facing error messages that should be
    caught by the CLI and displayed nicely. Network failures are not
    errors here: the Spotify plugin turns them into notices and empty
    results.
    """

    pass


class ConfigurationError(AlbumNoteError):
    """Required settings (e.g. Spotify credentials) are missing."""


class NoteWriteError(AlbumNoteError):
    """The note file could not be created."""
