"""
Placeholder substitution for note file names and bodies.

Templates are plain text: every literal occurrence of a placeholder such as
`{{title}}` is replaced by its value. There is no expression language, no
escaping and no error for unknown placeholders; they are left as-is so user
templates stay portable between tools.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional

from .models import SpotifyAlbum
from .notify import Notifier

logger = logging.getLogger(__name__)

NOTE_EXTENSION = ".md"

# The album payload has no genre without an extra artist lookup
DEFAULT_GENRE = "Pop"

PLACEHOLDERS = (
    "{{title}}",
    "{{artist}}",
    "{{year}}",
    "{{date}}",
    "{{cover}}",
    "{{coverUrl}}",
    "{{publishYear}}",
    "{{genre}}",
    "{{tracks}}",
    "{{url}}",
    "{{id}}",
)

DEFAULT_TEMPLATE = """---
category:
  - "[[Albums]]"
cover: {{coverUrl}}
tags:
  - music
  - albums
  - references
genre: {{genre}}
artist: "[[{{artist}}]]"
year: {{publishYear}}
created: {{date}}
rating: 
---
"""

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


@dataclass(frozen=True)
class RenderedNote:
    filename: str
    content: str


def build_variables(album: SpotifyAlbum, today: Optional[date] = None) -> Dict[str, str]:
    """Map every placeholder to its value for `album`."""
    cover = album.largest_image_url
    year = album.year
    return {
        "{{title}}": album.name,
        "{{artist}}": album.artist_names,
        "{{year}}": year,
        "{{date}}": (today or date.today()).strftime("%Y-%m-%d"),
        "{{cover}}": cover,
        "{{coverUrl}}": cover,
        "{{publishYear}}": year,
        "{{genre}}": DEFAULT_GENRE,
        "{{tracks}}": str(album.total_tracks),
        "{{url}}": album.spotify_url,
        "{{id}}": album.id,
    }


def apply_variables(
    text: str,
    variables: Dict[str, str],
    transform: Optional[Callable[[str], str]] = None,
) -> str:
    """Replace every occurrence of every placeholder key in `text`."""
    for key, value in variables.items():
        text = text.replace(key, transform(value) if transform else value)
    return text


def sanitize_filename(name: str) -> str:
    """Strip characters that are illegal in file names and trim whitespace."""
    return _UNSAFE_FILENAME_CHARS.sub("", name).strip()


def render_filename(variables: Dict[str, str], pattern: str) -> str:
    """Render a file name pattern; values and the result are both sanitized."""
    stem = apply_variables(pattern, variables, transform=sanitize_filename)
    return sanitize_filename(stem) + NOTE_EXTENSION


def render(
    album: SpotifyAlbum,
    filename_pattern: str,
    body_pattern: str,
    today: Optional[date] = None,
) -> RenderedNote:
    variables = build_variables(album, today)
    return RenderedNote(
        filename=render_filename(variables, filename_pattern),
        content=apply_variables(body_pattern, variables),
    )


def load_body_template(vault, template_path: str, notifier: Notifier) -> str:
    """Return the configured template text, or DEFAULT_TEMPLATE.

    A missing or unreadable template is reported with a notice and never
    aborts note creation.
    """
    content = ""
    if template_path:
        if vault.is_file(template_path):
            try:
                content = vault.read_text(template_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read template %s: %s", template_path, e)
                notifier.notice(
                    f"Template file could not be read: {template_path}. Using default template.",
                    "warning",
                )
        else:
            notifier.notice(
                f"Template file not found: {template_path}. Using default template.",
                "warning",
            )
    return content or DEFAULT_TEMPLATE
