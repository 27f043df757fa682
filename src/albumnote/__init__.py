"""albumnote - search the Spotify catalog and turn albums into Markdown notes."""

__version__ = "0.1.0"
