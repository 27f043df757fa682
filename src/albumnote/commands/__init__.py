"""Command groups for the albumnote CLI.

This package provides sub-apps that are mounted by albumnote.cli.
"""

from . import config as config  # noqa: F401
from . import search as search  # noqa: F401

__all__ = [
    "config",
    "search",
]
