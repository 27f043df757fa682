"""
Defines the abstract base class for catalog service plugins.

A plugin knows how to authenticate against one music catalog and how to turn
a free-text query into a list of albums. The search command only talks to
this interface.
"""

from abc import ABC, abstractmethod
from typing import List

from ..core.models import SpotifyAlbum


class BasePlugin(ABC):
    """An abstract base class that all catalog plugins must inherit from."""

    @abstractmethod
    async def authenticate(self):
        """
        Load and check the credentials needed to talk to the service.

        Should raise `ConfigurationError` when required credentials are missing.
        """
        pass

    @abstractmethod
    async def search_album(self, query: str) -> List[SpotifyAlbum]:
        """Return albums matching `query`; never raises for network failures."""
        pass
