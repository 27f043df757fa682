"""
Data models for Spotify catalog payloads and access tokens.

Album payloads are validated with Pydantic so that the rest of the code can
rely on attribute access instead of defensive `dict.get` chains. Unknown
fields from the Web API are ignored.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SpotifyImage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    id: Optional[str] = None


class SpotifyAlbum(BaseModel):
    """An album as returned by the search endpoint.

    `images` are ordered largest-first by Spotify.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    artists: List[SpotifyArtist] = Field(default_factory=list)
    images: List[SpotifyImage] = Field(default_factory=list)
    release_date: Optional[str] = None
    total_tracks: int = 0
    external_urls: Dict[str, str] = Field(default_factory=dict)
    album_type: Optional[str] = None

    @property
    def artist_names(self) -> str:
        return ", ".join(a.name for a in self.artists)

    @property
    def year(self) -> str:
        return self.release_date[:4] if self.release_date else ""

    @property
    def largest_image_url(self) -> str:
        return self.images[0].url if self.images else ""

    @property
    def smallest_image_url(self) -> str:
        return self.images[-1].url if self.images else ""

    @property
    def spotify_url(self) -> str:
        return self.external_urls.get("spotify", "")


@dataclass
class AccessToken:
    access_token: str
    expires_at: float  # epoch seconds, already reduced by the safety margin

    def is_valid(self, now: float) -> bool:
        return bool(self.access_token) and now < self.expires_at
