from typing import List

from pydantic import BaseModel, Field


class Video(BaseModel):
    title: str = Field(..., description="Title of the video")
    description: str = Field(default="", description="Short description")
    url: str = Field(..., description="Link to the video, unique per video")
    updated: str = Field(default="", description="Last update timestamp as sent by the server")
    thumbnail: str = Field(default="", description="Link to the thumbnail image")


class Playlist(BaseModel):
    """
    Network representation of the playlist: {"videos": [...]}.
    """
    videos: List[Video] = Field(default_factory=list)
