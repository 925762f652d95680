from .protocol import Repository
from .database import VideosDatabase, get_database
from .videos import VideosRepository

__all__ = ["Repository", "VideosDatabase", "get_database", "VideosRepository"]
