import asyncio
import logging
from typing import List

import aiohttp

from refresh_scheduler.errors import TransientNetworkError
from refresh_scheduler.repositories.database import VideosDatabase
from refresh_scheduler.repositories.models import Playlist, Video

logger = logging.getLogger(__name__)


class VideosRepository:
    """
    Refreshes the local video cache from the remote playlist using aiohttp.
    """

    def __init__(self, database: VideosDatabase, feed_url: str, timeout: float = 30.0):
        self.database = database
        self.feed_url = feed_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def refresh(self) -> None:
        """
        Fetch the playlist and upsert every video into the local cache.

        Raises:
            TransientNetworkError: If the request failed or returned a non-2xx status.
            ValidationError: If the payload does not match the playlist format.
        """
        playlist = await self._fetch_playlist()
        await self.database.create_tables()
        count = await self.database.upsert_videos(playlist.videos)
        logger.info("Refreshed %d videos from %s", count, self.feed_url)

    async def videos(self) -> List[Video]:
        return await self.database.list_videos()

    async def close(self) -> None:
        await self.database.close()

    async def _fetch_playlist(self) -> Playlist:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(self.feed_url) as response:
                    response.raise_for_status()
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransientNetworkError(f"Failed to fetch {self.feed_url}: {e}") from e
        return Playlist.model_validate(data)
