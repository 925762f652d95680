from typing import List, Optional
from sqlalchemy import Column, String
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.future import select

from refresh_scheduler.repositories.models import Video

Base = declarative_base()


class VideoModel(Base):
    __tablename__ = 'videos'

    url = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    updated = Column(String, nullable=False, default="")
    thumbnail = Column(String, nullable=False, default="")


class VideosDatabase:
    """
    Local cache of the videos fetched from the network.
    """

    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url)
        self.async_session = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def upsert_videos(self, videos: List[Video]) -> int:
        async with self.async_session() as session:
            for video in videos:
                await session.merge(VideoModel(
                    url=video.url,
                    title=video.title,
                    description=video.description,
                    updated=video.updated,
                    thumbnail=video.thumbnail,
                ))
            await session.commit()
            return len(videos)

    async def get_video(self, url: str) -> Optional[Video]:
        async with self.async_session() as session:
            result = await session.execute(select(VideoModel).filter_by(url=url))
            db_video = result.scalar_one_or_none()
            if db_video:
                return self._db_to_video(db_video)
            return None

    async def list_videos(self) -> List[Video]:
        async with self.async_session() as session:
            result = await session.execute(select(VideoModel).order_by(VideoModel.updated.desc()))
            return [self._db_to_video(db_video) for db_video in result.scalars()]

    async def close(self):
        await self.engine.dispose()

    def _db_to_video(self, db_video: VideoModel) -> Video:
        return Video(
            url=db_video.url,
            title=db_video.title,
            description=db_video.description,
            updated=db_video.updated,
            thumbnail=db_video.thumbnail,
        )


def get_database(db_url: str) -> VideosDatabase:
    return VideosDatabase(db_url)
