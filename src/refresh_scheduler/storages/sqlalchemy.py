import json
from datetime import timedelta
from typing import List, Optional
from sqlalchemy import Column, String, DateTime, Float, JSON
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.future import select
from refresh_scheduler.domain.definition import JobDefinition, Constraints, ConflictPolicy, BackoffPolicy
from refresh_scheduler.storages.protocol import JobStore

Base = declarative_base()

class JobDefinitionModel(Base):
    __tablename__ = 'job_definitions'

    name = Column(String, primary_key=True)
    id = Column(String, nullable=False)
    worker = Column(String, nullable=False)
    interval_seconds = Column(Float, nullable=False)
    constraints = Column(JSON, nullable=False)
    conflict_policy = Column(String, nullable=False)
    initial_delay_seconds = Column(Float, nullable=False, default=0.0)
    backoff_policy = Column(String, nullable=False)
    backoff_delay_seconds = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

class SqlAlchemyJobStore(JobStore):
    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url)
        self.async_session = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        await self.engine.dispose()

    async def get_definition(self, name: str) -> Optional[JobDefinition]:
        async with self.async_session() as session:
            result = await session.execute(select(JobDefinitionModel).filter_by(name=name))
            db_definition = result.scalar_one_or_none()
            if db_definition:
                return self._db_to_definition(db_definition)
            return None

    async def save_definition(self, definition: JobDefinition) -> str:
        async with self.async_session() as session:
            result = await session.execute(select(JobDefinitionModel).filter_by(name=definition.name))
            db_definition = result.scalar_one_or_none()
            if db_definition is None:
                db_definition = JobDefinitionModel(name=definition.name)
                session.add(db_definition)
            db_definition.id = definition.id
            db_definition.worker = definition.worker
            db_definition.interval_seconds = definition.interval.total_seconds()
            db_definition.constraints = definition.constraints.model_dump_json()
            db_definition.conflict_policy = definition.conflict_policy.value
            db_definition.initial_delay_seconds = definition.initial_delay.total_seconds()
            db_definition.backoff_policy = definition.backoff_policy.value
            db_definition.backoff_delay_seconds = definition.backoff_delay.total_seconds()
            db_definition.created_at = definition.created_at
            await session.commit()
            return definition.id

    async def delete_definition(self, name: str) -> bool:
        async with self.async_session() as session:
            result = await session.execute(select(JobDefinitionModel).filter_by(name=name))
            db_definition = result.scalar_one_or_none()
            if db_definition:
                await session.delete(db_definition)
                await session.commit()
                return True
            return False

    async def list_definitions(self) -> List[JobDefinition]:
        async with self.async_session() as session:
            result = await session.execute(select(JobDefinitionModel).order_by(JobDefinitionModel.created_at))
            return [self._db_to_definition(db_definition) for db_definition in result.scalars()]

    def _db_to_definition(self, db_definition: JobDefinitionModel) -> JobDefinition:
        return JobDefinition(
            id=db_definition.id,
            name=db_definition.name,
            worker=db_definition.worker,
            interval=timedelta(seconds=db_definition.interval_seconds),
            constraints=Constraints(**json.loads(db_definition.constraints)),
            conflict_policy=ConflictPolicy(db_definition.conflict_policy),
            initial_delay=timedelta(seconds=db_definition.initial_delay_seconds),
            backoff_policy=BackoffPolicy(db_definition.backoff_policy),
            backoff_delay=timedelta(seconds=db_definition.backoff_delay_seconds),
            created_at=db_definition.created_at,
        )


class InMemoryJobStore(SqlAlchemyJobStore):
    def __init__(self):
        super().__init__("sqlite+aiosqlite:///:memory:")
