"""
Activity Repository - persistence for ingested activities.

The pipeline only depends on the ActivityRepository protocol; the SQLite
implementation below is what the service runs with.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, col, create_engine, select

from app.models.activity import Activity
from app.services.errors import StorageError


logger = logging.getLogger(__name__)


IN_MEMORY = ":memory:"


class ActivityRepository(Protocol):
    """Storage collaborator interface."""

    def insert(self, activity: Activity) -> None:
        ...

    def get(self, activity_id: str) -> Optional[Activity]:
        ...

    def list_activities(self) -> list[Activity]:
        ...

    def count(self) -> int:
        ...


class ActivityRow(SQLModel, table=True):
    """activities table."""

    __tablename__ = "activities"

    id: str = Field(primary_key=True)
    timestamp: datetime = Field(index=True)
    type: str
    stats_json: str
    gpx_data: Optional[str] = None

    @classmethod
    def from_activity(cls, activity: Activity) -> "ActivityRow":
        return cls(
            id=activity.id,
            timestamp=activity.timestamp,
            type=activity.type,
            stats_json=activity.stats_json,
            gpx_data=activity.gpx_data,
        )

    def to_activity(self) -> Activity:
        timestamp = self.timestamp
        # SQLite drops tzinfo; everything is stored as UTC
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return Activity(
            id=self.id,
            timestamp=timestamp,
            type=self.type,
            stats_json=self.stats_json,
            gpx_data=self.gpx_data or "",
        )


class SQLiteActivityRepository:
    """
    SQLite-backed activity store.

    Each call opens its own session, so one instance can be shared by
    concurrent requests.
    """

    def __init__(self, db_path: Union[str, Path] = IN_MEMORY):
        """
        Open (and create if needed) the database.

        Args:
            db_path: SQLite file path, or ":memory:" for a private in-memory DB
        """
        self._db_path = str(db_path)
        if self._db_path == IN_MEMORY:
            self._engine = create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self._engine = create_engine(
                f"sqlite:///{self._db_path}",
                connect_args={"check_same_thread": False},
            )

        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize database {self._db_path}: {e}") from e
        logger.info(f"Activity database initialized: {self._db_path}")

    @property
    def db_path(self) -> str:
        return self._db_path

    def insert(self, activity: Activity) -> None:
        try:
            with Session(self._engine) as session:
                session.add(ActivityRow.from_activity(activity))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert activity {activity.id}: {e}")
            raise StorageError(f"Failed to insert activity: {e}") from e
        logger.debug(f"Inserted activity: {activity.id}")

    def get(self, activity_id: str) -> Optional[Activity]:
        try:
            with Session(self._engine) as session:
                row = session.get(ActivityRow, activity_id)
                return row.to_activity() if row is not None else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get activity: {e}") from e

    def list_activities(self) -> list[Activity]:
        """All activities, newest first."""
        try:
            with Session(self._engine) as session:
                rows = session.exec(
                    select(ActivityRow).order_by(col(ActivityRow.timestamp).desc())
                ).all()
                return [row.to_activity() for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query activities: {e}") from e

    def count(self) -> int:
        try:
            with Session(self._engine) as session:
                return session.exec(select(func.count()).select_from(ActivityRow)).one()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count activities: {e}") from e

    def close(self) -> None:
        self._engine.dispose()
