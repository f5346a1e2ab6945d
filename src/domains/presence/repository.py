"""Datastore access for geofence presence."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import Gym, LocationHistory
from src.shared.errors import CollaboratorError

from .models import GeoPoint, LocationSample


class SqlLocationLog:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_gym_center(self, gym_id: str) -> GeoPoint:
        """Registered coordinates of a gym.

        Raises:
            LookupError: if the gym does not exist.
        """
        stmt = select(Gym.location_latitude, Gym.location_longitude).where(Gym.id == gym_id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("get_gym_center", str(exc)) from exc

        row = result.one_or_none()
        if row is None:
            raise LookupError(f"Gym not found: {gym_id}")
        return GeoPoint(latitude=row[0], longitude=row[1])

    async def insert_sample(self, gym_id: str, user_id: str, sample: LocationSample) -> None:
        self._session.add(
            LocationHistory(
                user_id=user_id,
                gym_id=gym_id,
                latitude=sample.latitude,
                longitude=sample.longitude,
                distance_from_gym=sample.distance_from_center,
                is_within_geofence=sample.within_geofence,
                recorded_at=sample.recorded_at,
            )
        )
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise CollaboratorError("insert_sample", str(exc)) from exc

    async def list_samples_since(
        self, gym_id: str, user_id: str, since: datetime
    ) -> list[LocationSample]:
        stmt = (
            select(LocationHistory)
            .where(
                LocationHistory.gym_id == gym_id,
                LocationHistory.user_id == user_id,
                LocationHistory.recorded_at >= since,
            )
            .order_by(LocationHistory.recorded_at)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise CollaboratorError("list_samples_since", str(exc)) from exc

        return [
            LocationSample(
                latitude=row.latitude,
                longitude=row.longitude,
                recorded_at=row.recorded_at,
                distance_from_center=row.distance_from_gym,
                within_geofence=row.is_within_geofence,
            )
            for row in result.scalars().all()
        ]
