"""Occupancy Service - room capacity accounting"""

from uuid import UUID
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.hospital import Room


class OccupancyService:
    """
    Each operation is one conditional UPDATE, so the capacity check and the
    write happen under the same row lock. Callers own the transaction.
    """

    @staticmethod
    async def increment(db: AsyncSession, room_id: UUID) -> bool:
        """Take a bed. False when the room is full or does not exist."""
        result = await db.execute(
            update(Room)
            .where(Room.id == room_id, Room.current_occupancy < Room.capacity)
            .values(current_occupancy=Room.current_occupancy + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def decrement(db: AsyncSession, room_id: UUID) -> bool:
        """Release a bed. False when occupancy is already zero or the room does not exist."""
        result = await db.execute(
            update(Room)
            .where(Room.id == room_id, Room.current_occupancy > 0)
            .values(current_occupancy=Room.current_occupancy - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
