"""Lookup Service - read-only access to reference entities"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.hospital import Patient, Doctor, Room, Service, Treatment
from app.models.user import SystemUser


class LookupService:
    """
    Resolves patients, doctors, rooms, services and treatments by key.
    The admission, billing and payment services only read these entities
    through here and never write them.
    """

    @staticmethod
    async def get_patient(db: AsyncSession, patient_id: UUID) -> Optional[Patient]:
        return await db.get(Patient, patient_id)

    @staticmethod
    async def get_doctor(db: AsyncSession, doctor_id: UUID) -> Optional[Doctor]:
        return await db.get(Doctor, doctor_id)

    @staticmethod
    async def get_room(db: AsyncSession, room_id: UUID) -> Optional[Room]:
        """Fetch a room, bypassing the identity map so occupancy is current."""
        result = await db.execute(
            select(Room)
            .where(Room.id == room_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_service_by_name(db: AsyncSession, service_name: str) -> Optional[Service]:
        result = await db.execute(
            select(Service).where(Service.service_name == service_name)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_treatments_for_patient(db: AsyncSession, patient_id: UUID) -> List[Treatment]:
        """All treatments of a patient, oldest first"""
        result = await db.execute(
            select(Treatment)
            .where(Treatment.patient_id == patient_id)
            .order_by(Treatment.start_datetime, Treatment.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_system_user(db: AsyncSession, user_id: UUID) -> Optional[SystemUser]:
        return await db.get(SystemUser, user_id)
