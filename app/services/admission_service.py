"""Admission Service - admit and discharge lifecycle"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from app.database import transactional
from app.models.admission import Admission
from app.schemas.admission import AdmissionCreate
from app.services.lookup_service import LookupService
from app.services.occupancy_service import OccupancyService
from app.utils.time import get_utc_now, to_naive_utc

logger = logging.getLogger(__name__)

ACTIVE_ADMISSION_INDEX = "uq_admissions_active_patient"


class AdmissionService:
    """Service layer for inpatient admissions"""

    @staticmethod
    async def get_admission(db: AsyncSession, admission_id: UUID) -> Optional[Admission]:
        """Admission with patient, room and admitting doctor loaded"""
        result = await db.execute(
            select(Admission)
            .options(
                selectinload(Admission.patient),
                selectinload(Admission.room),
                selectinload(Admission.admitting_doctor),
            )
            .where(Admission.id == admission_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_active_admission_for_patient(db: AsyncSession, patient_id: UUID) -> Optional[Admission]:
        result = await db.execute(
            select(Admission)
            .where(
                Admission.patient_id == patient_id,
                Admission.discharge_datetime.is_(None),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def admit(db: AsyncSession, data: AdmissionCreate) -> Admission:
        """
        Admit a patient to a room.

        Every precondition is checked before anything is written. The bed is
        then taken and the admission inserted in one transaction; losing the
        race for the last bed, or for the patient's active admission, rolls
        both back.

        Raises:
            NotFoundError: patient, doctor or room does not exist
            ValidationError: doctor or room is inactive
            ConflictError: room is full or patient is already admitted
        """
        patient = await LookupService.get_patient(db, data.patient_id)
        if not patient:
            raise NotFoundError("Patient", data.patient_id)

        doctor = await LookupService.get_doctor(db, data.admitting_doctor_id)
        if not doctor:
            raise NotFoundError("Doctor", data.admitting_doctor_id)
        if not doctor.is_active:
            raise ValidationError(f"Admitting Doctor ID {doctor.id} is not active.")

        room = await LookupService.get_room(db, data.room_id)
        if not room:
            raise NotFoundError("Room", data.room_id)
        if not room.is_active:
            raise ValidationError(f"Room {room.room_number} is not currently active.")
        if room.current_occupancy >= room.capacity:
            raise ConflictError(
                f"Room {room.room_number} is already full "
                f"(Capacity: {room.capacity}, Occupancy: {room.current_occupancy}).",
                ErrorCode.ROOM_FULL,
            )

        current = await AdmissionService.get_active_admission_for_patient(db, patient.id)
        if current:
            raise ConflictError(
                f"Patient (ID: {patient.id}) is already admitted (Admission ID: {current.id}). "
                "Discharge first before admitting again.",
                ErrorCode.ALREADY_ADMITTED,
            )

        admission = Admission(
            patient_id=patient.id,
            room_id=room.id,
            admitting_doctor_id=doctor.id,
            admission_datetime=to_naive_utc(data.admission_datetime),
            reason_for_admission=data.reason_for_admission,
        )

        async with transactional(db):
            if not await OccupancyService.increment(db, room.id):
                raise ConflictError(
                    f"Room {room.room_number} is already at full capacity.",
                    ErrorCode.ROOM_FULL,
                )
            db.add(admission)
            try:
                await db.flush()
            except IntegrityError as exc:
                if ACTIVE_ADMISSION_INDEX in str(exc.orig):
                    raise ConflictError(
                        "Patient is already actively admitted.",
                        ErrorCode.ALREADY_ADMITTED,
                    ) from exc
                raise ValidationError("Invalid patient_id, room_id, or admitting_doctor_id provided.") from exc

        logger.info(
            "Patient admitted",
            extra={"admission_id": admission.id, "patient_id": patient.id, "room_id": room.id},
        )
        return await AdmissionService.get_admission(db, admission.id)

    @staticmethod
    async def discharge(db: AsyncSession, admission_id: UUID, discharge_datetime: datetime) -> Admission:
        """
        Close an active admission and release its bed.

        The discharge update only matches a still-active row; if a concurrent
        request discharged it first nothing is written and occupancy is left alone.

        Raises:
            NotFoundError: admission does not exist
            ConflictError: admission already discharged
            ValidationError: discharge time precedes admission time
        """
        admission = await AdmissionService.get_admission(db, admission_id)
        if not admission:
            raise NotFoundError("Admission", admission_id)
        if admission.discharge_datetime is not None:
            raise ConflictError(
                f"Patient for admission ID {admission_id} was already discharged on "
                f"{admission.discharge_datetime.isoformat()}.",
                ErrorCode.ALREADY_DISCHARGED,
                status_code=400,
            )

        discharge_at = to_naive_utc(discharge_datetime)
        if discharge_at < admission.admission_datetime:
            raise ValidationError("Discharge datetime cannot be before admission datetime.")

        room_id = admission.room_id
        async with transactional(db):
            result = await db.execute(
                update(Admission)
                .where(
                    Admission.id == admission_id,
                    Admission.discharge_datetime.is_(None),
                )
                .values(discharge_datetime=discharge_at, updated_at=get_utc_now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ConflictError(
                    f"Admission {admission_id} was discharged by another request.",
                    ErrorCode.ALREADY_DISCHARGED,
                )

            if not await OccupancyService.decrement(db, room_id):
                logger.warning(
                    "Discharged but room occupancy was already zero; occupancy may be inconsistent",
                    extra={"admission_id": admission_id, "room_id": room_id},
                )

        logger.info("Patient discharged", extra={"admission_id": admission_id, "room_id": room_id})
        return await AdmissionService.get_admission(db, admission_id)
