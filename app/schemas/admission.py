from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from uuid import UUID
from datetime import datetime

from app.models.admission import Admission


class AdmissionCreate(BaseModel):
    patient_id: UUID
    room_id: UUID
    admitting_doctor_id: UUID
    admission_datetime: datetime
    reason_for_admission: Optional[str] = Field(None, max_length=2000)


class AdmissionDischarge(BaseModel):
    discharge_datetime: datetime


class AdmissionResponse(BaseModel):
    """Admission joined with the patient, room and doctor display fields"""
    id: UUID
    patient_id: UUID
    room_id: UUID
    admitting_doctor_id: UUID
    admission_datetime: datetime
    discharge_datetime: Optional[datetime] = None
    reason_for_admission: Optional[str] = None
    patient_first_name: str
    patient_last_name: str
    room_number: str
    room_type: str
    doctor_first_name: str
    doctor_last_name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_admission(cls, admission: Admission) -> "AdmissionResponse":
        """Build from an Admission loaded with patient, room and admitting_doctor"""
        return cls(
            id=admission.id,
            patient_id=admission.patient_id,
            room_id=admission.room_id,
            admitting_doctor_id=admission.admitting_doctor_id,
            admission_datetime=admission.admission_datetime,
            discharge_datetime=admission.discharge_datetime,
            reason_for_admission=admission.reason_for_admission,
            patient_first_name=admission.patient.first_name,
            patient_last_name=admission.patient.last_name,
            room_number=admission.room.room_number,
            room_type=admission.room.room_type,
            doctor_first_name=admission.admitting_doctor.first_name,
            doctor_last_name=admission.admitting_doctor.last_name,
            created_at=admission.created_at,
            updated_at=admission.updated_at,
        )
