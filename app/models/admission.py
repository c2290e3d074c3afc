"""Admission Model"""

from sqlalchemy import Column, DateTime, Text, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Admission(BaseModel):
    """
    Inpatient stay. Active while discharge_datetime is NULL.
    The partial unique index allows one active admission per patient.
    """
    __tablename__ = "admissions"
    __table_args__ = (
        Index(
            "uq_admissions_active_patient",
            "patient_id",
            unique=True,
            postgresql_where=text("discharge_datetime IS NULL"),
        ),
    )

    patient_id = Column(UUID(as_uuid=True), ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    room_id = Column(UUID(as_uuid=True), ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)
    admitting_doctor_id = Column(UUID(as_uuid=True), ForeignKey("doctors.id", ondelete="RESTRICT"), nullable=False, index=True)
    admission_datetime = Column(DateTime, nullable=False)
    discharge_datetime = Column(DateTime, nullable=True)
    reason_for_admission = Column(Text, nullable=True)

    patient = relationship("Patient", back_populates="admissions")
    room = relationship("Room", back_populates="admissions")
    admitting_doctor = relationship("Doctor")

    @property
    def is_active(self) -> bool:
        return self.discharge_datetime is None

    def __repr__(self) -> str:
        return f"<Admission {self.id} active={self.is_active}>"
