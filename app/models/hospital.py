"""Reference entities: patients, doctors, rooms, price list, treatments"""

from sqlalchemy import Column, String, Text, Date, DateTime, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, StatusMixin


class Patient(BaseModel):
    """Registered patient"""
    __tablename__ = "patients"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    phone_number = Column(String(30), nullable=True, index=True)
    address = Column(Text, nullable=True)

    admissions = relationship("Admission", back_populates="patient")
    treatments = relationship("Treatment", back_populates="patient")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Patient {self.full_name}>"


class Doctor(BaseModel, StatusMixin):
    """Doctor on staff. Inactive doctors cannot admit patients."""
    __tablename__ = "doctors"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    specialization = Column(String(150), nullable=True)
    phone_number = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True, unique=True)

    def __repr__(self) -> str:
        return f"<Doctor {self.first_name} {self.last_name}>"


class Room(BaseModel, StatusMixin):
    """
    Bed-holding room.
    current_occupancy is owned by OccupancyService and never assigned directly.
    """
    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_rooms_capacity_positive"),
        CheckConstraint(
            "current_occupancy >= 0 AND current_occupancy <= capacity",
            name="ck_rooms_occupancy_within_capacity",
        ),
    )

    room_number = Column(String(20), nullable=False, unique=True, index=True)
    room_type = Column(String(50), nullable=False, index=True)  # e.g. "General Ward", "Private", "ICU"
    capacity = Column(Integer, nullable=False, default=1)
    current_occupancy = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    admissions = relationship("Admission", back_populates="room")

    @property
    def is_available(self) -> bool:
        return self.current_occupancy < self.capacity

    def __repr__(self) -> str:
        return f"<Room {self.room_number} {self.current_occupancy}/{self.capacity}>"


class Service(BaseModel, StatusMixin):
    """
    Price-list entry. Billing resolves charges by service_name:
    room stays use "<room_type> Daily Charge", treatments use the treatment name.
    """
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_services_cost_non_negative"),
    )

    service_name = Column(String(150), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    service_category = Column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Service {self.service_name} {self.cost}>"


class Treatment(BaseModel):
    """Clinical treatment record; billed by matching treatment_name to a service"""
    __tablename__ = "treatments"

    patient_id = Column(UUID(as_uuid=True), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(UUID(as_uuid=True), ForeignKey("doctors.id", ondelete="RESTRICT"), nullable=False, index=True)
    admission_id = Column(UUID(as_uuid=True), ForeignKey("admissions.id", ondelete="SET NULL"), nullable=True, index=True)
    treatment_name = Column(String(150), nullable=True)
    diagnosis = Column(Text, nullable=True)
    treatment_plan = Column(Text, nullable=True)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    patient = relationship("Patient", back_populates="treatments")

    def __repr__(self) -> str:
        return f"<Treatment {self.treatment_name}>"
