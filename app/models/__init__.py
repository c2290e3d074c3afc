"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, StatusMixin
from app.models.enums import UserRole, PaymentStatus, PaymentMethod
from app.models.user import SystemUser
from app.models.hospital import Patient, Doctor, Room, Service, Treatment
from app.models.admission import Admission
from app.models.billing import Bill, BillItem, Payment


__all__ = [
    # Base classes
    "BaseModel",
    "StatusMixin",

    # Enums
    "UserRole",
    "PaymentStatus",
    "PaymentMethod",

    # Identity
    "SystemUser",

    # Reference entities
    "Patient",
    "Doctor",
    "Room",
    "Service",
    "Treatment",

    # Inpatient
    "Admission",

    # Billing
    "Bill",
    "BillItem",
    "Payment",
]
