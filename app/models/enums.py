"""Centralized Enum Definitions"""

import enum


# Identity
class UserRole(str, enum.Enum):
    """System user roles used for route gating"""
    ADMIN = "Admin"
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    RECEPTIONIST = "Receptionist"
    BILLING_STAFF = "BillingStaff"


# Billing
class PaymentStatus(str, enum.Enum):
    """Bill payment status"""
    PENDING = "Pending"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"
    CANCELLED = "Cancelled"

    @property
    def is_settled(self) -> bool:
        """Settled bills accept no further payments"""
        return self in (PaymentStatus.PAID, PaymentStatus.CANCELLED)


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods"""
    CASH = "Cash"
    E_BANKING = "E-Banking"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    INSURANCE = "Insurance"
    OTHER = "Other"
