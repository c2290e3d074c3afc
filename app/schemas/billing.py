from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict
from uuid import UUID
from datetime import datetime, date
from decimal import Decimal

from app.models.enums import PaymentStatus, PaymentMethod


class BillGenerate(BaseModel):
    patient_id: UUID
    admission_id: Optional[UUID] = None
    bill_date: date
    due_date: Optional[date] = None
    notes: Optional[str] = None


class BillItemResponse(BaseModel):
    id: UUID
    service_id: Optional[UUID] = None
    treatment_id: Optional[UUID] = None
    item_description: str
    quantity: int
    unit_price: Decimal
    item_total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class BillResponse(BaseModel):
    id: UUID
    patient_id: UUID
    admission_id: Optional[UUID] = None
    bill_date: date
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    payment_status: PaymentStatus
    due_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[BillItemResponse] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BillSettlement(BaseModel):
    """Fields PaymentService writes back to a bill after each payment"""
    amount_paid: Decimal
    payment_status: PaymentStatus


class PaymentCreate(BaseModel):
    payment_date: date
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_method: PaymentMethod
    transaction_reference: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: UUID
    bill_id: UUID
    payment_date: date
    amount: Decimal
    payment_method: PaymentMethod
    transaction_reference: Optional[str] = None
    notes: Optional[str] = None
    received_by_user_id: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentReceipt(BaseModel):
    """Recorded payment together with the bill it settled against"""
    payment: PaymentResponse
    bill: BillResponse
