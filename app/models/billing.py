"""Billing Models: bills, line items and payments"""

from sqlalchemy import Column, Date, Integer, Numeric, String, Text, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.models.enums import PaymentStatus, PaymentMethod


class Bill(BaseModel):
    """
    Patient invoice.
    amount_paid and payment_status are written only by PaymentService.
    """
    __tablename__ = "bills"

    patient_id = Column(UUID(as_uuid=True), ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    admission_id = Column(UUID(as_uuid=True), ForeignKey("admissions.id", ondelete="SET NULL"), nullable=True, index=True)
    bill_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(
        ENUM(PaymentStatus, name="payment_status", values_callable=lambda x: [e.value for e in x]),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    due_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "BillItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillItem.position",
    )
    payments = relationship("Payment", back_populates="bill")

    @property
    def balance_due(self):
        return self.total_amount - self.amount_paid

    def __repr__(self) -> str:
        return f"<Bill {self.total_amount} - {self.payment_status}>"


class BillItem(BaseModel):
    """Immutable line item of a bill"""
    __tablename__ = "bill_items"

    bill_id = Column(UUID(as_uuid=True), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    treatment_id = Column(UUID(as_uuid=True), ForeignKey("treatments.id", ondelete="SET NULL"), nullable=True)
    # Insertion order within the bill
    position = Column(Integer, nullable=False, default=0)
    item_description = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    item_total_price = Column(Numeric(10, 2), nullable=False)

    bill = relationship("Bill", back_populates="items")

    def __repr__(self) -> str:
        return f"<BillItem {self.item_description} x{self.quantity}>"


class Payment(BaseModel):
    """Append-only payment against a bill"""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    bill_id = Column(UUID(as_uuid=True), ForeignKey("bills.id", ondelete="RESTRICT"), nullable=False, index=True)
    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(
        ENUM(PaymentMethod, name="payment_method", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    transaction_reference = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    received_by_user_id = Column(
        UUID(as_uuid=True), ForeignKey("system_users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    bill = relationship("Bill", back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment {self.amount} {self.payment_method}>"
