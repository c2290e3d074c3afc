"""Payment Service - payments against bills and settlement status"""

import logging
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, ErrorCode, NotFoundError, ValidationError
from app.database import transactional
from app.models.billing import Bill, Payment
from app.models.enums import PaymentStatus
from app.schemas.billing import BillSettlement, PaymentCreate
from app.services.billing_service import BillingService
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


def derive_payment_status(total_paid: Decimal, total_amount: Decimal) -> PaymentStatus:
    """Status implied by the cumulative amount paid on a bill"""
    if total_paid <= 0:
        return PaymentStatus.PENDING
    if total_paid >= total_amount:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIALLY_PAID


class PaymentService:
    """Service layer for the append-only payment ledger"""

    @staticmethod
    async def get_payment(db: AsyncSession, payment_id: UUID) -> Optional[Payment]:
        return await db.get(Payment, payment_id)

    @staticmethod
    async def lock_bill(db: AsyncSession, bill_id: UUID) -> Optional[Bill]:
        """Load a bill holding its row lock until the transaction ends"""
        result = await db.execute(
            select(Bill)
            .where(Bill.id == bill_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_total_paid(db: AsyncSession, bill_id: UUID) -> Decimal:
        total = await db.scalar(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(Payment.bill_id == bill_id)
        )
        return Decimal(total)

    @staticmethod
    async def apply_settlement(db: AsyncSession, bill_id: UUID, settlement: BillSettlement) -> None:
        await db.execute(
            update(Bill)
            .where(Bill.id == bill_id)
            .values(
                amount_paid=settlement.amount_paid,
                payment_status=settlement.payment_status,
                updated_at=get_utc_now(),
            )
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        bill_id: UUID,
        data: PaymentCreate,
        recorded_by_user_id: UUID,
    ) -> Tuple[Payment, Bill]:
        """
        Record a payment and settle the bill's paid amount and status.

        The bill row stays locked from the status check until commit, so
        concurrent payments on one bill are applied one after another. The
        insert, the re-summed total and the status write commit together.

        Raises:
            NotFoundError: bill does not exist
            ConflictError: bill is already Paid or Cancelled
            ValidationError: overpayment while ALLOW_OVERPAYMENT is off, or unknown recording user
        """
        async with transactional(db):
            bill = await PaymentService.lock_bill(db, bill_id)
            if not bill:
                raise NotFoundError("Bill", bill_id)
            if bill.payment_status.is_settled:
                raise ConflictError(
                    f"Bill is already {bill.payment_status.value}. Cannot record further payments.",
                    ErrorCode.BILL_SETTLED,
                    status_code=400,
                )

            remaining = bill.total_amount - bill.amount_paid
            if data.amount > remaining:
                if not settings.ALLOW_OVERPAYMENT:
                    raise ValidationError(
                        f"Payment amount {data.amount} exceeds remaining balance of {remaining}."
                    )
                logger.warning(
                    f"Payment amount {data.amount} exceeds remaining balance of {remaining}. "
                    "Recording payment as is.",
                    extra={"bill_id": bill_id},
                )

            payment = Payment(
                bill_id=bill.id,
                payment_date=data.payment_date,
                amount=data.amount,
                payment_method=data.payment_method,
                transaction_reference=data.transaction_reference,
                notes=data.notes,
                received_by_user_id=recorded_by_user_id,
            )
            db.add(payment)
            try:
                await db.flush()
            except IntegrityError as exc:
                raise ValidationError("Invalid bill_id or received_by_user_id provided.") from exc

            total_paid = await PaymentService.get_total_paid(db, bill.id)
            settlement = BillSettlement(
                amount_paid=total_paid,
                payment_status=derive_payment_status(total_paid, bill.total_amount),
            )
            await PaymentService.apply_settlement(db, bill.id, settlement)

        logger.info(
            f"Payment of {data.amount} recorded; bill is {settlement.payment_status.value}",
            extra={"bill_id": bill_id, "payment_id": payment.id},
        )
        return payment, await BillingService.get_bill(db, bill_id)
