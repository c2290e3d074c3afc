"""Bill endpoints - bill generation and payments"""

from typing import Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.core.exceptions import NotFoundError
from app.models.enums import UserRole
from app.schemas.billing import (
    BillGenerate,
    BillResponse,
    PaymentCreate,
    PaymentReceipt,
    PaymentResponse,
)
from app.schemas.responses import SuccessResponse
from app.services.billing_service import BillingService
from app.services.payment_service import PaymentService

router = APIRouter()


@router.post("/generate", response_model=SuccessResponse[BillResponse], status_code=status.HTTP_201_CREATED)
async def generate_bill(
    bill_in: BillGenerate,
    current_user: deps.CurrentUser = Depends(deps.require_roles(UserRole.ADMIN, UserRole.BILLING_STAFF)),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Generate a bill from the patient's completed stay and priced treatments."""
    bill = await BillingService.generate_bill(db, bill_in)
    return SuccessResponse(
        data=BillResponse.model_validate(bill),
        message="Bill generated successfully!",
    )


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.BILLING_STAFF, UserRole.RECEPTIONIST, UserRole.DOCTOR, UserRole.NURSE
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillingService.get_bill(db, bill_id)
    if not bill:
        raise NotFoundError("Bill", bill_id)
    return SuccessResponse(data=BillResponse.model_validate(bill))


@router.post(
    "/{bill_id}/payments",
    response_model=SuccessResponse[PaymentReceipt],
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    bill_id: UUID,
    payment_in: PaymentCreate,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.BILLING_STAFF, UserRole.RECEPTIONIST
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Record a payment against a bill. Settled bills (Paid/Cancelled) are rejected with 400."""
    payment, bill = await PaymentService.record_payment(
        db, bill_id, payment_in, current_user.user_id
    )
    return SuccessResponse(
        data=PaymentReceipt(
            payment=PaymentResponse.model_validate(payment),
            bill=BillResponse.model_validate(bill),
        ),
        message="Payment recorded successfully!",
    )
