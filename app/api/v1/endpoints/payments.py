"""Payment endpoints"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.core.exceptions import NotFoundError
from app.models.enums import UserRole
from app.schemas.billing import PaymentResponse
from app.schemas.responses import SuccessResponse
from app.services.payment_service import PaymentService

router = APIRouter()


@router.get("/{payment_id}", response_model=SuccessResponse[PaymentResponse])
async def get_payment(
    payment_id: UUID,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.BILLING_STAFF, UserRole.RECEPTIONIST
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    payment = await PaymentService.get_payment(db, payment_id)
    if not payment:
        raise NotFoundError("Payment", payment_id)
    return SuccessResponse(data=PaymentResponse.model_validate(payment))
