"""Admission endpoints - admit and discharge inpatients"""

from typing import Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.core.exceptions import NotFoundError
from app.models.enums import UserRole
from app.schemas.admission import AdmissionCreate, AdmissionDischarge, AdmissionResponse
from app.schemas.responses import SuccessResponse
from app.services.admission_service import AdmissionService

router = APIRouter()


@router.post("", response_model=SuccessResponse[AdmissionResponse], status_code=status.HTTP_201_CREATED)
async def admit_patient(
    admission_in: AdmissionCreate,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.DOCTOR, UserRole.NURSE, UserRole.RECEPTIONIST
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Admit a patient to a room. Fails with 409 when the room is full or the patient is already admitted."""
    admission = await AdmissionService.admit(db, admission_in)
    return SuccessResponse(
        data=AdmissionResponse.from_admission(admission),
        message="Patient admitted successfully!",
    )


@router.put("/{admission_id}/discharge", response_model=SuccessResponse[AdmissionResponse])
async def discharge_patient(
    admission_id: UUID,
    body: AdmissionDischarge,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.DOCTOR, UserRole.NURSE
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Discharge an active admission and free its bed."""
    admission = await AdmissionService.discharge(db, admission_id, body.discharge_datetime)
    return SuccessResponse(
        data=AdmissionResponse.from_admission(admission),
        message="Patient discharged successfully!",
    )


@router.get("/{admission_id}", response_model=SuccessResponse[AdmissionResponse])
async def get_admission(
    admission_id: UUID,
    current_user: deps.CurrentUser = Depends(deps.require_roles(
        UserRole.ADMIN, UserRole.DOCTOR, UserRole.NURSE, UserRole.RECEPTIONIST
    )),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    admission = await AdmissionService.get_admission(db, admission_id)
    if not admission:
        raise NotFoundError("Admission", admission_id)
    return SuccessResponse(data=AdmissionResponse.from_admission(admission))
