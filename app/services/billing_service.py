"""Billing Service - bill generation from stays and treatments"""

import logging
import math
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ErrorCode, NotFoundError, ValidationError
from app.database import transactional
from app.models.admission import Admission
from app.models.billing import Bill, BillItem
from app.models.enums import PaymentStatus
from app.models.hospital import Service
from app.schemas.billing import BillGenerate
from app.services.admission_service import AdmissionService
from app.services.lookup_service import LookupService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ONE_DAY = timedelta(days=1)


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def stay_days(admitted_at: datetime, discharged_at: datetime) -> int:
    """Started days of a stay, never less than one"""
    return max(1, math.ceil((discharged_at - admitted_at) / ONE_DAY))


def room_charge_service_name(room_type: str) -> str:
    return f"{room_type} Daily Charge"


class BillingService:
    """Service layer for bills and their line items"""

    @staticmethod
    async def get_bill(db: AsyncSession, bill_id: UUID) -> Optional[Bill]:
        """Bill with its items in insertion order"""
        result = await db.execute(
            select(Bill)
            .options(selectinload(Bill.items))
            .where(Bill.id == bill_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def collect_room_charge(db: AsyncSession, admission: Admission) -> Optional[BillItem]:
        """Line item for a completed stay, priced by the room type's daily charge"""
        if admission.discharge_datetime is None:
            return None

        room = await LookupService.get_room(db, admission.room_id)
        service = await LookupService.get_service_by_name(db, room_charge_service_name(room.room_type))
        if not service or service.cost <= 0:
            logger.warning(
                "No priced daily charge for room type; stay not billed",
                extra={"admission_id": admission.id, "room_id": room.id},
            )
            return None

        days = stay_days(admission.admission_datetime, admission.discharge_datetime)
        unit_price = to_money(service.cost)
        return BillItem(
            service_id=service.id,
            item_description=f"{room.room_type} Charge for {days} day(s) (Room: {room.room_number})",
            quantity=days,
            unit_price=unit_price,
            item_total_price=to_money(unit_price * days),
        )

    @staticmethod
    async def collect_treatment_charges(db: AsyncSession, patient_id: UUID) -> List[BillItem]:
        """
        One line item per treatment whose name matches a priced service.
        Treatments without a match are skipped, not rejected.
        """
        items = []
        services: Dict[str, Optional[Service]] = {}
        for treatment in await LookupService.get_treatments_for_patient(db, patient_id):
            if not treatment.treatment_name:
                continue
            if treatment.treatment_name not in services:
                services[treatment.treatment_name] = await LookupService.get_service_by_name(
                    db, treatment.treatment_name
                )
            service = services[treatment.treatment_name]
            if not service or service.cost <= 0:
                logger.warning(
                    f"No matching service found or zero cost for treatment: {treatment.treatment_name}",
                    extra={"patient_id": patient_id},
                )
                continue

            unit_price = to_money(service.cost)
            items.append(BillItem(
                service_id=service.id,
                treatment_id=treatment.id,
                item_description=treatment.treatment_name,
                quantity=1,
                unit_price=unit_price,
                item_total_price=unit_price,
            ))
        return items

    @staticmethod
    async def generate_bill(db: AsyncSession, data: BillGenerate) -> Bill:
        """
        Generate a bill for a patient, optionally tied to one admission.

        Room charges apply only to a discharged admission; treatment charges
        cover every priced treatment of the patient. Treatments are not marked
        as billed, so a later call bills them again.

        Raises:
            NotFoundError: patient or admission does not exist
            ValidationError: admission belongs to another patient, or nothing is billable
        """
        patient = await LookupService.get_patient(db, data.patient_id)
        if not patient:
            raise NotFoundError("Patient", data.patient_id)

        admission = None
        if data.admission_id:
            admission = await AdmissionService.get_admission(db, data.admission_id)
            if not admission:
                raise NotFoundError("Admission", data.admission_id)
            if admission.patient_id != patient.id:
                raise ValidationError("Admission does not belong to the specified patient.")

        items: List[BillItem] = []
        if admission:
            room_item = await BillingService.collect_room_charge(db, admission)
            if room_item:
                items.append(room_item)
        items.extend(await BillingService.collect_treatment_charges(db, patient.id))

        if not items:
            raise ValidationError(
                "No billable items found for this patient/admission.",
                ErrorCode.NOTHING_TO_BILL,
            )

        for position, item in enumerate(items):
            item.position = position
        total_amount = to_money(sum(item.item_total_price for item in items))

        bill = Bill(
            patient_id=patient.id,
            admission_id=admission.id if admission else None,
            bill_date=data.bill_date,
            total_amount=total_amount,
            amount_paid=Decimal("0.00"),
            payment_status=PaymentStatus.PENDING,
            due_date=data.due_date,
            notes=data.notes,
            items=items,
        )
        async with transactional(db):
            db.add(bill)
            await db.flush()

        logger.info(
            f"Bill generated with {len(items)} item(s), total {total_amount}",
            extra={"bill_id": bill.id, "patient_id": patient.id},
        )
        return await BillingService.get_bill(db, bill.id)
