"""Unit tests for BillingService."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ErrorCode, NotFoundError, ValidationError
from app.models.admission import Admission
from app.models.billing import Bill
from app.models.enums import PaymentStatus
from app.models.hospital import Patient, Room, Service, Treatment
from app.schemas.billing import BillGenerate
from app.services.admission_service import AdmissionService
from app.services.billing_service import BillingService, stay_days, to_money
from app.services.lookup_service import LookupService


def test_stay_days_counts_started_days():
    admitted = datetime(2026, 1, 1, 10, 0)
    assert stay_days(admitted, datetime(2026, 1, 1, 10, 0)) == 1
    assert stay_days(admitted, datetime(2026, 1, 1, 18, 0)) == 1
    assert stay_days(admitted, datetime(2026, 1, 2, 10, 0)) == 1
    assert stay_days(admitted, datetime(2026, 1, 2, 10, 1)) == 2
    assert stay_days(admitted, datetime(2026, 1, 3, 11, 0)) == 3


def test_to_money_rounds_half_up():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(Decimal("150")) == Decimal("150.00")


PRICES = {
    "ICU Daily Charge": Decimal("150.00"),
    "X-Ray": Decimal("80.00"),
    "Dressing": Decimal("0.00"),
}


def _service_by_name():
    services = {name: Service(id=uuid4(), service_name=name, cost=cost) for name, cost in PRICES.items()}

    async def lookup(db, name):
        return services.get(name)

    return lookup


@pytest.fixture
def patient():
    return Patient(id=uuid4(), first_name="Ada", last_name="Obi")


@pytest.fixture
def room():
    return Room(id=uuid4(), room_number="ICU-1", room_type="ICU", capacity=1, current_occupancy=0, is_active=True)


@pytest.fixture
def billing_lookups(patient, room):
    with patch.object(LookupService, "get_patient", new_callable=AsyncMock) as get_patient, \
         patch.object(LookupService, "get_room", new_callable=AsyncMock) as get_room, \
         patch.object(
             LookupService, "get_service_by_name", new_callable=AsyncMock, side_effect=_service_by_name()
         ) as get_service, \
         patch.object(LookupService, "get_treatments_for_patient", new_callable=AsyncMock) as get_treatments, \
         patch.object(AdmissionService, "get_admission", new_callable=AsyncMock) as get_admission, \
         patch.object(BillingService, "get_bill", new_callable=AsyncMock) as get_bill:
        get_patient.return_value = patient
        get_room.return_value = room
        get_treatments.return_value = []
        yield MagicMock(
            patient=get_patient,
            service=get_service,
            treatments=get_treatments,
            admission=get_admission,
            bill=get_bill,
        )


def _treatment(patient, name):
    return Treatment(id=uuid4(), patient_id=patient.id, doctor_id=uuid4(), treatment_name=name)


def _discharged_admission(patient, room):
    return Admission(
        id=uuid4(),
        patient_id=patient.id,
        room_id=room.id,
        admission_datetime=datetime(2026, 1, 1, 10, 0),
        discharge_datetime=datetime(2026, 1, 3, 11, 0),
    )


@pytest.mark.asyncio
async def test_generate_bill_with_room_and_treatments(billing_lookups, patient, room):
    db = AsyncMock(spec=AsyncSession)
    admission = _discharged_admission(patient, room)
    billing_lookups.admission.return_value = admission
    billing_lookups.treatments.return_value = [
        _treatment(patient, "X-Ray"),
        _treatment(patient, "Consultation"),
        _treatment(patient, "Dressing"),
    ]

    await BillingService.generate_bill(
        db, BillGenerate(patient_id=patient.id, admission_id=admission.id, bill_date=date(2026, 1, 3))
    )

    bill = db.add.call_args.args[0]
    assert isinstance(bill, Bill)
    assert bill.admission_id == admission.id
    assert bill.total_amount == Decimal("530.00")
    assert bill.amount_paid == Decimal("0.00")
    assert bill.payment_status == PaymentStatus.PENDING

    room_item, xray_item = bill.items
    assert room_item.item_description == "ICU Charge for 3 day(s) (Room: ICU-1)"
    assert room_item.quantity == 3
    assert room_item.unit_price == Decimal("150.00")
    assert room_item.item_total_price == Decimal("450.00")
    assert room_item.position == 0
    assert xray_item.item_description == "X-Ray"
    assert xray_item.quantity == 1
    assert xray_item.item_total_price == Decimal("80.00")
    assert xray_item.position == 1
    assert db.commit.called
    billing_lookups.bill.assert_awaited_once()


@pytest.mark.asyncio
async def test_generate_bill_treatments_only(billing_lookups, patient):
    db = AsyncMock(spec=AsyncSession)
    billing_lookups.treatments.return_value = [_treatment(patient, "X-Ray"), _treatment(patient, "X-Ray")]

    await BillingService.generate_bill(db, BillGenerate(patient_id=patient.id, bill_date=date(2026, 1, 3)))

    bill = db.add.call_args.args[0]
    assert bill.admission_id is None
    assert len(bill.items) == 2
    assert bill.total_amount == Decimal("160.00")
    assert not billing_lookups.admission.called
    # Repeated names are priced once
    assert billing_lookups.service.call_count == 1


@pytest.mark.asyncio
async def test_active_admission_has_no_room_charge(billing_lookups, patient, room):
    db = AsyncMock(spec=AsyncSession)
    admission = _discharged_admission(patient, room)
    admission.discharge_datetime = None
    billing_lookups.admission.return_value = admission
    billing_lookups.treatments.return_value = [_treatment(patient, "X-Ray")]

    await BillingService.generate_bill(
        db, BillGenerate(patient_id=patient.id, admission_id=admission.id, bill_date=date(2026, 1, 3))
    )

    bill = db.add.call_args.args[0]
    assert [item.item_description for item in bill.items] == ["X-Ray"]
    assert bill.total_amount == Decimal("80.00")


@pytest.mark.asyncio
async def test_generate_bill_nothing_billable(billing_lookups, patient):
    db = AsyncMock(spec=AsyncSession)
    billing_lookups.treatments.return_value = [_treatment(patient, "Consultation"), _treatment(patient, "Dressing")]

    with pytest.raises(ValidationError) as exc_info:
        await BillingService.generate_bill(db, BillGenerate(patient_id=patient.id, bill_date=date(2026, 1, 3)))

    assert exc_info.value.error_code == ErrorCode.NOTHING_TO_BILL
    assert exc_info.value.status_code == 400
    assert not db.add.called
    assert not db.commit.called


@pytest.mark.asyncio
async def test_generate_bill_unknown_patient(billing_lookups):
    db = AsyncMock(spec=AsyncSession)
    billing_lookups.patient.return_value = None

    with pytest.raises(NotFoundError):
        await BillingService.generate_bill(db, BillGenerate(patient_id=uuid4(), bill_date=date(2026, 1, 3)))

    assert not db.add.called


@pytest.mark.asyncio
async def test_generate_bill_unknown_admission(billing_lookups, patient):
    db = AsyncMock(spec=AsyncSession)
    billing_lookups.admission.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        await BillingService.generate_bill(
            db, BillGenerate(patient_id=patient.id, admission_id=uuid4(), bill_date=date(2026, 1, 3))
        )

    assert "Admission" in exc_info.value.message


@pytest.mark.asyncio
async def test_generate_bill_admission_of_other_patient(billing_lookups, patient, room):
    db = AsyncMock(spec=AsyncSession)
    other = Patient(id=uuid4(), first_name="Other", last_name="Person")
    billing_lookups.admission.return_value = _discharged_admission(other, room)

    with pytest.raises(ValidationError):
        await BillingService.generate_bill(
            db, BillGenerate(patient_id=patient.id, admission_id=uuid4(), bill_date=date(2026, 1, 3))
        )

    assert not db.add.called


@pytest.mark.asyncio
async def test_room_charge_skipped_without_daily_rate(billing_lookups, patient):
    db = AsyncMock(spec=AsyncSession)
    ward = Room(id=uuid4(), room_number="W-9", room_type="Maternity", capacity=4, current_occupancy=0)
    admission = _discharged_admission(patient, ward)
    with patch.object(LookupService, "get_room", new_callable=AsyncMock) as get_room:
        get_room.return_value = ward
        item = await BillingService.collect_room_charge(db, admission)

    assert item is None
