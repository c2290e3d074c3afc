"""Integration tests: bill generation, payments and settlement status."""

import asyncio
import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import Bill, Payment
from tests.conftest import requires_db

pytestmark = requires_db


async def _discharged_stay(async_client, seed, headers, room_type=None):
    """Three started days in a room of the given type."""
    doctor = await seed.doctor()
    room = await seed.room(capacity=1, room_type=room_type)
    patient = await seed.patient()
    resp = await async_client.post("/admission", json={
        "patient_id": str(patient.id),
        "room_id": str(room.id),
        "admitting_doctor_id": str(doctor.id),
        "admission_datetime": "2026-03-01T08:00:00",
    }, headers=headers)
    admission_id = resp.json()["data"]["id"]
    resp = await async_client.put(
        f"/admission/{admission_id}/discharge",
        json={"discharge_datetime": "2026-03-03T09:00:00"},
        headers=headers,
    )
    assert resp.status_code == 200
    return patient, doctor, room, admission_id


async def _bill_of_500(async_client, seed, admin_headers):
    """Stay of 3 days at 100.00 plus one 200.00 treatment."""
    room_type = f"Ward-{uuid.uuid4().hex[:8]}"
    await seed.service(f"{room_type} Daily Charge", "100.00")
    patient, doctor, room, admission_id = await _discharged_stay(async_client, seed, admin_headers, room_type)
    treatment_name = f"MRI-{uuid.uuid4().hex[:8]}"
    await seed.service(treatment_name, "200.00")
    await seed.treatment(patient, doctor, treatment_name)

    resp = await async_client.post("/bill/generate", json={
        "patient_id": str(patient.id),
        "admission_id": admission_id,
        "bill_date": "2026-03-03",
        "due_date": "2026-04-03",
    }, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"], room


def _pay(amount, method="Cash"):
    return {"payment_date": "2026-03-05", "amount": amount, "payment_method": method}


@pytest.mark.asyncio
async def test_generate_bill_with_stay_and_treatment(async_client: AsyncClient, seed, admin_headers):
    bill, room = await _bill_of_500(async_client, seed, admin_headers)

    assert Decimal(bill["total_amount"]) == Decimal("500.00")
    assert Decimal(bill["amount_paid"]) == Decimal("0.00")
    assert Decimal(bill["balance_due"]) == Decimal("500.00")
    assert bill["payment_status"] == "Pending"

    room_item, treatment_item = bill["items"]
    assert room_item["item_description"] == f"{room.room_type} Charge for 3 day(s) (Room: {room.room_number})"
    assert room_item["quantity"] == 3
    assert Decimal(room_item["item_total_price"]) == Decimal("300.00")
    assert treatment_item["quantity"] == 1
    assert treatment_item["treatment_id"] is not None

    resp = await async_client.get(f"/bill/{bill['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert [i["id"] for i in resp.json()["data"]["items"]] == [room_item["id"], treatment_item["id"]]


@pytest.mark.asyncio
async def test_generate_bill_with_nothing_billable(async_client: AsyncClient, seed, billing_headers):
    patient = await seed.patient()

    resp = await async_client.post(
        "/bill/generate",
        json={"patient_id": str(patient.id), "bill_date": "2026-03-03"},
        headers=billing_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "NOTHING_TO_BILL"
    bills = await seed.count(select(func.count()).select_from(Bill).where(Bill.patient_id == patient.id))
    assert bills == 0


@pytest.mark.asyncio
async def test_unpriced_treatment_is_skipped(async_client: AsyncClient, seed, billing_headers):
    doctor = await seed.doctor()
    patient = await seed.patient()
    priced = f"ECG-{uuid.uuid4().hex[:8]}"
    await seed.service(priced, "45.50")
    await seed.treatment(patient, doctor, priced)
    await seed.treatment(patient, doctor, f"Unlisted-{uuid.uuid4().hex[:8]}")

    resp = await async_client.post(
        "/bill/generate",
        json={"patient_id": str(patient.id), "bill_date": "2026-03-03"},
        headers=billing_headers,
    )
    assert resp.status_code == 201
    bill = resp.json()["data"]
    assert len(bill["items"]) == 1
    assert Decimal(bill["total_amount"]) == Decimal("45.50")
    assert bill["admission_id"] is None


@pytest.mark.asyncio
async def test_admission_of_another_patient_is_rejected(async_client: AsyncClient, seed, admin_headers):
    _, _, _, admission_id = await _discharged_stay(async_client, seed, admin_headers)
    stranger = await seed.patient("Stranger")

    resp = await async_client.post("/bill/generate", json={
        "patient_id": str(stranger.id),
        "admission_id": admission_id,
        "bill_date": "2026-03-03",
    }, headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_partial_then_full_payment(async_client: AsyncClient, seed, admin_headers, billing_headers):
    bill, _ = await _bill_of_500(async_client, seed, admin_headers)

    resp = await async_client.post(f"/bill/{bill['id']}/payments", json=_pay("200.00"), headers=billing_headers)
    assert resp.status_code == 201, resp.text
    receipt = resp.json()["data"]
    assert Decimal(receipt["payment"]["amount"]) == Decimal("200.00")
    assert receipt["payment"]["received_by_user_id"] is not None
    assert receipt["bill"]["payment_status"] == "Partially Paid"
    assert Decimal(receipt["bill"]["amount_paid"]) == Decimal("200.00")

    resp = await async_client.post(
        f"/bill/{bill['id']}/payments", json=_pay("300.00", "Credit Card"), headers=billing_headers
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["bill"]["payment_status"] == "Paid"
    assert Decimal(resp.json()["data"]["bill"]["balance_due"]) == Decimal("0.00")

    resp = await async_client.post(f"/bill/{bill['id']}/payments", json=_pay("10.00"), headers=billing_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "BILL_SETTLED"
    assert resp.json()["error"]["message"] == "Bill is already Paid. Cannot record further payments."

    payments = await seed.count(select(func.count()).select_from(Payment).where(Payment.bill_id == uuid.UUID(bill["id"])))
    assert payments == 2


@pytest.mark.asyncio
async def test_payment_lookup(async_client: AsyncClient, seed, admin_headers, billing_headers):
    bill, _ = await _bill_of_500(async_client, seed, admin_headers)
    resp = await async_client.post(
        f"/bill/{bill['id']}/payments",
        json={**_pay("50.00", "Insurance"), "transaction_reference": "CLAIM-991"},
        headers=billing_headers,
    )
    payment_id = resp.json()["data"]["payment"]["id"]

    resp = await async_client.get(f"/payments/{payment_id}", headers=billing_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["transaction_reference"] == "CLAIM-991"
    assert resp.json()["data"]["payment_method"] == "Insurance"

    resp = await async_client.get(f"/payments/{uuid.uuid4()}", headers=billing_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_payments_are_serialized(async_client: AsyncClient, seed, admin_headers, billing_headers):
    bill, _ = await _bill_of_500(async_client, seed, admin_headers)

    responses = await asyncio.gather(*[
        async_client.post(f"/bill/{bill['id']}/payments", json=_pay("250.00"), headers=billing_headers)
        for _ in range(2)
    ])
    assert [r.status_code for r in responses] == [201, 201]

    resp = await async_client.get(f"/bill/{bill['id']}", headers=billing_headers)
    data = resp.json()["data"]
    assert Decimal(data["amount_paid"]) == Decimal("500.00")
    assert data["payment_status"] == "Paid"


@pytest.mark.asyncio
async def test_invalid_payments_are_rejected(async_client: AsyncClient, seed, admin_headers, billing_headers):
    bill, _ = await _bill_of_500(async_client, seed, admin_headers)

    resp = await async_client.post(f"/bill/{bill['id']}/payments", json=_pay("-5.00"), headers=billing_headers)
    assert resp.status_code == 400
    resp = await async_client.post(f"/bill/{bill['id']}/payments", json=_pay("5.00", "Cheque"), headers=billing_headers)
    assert resp.status_code == 400
    resp = await async_client.post(f"/bill/{uuid.uuid4()}/payments", json=_pay("5.00"), headers=billing_headers)
    assert resp.status_code == 404

    resp = await async_client.get(f"/bill/{bill['id']}", headers=billing_headers)
    assert resp.json()["data"]["payment_status"] == "Pending"
