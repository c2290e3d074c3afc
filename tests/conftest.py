"""Shared pytest fixtures for unit and integration tests."""

import os
import uuid
from datetime import datetime
from decimal import Decimal

# Must be set before app.config is imported; tests hit the API far above the per-minute limit
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from dotenv import load_dotenv

# Load .env so DATABASE_URL, SECRET_KEY available for requires_db check
load_dotenv()

from httpx import ASGITransport, AsyncClient
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.main import app
from app.config import settings
from app.core.security import create_access_token
from app.database import Base, connect_args, database_url, engine
from app.models import Doctor, Patient, Room, Service, SystemUser, Treatment, UserRole

# Skip integration tests if DATABASE_URL or SECRET_KEY not set
requires_db = pytest.mark.skipif(
    not os.getenv("DATABASE_URL") or not os.getenv("SECRET_KEY"),
    reason="DATABASE_URL and SECRET_KEY must be set",
)


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(api_base: str):
    """Async HTTP client bound to the ASGI app."""
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    # Pooled asyncpg connections are bound to the loop that opened them
    await engine.dispose()


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


class Seeder:
    """
    Writes reference rows directly. Patients, doctors, rooms, services and
    treatments have no write endpoints in this API.
    """

    def __init__(self, session_factory: async_sessionmaker, suffix: str):
        self._session_factory = session_factory
        self.suffix = suffix

    async def _save(self, obj):
        async with self._session_factory() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return obj

    async def fetch(self, model, obj_id):
        async with self._session_factory() as session:
            return await session.get(model, obj_id)

    async def count(self, statement) -> int:
        async with self._session_factory() as session:
            return await session.scalar(statement)

    async def patient(self, first_name: str = "Pat") -> Patient:
        return await self._save(Patient(first_name=first_name, last_name=f"Test-{self.suffix}"))

    async def doctor(self, is_active: bool = True) -> Doctor:
        return await self._save(Doctor(
            first_name="Doc",
            last_name=f"Test-{self.suffix}",
            specialization="General Medicine",
            is_active=is_active,
        ))

    async def room(self, capacity: int = 1, room_type: str = None, is_active: bool = True) -> Room:
        return await self._save(Room(
            room_number=f"R-{uuid.uuid4().hex[:10]}",
            room_type=room_type or f"Ward-{self.suffix}",
            capacity=capacity,
            current_occupancy=0,
            is_active=is_active,
        ))

    async def service(self, service_name: str, cost: str) -> Service:
        return await self._save(Service(service_name=service_name, cost=Decimal(cost), service_category="Test"))

    async def treatment(self, patient: Patient, doctor: Doctor, treatment_name: str) -> Treatment:
        return await self._save(Treatment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            treatment_name=treatment_name,
            start_datetime=datetime(2026, 3, 1, 9, 0),
        ))

    async def user(self, role: UserRole) -> SystemUser:
        return await self._save(SystemUser(
            username=f"{role.value.lower()}_{uuid.uuid4().hex[:10]}",
            full_name=f"{role.value} {self.suffix}",
            role=role,
        ))


@pytest.fixture
async def seed(unique_suffix: str):
    """Seeder on its own NullPool engine; creates the schema if missing."""
    seed_engine = create_async_engine(database_url, connect_args=connect_args, poolclass=pool.NullPool)

    async with seed_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield Seeder(async_sessionmaker(seed_engine, class_=AsyncSession, expire_on_commit=False), unique_suffix)
    await seed_engine.dispose()


async def _headers_for(seed: Seeder, role: UserRole) -> dict:
    user = await seed.user(role)
    token = create_access_token({"sub": str(user.id), "role": role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_headers(seed: Seeder) -> dict:
    return await _headers_for(seed, UserRole.ADMIN)


@pytest.fixture
async def billing_headers(seed: Seeder) -> dict:
    return await _headers_for(seed, UserRole.BILLING_STAFF)


@pytest.fixture
async def nurse_headers(seed: Seeder) -> dict:
    return await _headers_for(seed, UserRole.NURSE)
