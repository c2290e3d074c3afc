"""initial hospital schema: reference entities, admissions, billing

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.execute("CREATE TYPE user_role AS ENUM ("
               "'Admin', 'Doctor', 'Nurse', 'Receptionist', 'BillingStaff')")
    op.execute("CREATE TYPE payment_status AS ENUM ("
               "'Pending', 'Partially Paid', 'Paid', 'Cancelled')")
    op.execute("CREATE TYPE payment_method AS ENUM ("
               "'Cash', 'E-Banking', 'Credit Card', 'Debit Card', 'Insurance', 'Other')")

    op.create_table(
        "system_users",
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("role", postgresql.ENUM(name="user_role", create_type=False), nullable=False),
        sa.Column("linked_staff_id", sa.UUID(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_system_users_id"), "system_users", ["id"])
    op.create_index(op.f("ix_system_users_username"), "system_users", ["username"], unique=True)
    op.create_index(op.f("ix_system_users_role"), "system_users", ["role"])
    op.create_index(op.f("ix_system_users_is_active"), "system_users", ["is_active"])

    op.create_table(
        "patients",
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_patients_id"), "patients", ["id"])
    op.create_index(op.f("ix_patients_phone_number"), "patients", ["phone_number"])

    op.create_table(
        "doctors",
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("specialization", sa.String(150), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_doctors_id"), "doctors", ["id"])
    op.create_index(op.f("ix_doctors_is_active"), "doctors", ["is_active"])

    op.create_table(
        "rooms",
        sa.Column("room_number", sa.String(20), nullable=False),
        sa.Column("room_type", sa.String(50), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("current_occupancy", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("capacity >= 1", name="ck_rooms_capacity_positive"),
        sa.CheckConstraint(
            "current_occupancy >= 0 AND current_occupancy <= capacity",
            name="ck_rooms_occupancy_within_capacity",
        ),
    )
    op.create_index(op.f("ix_rooms_id"), "rooms", ["id"])
    op.create_index(op.f("ix_rooms_room_number"), "rooms", ["room_number"], unique=True)
    op.create_index(op.f("ix_rooms_room_type"), "rooms", ["room_type"])
    op.create_index(op.f("ix_rooms_is_active"), "rooms", ["is_active"])

    op.create_table(
        "services",
        sa.Column("service_name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("service_category", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("cost >= 0", name="ck_services_cost_non_negative"),
    )
    op.create_index(op.f("ix_services_id"), "services", ["id"])
    op.create_index(op.f("ix_services_service_name"), "services", ["service_name"], unique=True)
    op.create_index(op.f("ix_services_is_active"), "services", ["is_active"])

    op.create_table(
        "admissions",
        sa.Column("patient_id", sa.UUID(), nullable=False),
        sa.Column("room_id", sa.UUID(), nullable=False),
        sa.Column("admitting_doctor_id", sa.UUID(), nullable=False),
        sa.Column("admission_datetime", sa.DateTime(), nullable=False),
        sa.Column("discharge_datetime", sa.DateTime(), nullable=True),
        sa.Column("reason_for_admission", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["admitting_doctor_id"], ["doctors.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admissions_id"), "admissions", ["id"])
    op.create_index(op.f("ix_admissions_patient_id"), "admissions", ["patient_id"])
    op.create_index(op.f("ix_admissions_room_id"), "admissions", ["room_id"])
    op.create_index(op.f("ix_admissions_admitting_doctor_id"), "admissions", ["admitting_doctor_id"])
    op.create_index(
        "uq_admissions_active_patient",
        "admissions",
        ["patient_id"],
        unique=True,
        postgresql_where=sa.text("discharge_datetime IS NULL"),
    )

    op.create_table(
        "treatments",
        sa.Column("patient_id", sa.UUID(), nullable=False),
        sa.Column("doctor_id", sa.UUID(), nullable=False),
        sa.Column("admission_id", sa.UUID(), nullable=True),
        sa.Column("treatment_name", sa.String(150), nullable=True),
        sa.Column("diagnosis", sa.Text(), nullable=True),
        sa.Column("treatment_plan", sa.Text(), nullable=True),
        sa.Column("start_datetime", sa.DateTime(), nullable=False),
        sa.Column("end_datetime", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["admission_id"], ["admissions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_treatments_id"), "treatments", ["id"])
    op.create_index(op.f("ix_treatments_patient_id"), "treatments", ["patient_id"])
    op.create_index(op.f("ix_treatments_doctor_id"), "treatments", ["doctor_id"])
    op.create_index(op.f("ix_treatments_admission_id"), "treatments", ["admission_id"])

    op.create_table(
        "bills",
        sa.Column("patient_id", sa.UUID(), nullable=False),
        sa.Column("admission_id", sa.UUID(), nullable=True),
        sa.Column("bill_date", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", postgresql.ENUM(name="payment_status", create_type=False), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["admission_id"], ["admissions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"])
    op.create_index(op.f("ix_bills_patient_id"), "bills", ["patient_id"])
    op.create_index(op.f("ix_bills_admission_id"), "bills", ["admission_id"])
    op.create_index(op.f("ix_bills_payment_status"), "bills", ["payment_status"])

    op.create_table(
        "bill_items",
        sa.Column("bill_id", sa.UUID(), nullable=False),
        sa.Column("service_id", sa.UUID(), nullable=True),
        sa.Column("treatment_id", sa.UUID(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("item_description", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("item_total_price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["treatment_id"], ["treatments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bill_items_id"), "bill_items", ["id"])
    op.create_index(op.f("ix_bill_items_bill_id"), "bill_items", ["bill_id"])

    op.create_table(
        "payments",
        sa.Column("bill_id", sa.UUID(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", postgresql.ENUM(name="payment_method", create_type=False), nullable=False),
        sa.Column("transaction_reference", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("received_by_user_id", sa.UUID(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["received_by_user_id"], ["system_users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"])
    op.create_index(op.f("ix_payments_bill_id"), "payments", ["bill_id"])
    op.create_index(op.f("ix_payments_received_by_user_id"), "payments", ["received_by_user_id"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("bill_items")
    op.drop_table("bills")
    op.drop_table("treatments")
    op.drop_index("uq_admissions_active_patient", table_name="admissions")
    op.drop_table("admissions")
    op.drop_table("services")
    op.drop_table("rooms")
    op.drop_table("doctors")
    op.drop_table("patients")
    op.drop_table("system_users")
    op.execute("DROP TYPE payment_method")
    op.execute("DROP TYPE payment_status")
    op.execute("DROP TYPE user_role")
