"""System users known to the identity service"""

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID, ENUM

from app.models.base import BaseModel, StatusMixin
from app.models.enums import UserRole


class SystemUser(BaseModel, StatusMixin):
    """
    Staff account. Credentials live with the identity service; this table
    only holds what payments and role gating reference.
    """
    __tablename__ = "system_users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    role = Column(
        ENUM(UserRole, name="user_role", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    # Doctor/nurse/etc. record this account belongs to, if any
    linked_staff_id = Column(UUID(as_uuid=True), nullable=True)

    def __repr__(self) -> str:
        return f"<SystemUser {self.username} ({self.role})>"
