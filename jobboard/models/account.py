"""Account model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from jobboard.core.constants import Role
from jobboard.db.base import Base


class Account(Base):
    """Credential and role record behind every company, user and admin."""

    __tablename__ = "accounts"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    is_locked = Column(Boolean, default=False, nullable=False)

    # Password reset
    reset_password_token = Column(String(255), nullable=True)
    reset_password_expires_at = Column(DateTime, nullable=True)

    # Relationships
    company = relationship("Company", back_populates="account", uselist=False)

    def __repr__(self):
        return f"<Account {self.email} ({self.role})>"
