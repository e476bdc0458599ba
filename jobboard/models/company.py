"""Company model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from jobboard.core.constants import CompanyStatus
from jobboard.db.base import Base


class Company(Base):
    """Hiring company profile, owned by exactly one account."""

    __tablename__ = "companies"

    account_id = Column(ForeignKey("accounts.id"), unique=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    address = Column(String(255), nullable=False)
    province_id = Column(ForeignKey("provinces.id"), nullable=True)
    website = Column(String(500))
    logo = Column(String(500))

    # Registration documents (immutable after registration)
    tax_code = Column(String(50), nullable=False)
    business_license_path = Column(String(500), nullable=False)

    # Approval
    status = Column(Integer, nullable=False, default=CompanyStatus.PENDING.value, index=True)
    reason_reject = Column(Text, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="company")
    province = relationship("Province", lazy="joined")
    orders = relationship("CompanyVipPackage", back_populates="company")

    def __repr__(self):
        return f"<Company {self.name} status={self.status}>"
