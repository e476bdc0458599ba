"""Company VIP package order model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from jobboard.core.constants import OrderStatus
from jobboard.db.base import Base


class CompanyVipPackage(Base):
    """A company's purchase of a VIP package.

    ``status`` moves PENDING -> SUCCESS or PENDING -> FAILED exactly once.
    A SUCCESS order whose ``end_date`` is in the future and that still has
    ``remaining_posts`` is usable posting credit.
    """

    __tablename__ = "company_vip_packages"

    company_id = Column(ForeignKey("companies.id"), nullable=False, index=True)
    vip_package_id = Column(ForeignKey("vip_packages.id"), nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)
    remaining_posts = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)

    # Relationships
    company = relationship("Company", back_populates="orders")
    vip_package = relationship("VipPackage", back_populates="orders", lazy="joined")

    def __repr__(self):
        return f"<CompanyVipPackage {self.id} {self.status}>"
