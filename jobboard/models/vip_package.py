"""VIP package model."""

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from jobboard.core.constants import VipPackageLevel
from jobboard.db.base import Base


class VipPackage(Base):
    """Purchasable visibility tier granting job posts for a number of days."""

    __tablename__ = "vip_packages"

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    num_post = Column(Integer, nullable=False)
    price = Column(Numeric(14, 2), nullable=False)
    duration_day = Column(Integer, nullable=False)
    priority = Column(Integer, nullable=False, default=VipPackageLevel.BASIC.value)
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Relationships
    orders = relationship("CompanyVipPackage", back_populates="vip_package")

    @property
    def level(self) -> str:
        return VipPackageLevel(self.priority).name

    def __repr__(self):
        return f"<VipPackage {self.name} priority={self.priority}>"
