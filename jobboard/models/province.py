"""Province model."""

from sqlalchemy import Column, String

from jobboard.db.base import Base


class Province(Base):
    """Province reference (managed by the location CRUD)."""

    __tablename__ = "provinces"

    name = Column(String(100), nullable=False, unique=True)

    def __repr__(self):
        return f"<Province {self.name}>"
