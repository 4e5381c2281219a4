from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import relationship

from .base import Base


class SavedCar(Base):
    __tablename__ = "saved_cars"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trim_id = Column(Integer, ForeignKey("trims.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="saved_cars")

    __table_args__ = (UniqueConstraint("user_id", "trim_id", name="uq_saved_cars_user_trim"),)
