from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, Integer, Numeric, Boolean, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

SEGMENTS = (
    "sedan",
    "hatchback",
    "suv",
    "crossover",
    "pickup",
    "coupe",
    "convertible",
    "wagon",
    "van",
    "sports",
)
FUEL_TYPES = ("gasolina", "diesel", "hibrido", "electrico", "gnc")


class CarModel(Base):
    __tablename__ = "models"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    # parents may be deleted; dangling references resolve to null
    brand_id: Mapped[int | None] = mapped_column(ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    segment: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    year_start: Mapped[int] = mapped_column(Integer, nullable=False)
    year_end: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)


class Trim(Base):
    __tablename__ = "trims"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    model_id: Mapped[int | None] = mapped_column(ForeignKey("models.id", ondelete="SET NULL"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(160), nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    price_usd: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, index=True)
    engine: Mapped[str] = mapped_column(String(120), nullable=False)
    transmission: Mapped[str] = mapped_column(String(120), nullable=False)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False)
    horsepower: Mapped[int] = mapped_column(Integer, nullable=False)
    torque: Mapped[int | None] = mapped_column(Integer, nullable=True)
    acceleration_0_100: Mapped[float | None] = mapped_column(Numeric(5, 2), nullable=True)
    top_speed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fuel_consumption: Mapped[float | None] = mapped_column(Numeric(5, 2), nullable=True)
    doors: Mapped[int] = mapped_column(Integer, nullable=False)
    seats: Mapped[int] = mapped_column(Integer, nullable=False)
    trunk_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    features: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
