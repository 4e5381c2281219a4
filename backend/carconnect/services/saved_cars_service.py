from __future__ import annotations

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from ..errors import not_found
from ..models import SavedCar, Trim, User
from ..schemas.catalog import SavedCarOut
from .assembly import Assembler


class SavedCarsService:
    def __init__(self, db: Session):
        self.db = db

    def list_ids(self, user: User) -> list[int]:
        stmt = select(SavedCar.trim_id).where(SavedCar.user_id == user.id).order_by(SavedCar.id.asc())
        return list(self.db.scalars(stmt))

    def save(self, user: User, trim_id: int) -> int:
        existing = self.db.scalar(select(SavedCar).where(SavedCar.user_id == user.id, SavedCar.trim_id == trim_id))
        if existing:
            return existing.id
        if self.db.get(Trim, trim_id) is None:
            raise not_found("Auto")
        saved = SavedCar(user_id=user.id, trim_id=trim_id)
        self.db.add(saved)
        self.db.commit()
        return saved.id

    def unsave(self, user: User, trim_id: int) -> None:
        self.db.execute(delete(SavedCar).where(SavedCar.user_id == user.id, SavedCar.trim_id == trim_id))
        self.db.commit()

    def list_cars(self, user: User) -> list[SavedCarOut]:
        assembler = Assembler(self.db)
        saved = self.db.scalars(
            select(SavedCar).where(SavedCar.user_id == user.id).order_by(SavedCar.id.desc())
        )
        cars = []
        for row in saved:
            car = assembler.car(row.trim_id, require_brand=True)
            if car is not None:
                cars.append(SavedCarOut(**car.model_dump(), saved_id=row.id))
        return cars
