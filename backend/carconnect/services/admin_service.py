from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from ..errors import CarConnectError, ErrorKind, commit_unique, duplicate, not_found
from ..models import (
    Benefit,
    Brand,
    BrandAdmin,
    BrandContact,
    CarModel,
    Event,
    Lead,
    Trim,
    User,
    VehicleActivation,
)
from ..schemas.admin import (
    AdminStats,
    AdminTrends,
    BrandAdminStats,
    BrandAdminTrends,
    BrandContactIn,
    BrandContactUpdate,
    TrendPoint,
)
from .assembly import leads_of_brand, trims_of_brand
from .catalog_service import changes
from .identity_service import IdentityService

logger = logging.getLogger(__name__)

MONTHS_ES = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")


def week_ranges(weeks: int, now: datetime) -> List[tuple[datetime, datetime, str]]:
    """Consecutive 7-day windows ending at ``now``, oldest first, labelled ``d/m`` of their start."""
    ranges = []
    for i in range(weeks - 1, -1, -1):
        end = now - timedelta(days=7 * i)
        start = end - timedelta(days=7)
        ranges.append((start, end, f"{start.day}/{start.month}"))
    return ranges


def month_ranges(months: int, now: datetime) -> List[tuple[datetime, datetime, str]]:
    ranges = []
    for i in range(months - 1, -1, -1):
        index = now.year * 12 + now.month - 1 - i
        start = datetime(index // 12, index % 12 + 1, 1)
        end = datetime((index + 1) // 12, (index + 1) % 12 + 1, 1)
        ranges.append((start, end, MONTHS_ES[start.month - 1]))
    return ranges


class AdminService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _count(self, stmt) -> int:
        return self.db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()

    # stats

    def stats(self) -> AdminStats:
        return AdminStats(
            brands=self._count(select(Brand.id)),
            models=self._count(select(CarModel.id)),
            trims=self._count(select(Trim.id)),
            leads=self._count(select(Lead.id)),
            new_leads=self._count(select(Lead.id).where(Lead.status == "new")),
            events=self._count(select(Event.id)),
            benefits=self._count(select(Benefit.id)),
            activations=self._count(select(VehicleActivation.id)),
            pending_activations=self._count(
                select(VehicleActivation.id).where(VehicleActivation.status == "pending")
            ),
            users=self._count(select(User.id)),
        )

    def brand_stats(self, brand_id: int) -> BrandAdminStats:
        activations = select(VehicleActivation.id).where(VehicleActivation.brand_id == brand_id)
        return BrandAdminStats(
            models=self._count(select(CarModel.id).where(CarModel.brand_id == brand_id)),
            trims=self._count(trims_of_brand(brand_id)),
            leads=self._count(leads_of_brand(brand_id)),
            new_leads=self._count(leads_of_brand(brand_id).where(Lead.status == "new")),
            events=self._count(select(Event.id).where(Event.brand_id == brand_id)),
            benefits=self._count(select(Benefit.id).where(Benefit.brand_id == brand_id)),
            activations=self._count(activations),
            pending_activations=self._count(activations.where(VehicleActivation.status == "pending")),
        )

    # trends

    def _series(self, stmt, column, ranges) -> List[TrendPoint]:
        return [
            TrendPoint(label=label, count=self._count(stmt.where(column >= start, column < end)))
            for start, end, label in ranges
        ]

    def trends(self, now: Optional[datetime] = None) -> AdminTrends:
        now = now or datetime.utcnow()
        weeks = week_ranges(8, now)
        return AdminTrends(
            leads_per_week=self._series(select(Lead.id), Lead.created_at, weeks),
            users_per_week=self._series(select(User.id), User.created_at, weeks),
            activations_per_month=self._series(
                select(VehicleActivation.id), VehicleActivation.created_at, month_ranges(6, now)
            ),
        )

    def brand_trends(self, brand_id: int, now: Optional[datetime] = None) -> BrandAdminTrends:
        now = now or datetime.utcnow()
        return BrandAdminTrends(
            leads_per_week=self._series(leads_of_brand(brand_id), Lead.created_at, week_ranges(8, now)),
            activations_per_month=self._series(
                select(VehicleActivation.id).where(VehicleActivation.brand_id == brand_id),
                VehicleActivation.created_at,
                month_ranges(6, now),
            ),
        )

    # brand contacts

    def list_contacts(self, brand_id: int) -> List[BrandContact]:
        stmt = select(BrandContact).where(BrandContact.brand_id == brand_id).order_by(BrandContact.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def get_contact(self, contact_id: int) -> BrandContact:
        contact = self.db.get(BrandContact, contact_id)
        if contact is None:
            raise not_found("Contacto")
        return contact

    def _unset_defaults(self, brand_id: int, keep_id: Optional[int] = None) -> None:
        stmt = update(BrandContact).where(BrandContact.brand_id == brand_id).values(is_default=False)
        if keep_id is not None:
            stmt = stmt.where(BrandContact.id != keep_id)
        self.db.execute(stmt)

    def create_contact(self, brand_id: int, payload: BrandContactIn) -> BrandContact:
        if self.db.get(Brand, brand_id) is None:
            raise not_found("Marca")
        if payload.is_default:
            self._unset_defaults(brand_id)
        contact = BrandContact(
            brand_id=brand_id,
            email=str(payload.email).lower(),
            department=payload.department,
            is_default=payload.is_default,
        )
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def update_contact(self, contact_id: int, payload: BrandContactUpdate) -> BrandContact:
        contact = self.get_contact(contact_id)
        values = changes(payload)
        if values.get("is_default"):
            self._unset_defaults(contact.brand_id, keep_id=contact.id)
        if "email" in values:
            values["email"] = str(values["email"]).lower()
        for key, value in values.items():
            setattr(contact, key, value)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def delete_contact(self, contact_id: int) -> None:
        contact = self.get_contact(contact_id)
        self.db.delete(contact)
        self.db.commit()

    # brand admins

    def list_brand_admins(self, brand_id: Optional[int] = None) -> List[BrandAdmin]:
        stmt = select(BrandAdmin).options(selectinload(BrandAdmin.user)).order_by(BrandAdmin.id.asc())
        if brand_id is not None:
            stmt = stmt.where(BrandAdmin.brand_id == brand_id)
        return list(self.db.execute(stmt).scalars().all())

    def add_brand_admin(self, brand_id: int, user_id: int) -> BrandAdmin:
        if self.db.get(Brand, brand_id) is None:
            raise not_found("Marca")
        user = self.db.get(User, user_id)
        if user is None:
            raise not_found("Usuario")
        exists = self.db.execute(
            select(BrandAdmin.id).where(BrandAdmin.brand_id == brand_id, BrandAdmin.user_id == user_id)
        ).first()
        if exists:
            raise duplicate("Este usuario ya administra esta marca")
        if user.role == "admin":
            raise CarConnectError(ErrorKind.CONFLICT, "Un administrador no puede ser administrador de marca")
        row = BrandAdmin(brand_id=brand_id, user_id=user_id)
        self.db.add(row)
        user.role = "brand_admin"
        commit_unique(self.db, "Este usuario ya administra esta marca")
        self.db.refresh(row)
        logger.info("brand_admin_added id=%s brand_id=%s user_id=%s", row.id, brand_id, user_id)
        return row

    def remove_brand_admin(self, brand_admin_id: int) -> None:
        row = self.db.get(BrandAdmin, brand_admin_id)
        if row is None:
            return
        user_id = row.user_id
        self.db.delete(row)
        self.db.flush()
        remaining = self.db.execute(select(BrandAdmin.id).where(BrandAdmin.user_id == user_id)).first()
        user = self.db.get(User, user_id)
        if user is not None and remaining is None and user.role == "brand_admin":
            user.role = "user"
        self.db.commit()
        logger.info("brand_admin_removed id=%s user_id=%s", brand_admin_id, user_id)

    def make_brand_admin(self, email: str, brand_id: int) -> BrandAdmin:
        user = IdentityService(self.db).get_by_email(email)
        if user is None:
            raise CarConnectError(ErrorKind.NOT_FOUND, f"Usuario con email {email} no encontrado")
        return self.add_brand_admin(brand_id, user.id)
