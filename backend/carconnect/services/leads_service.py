from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from ..errors import not_found
from ..models import Lead, Trim, User, LEAD_STATUSES
from ..schemas.lead import LeadCreate, LeadStats, LeadWithCarOut
from .assembly import Assembler, leads_of_brand

logger = logging.getLogger(__name__)


class LeadsService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.assembler = Assembler(db)

    def create(self, payload: LeadCreate, user: User | None = None) -> Lead:
        if self.db.get(Trim, payload.car_id) is None:
            raise not_found("Auto")
        lead = Lead(
            car_id=payload.car_id,
            user_id=user.id if user else None,
            name=payload.name.strip(),
            email=str(payload.email).lower(),
            phone=payload.phone.strip(),
            department=payload.department,
            city=payload.city,
            message=payload.message,
            status="new",
        )
        self.db.add(lead)
        self.db.commit()
        self.db.refresh(lead)
        logger.info("lead_created id=%s car_id=%s user_id=%s", lead.id, lead.car_id, lead.user_id)
        return lead

    def get(self, lead_id: int) -> Lead:
        lead = self.db.get(Lead, lead_id)
        if lead is None:
            raise not_found("Lead")
        return lead

    def list_all(self) -> List[LeadWithCarOut]:
        leads = self.db.execute(select(Lead).order_by(Lead.id.desc())).scalars().all()
        return self.assembler.leads(leads)

    def list_by_brand(self, brand_id: int) -> List[LeadWithCarOut]:
        leads = self.db.execute(leads_of_brand(brand_id)).scalars().all()
        return self.assembler.leads(leads)

    def list_recent_by_brand(self, brand_id: int, limit: int = 5) -> List[LeadWithCarOut]:
        leads = self.db.execute(leads_of_brand(brand_id).limit(max(limit, 0))).scalars().all()
        return self.assembler.leads(leads)

    def list_for_user(self, user_id: int) -> List[LeadWithCarOut]:
        stmt = select(Lead).where(Lead.user_id == user_id).order_by(Lead.id.desc())
        return self.assembler.leads(self.db.execute(stmt).scalars().all())

    def update_status(self, lead_id: int, status: str) -> Lead:
        # any status may follow any other
        lead = self.get(lead_id)
        previous = lead.status
        lead.status = status
        self.db.commit()
        self.db.refresh(lead)
        logger.info("lead_status id=%s from=%s to=%s", lead.id, previous, status)
        return lead

    def delete(self, lead_id: int) -> None:
        lead = self.get(lead_id)
        self.db.delete(lead)
        self.db.commit()
        logger.info("lead_deleted id=%s", lead_id)

    def count_new_by_brand(self, brand_id: int) -> int:
        subq = leads_of_brand(brand_id).where(Lead.status == "new").order_by(None).subquery()
        return self.db.execute(select(func.count()).select_from(subq)).scalar_one()

    def stats(self, brand_id: Optional[int] = None) -> LeadStats:
        if brand_id is None:
            rows = self.db.execute(select(Lead.status, func.count()).group_by(Lead.status)).all()
        else:
            subq = leads_of_brand(brand_id).order_by(None).subquery()
            rows = self.db.execute(select(subq.c.status, func.count()).group_by(subq.c.status)).all()
        by_status = {status: 0 for status in LEAD_STATUSES}
        for status, count in rows:
            by_status[status] = count
        return LeadStats(total=sum(by_status.values()), by_status=by_status)
