from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ..errors import CarConnectError, ErrorKind, commit_unique, duplicate, not_found
from ..models import Brand, Event, EventRsvp, User
from ..schemas.catalog import BrandOut
from ..schemas.content import EventIn, EventOut, EventUpdate, EventWithBrandOut
from ..schemas.user import UserOut
from .catalog_service import apply_changes

logger = logging.getLogger(__name__)


class EventsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_events(self, public_only: bool = False) -> List[EventWithBrandOut]:
        stmt = select(Event).order_by(Event.event_date.asc(), Event.event_time.asc())
        if public_only:
            stmt = stmt.where(Event.is_public.is_(True))
        return [self.with_brand(e) for e in self.db.execute(stmt).scalars().all()]

    def list_by_brand(self, brand_id: int) -> List[Event]:
        stmt = select(Event).where(Event.brand_id == brand_id).order_by(Event.event_date.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_upcoming_by_brand(self, brand_id: int, limit: int = 5, today: Optional[date] = None) -> List[Event]:
        today_iso = (today or date.today()).isoformat()
        stmt = (
            select(Event)
            .where(Event.brand_id == brand_id, Event.event_date >= today_iso)
            .order_by(Event.event_date.asc(), Event.event_time.asc())
            .limit(max(limit, 0))
        )
        return list(self.db.execute(stmt).scalars().all())

    def with_brand(self, event: Event) -> EventWithBrandOut:
        brand = self.db.get(Brand, event.brand_id) if event.brand_id is not None else None
        return EventWithBrandOut(
            **EventOut.model_validate(event).model_dump(),
            brand=BrandOut.model_validate(brand) if brand else None,
        )

    def get(self, event_id: int) -> Event:
        event = self.db.get(Event, event_id)
        if event is None:
            raise not_found("Evento")
        return event

    def get_by_slug(self, slug: str) -> Optional[Event]:
        return self.db.execute(select(Event).where(Event.slug == slug)).scalars().first()

    def create(self, payload: EventIn) -> Event:
        if payload.brand_id is not None and self.db.get(Brand, payload.brand_id) is None:
            raise not_found("Marca")
        if self.get_by_slug(payload.slug):
            raise duplicate(f"Ya existe un evento con slug {payload.slug}")
        event = Event(**payload.model_dump())
        self.db.add(event)
        commit_unique(self.db, f"Ya existe un evento con slug {payload.slug}")
        self.db.refresh(event)
        logger.info("event_created id=%s brand_id=%s date=%s", event.id, event.brand_id, event.event_date)
        return event

    def update(self, event_id: int, payload: EventUpdate) -> Event:
        event = self.get(event_id)
        apply_changes(event, payload)
        commit_unique(self.db, f"Ya existe un evento con slug {payload.slug}")
        self.db.refresh(event)
        return event

    def delete(self, event_id: int) -> None:
        event = self.get(event_id)
        self.db.execute(delete(EventRsvp).where(EventRsvp.event_id == event_id))
        self.db.delete(event)
        self.db.commit()
        logger.info("event_deleted id=%s", event_id)

    # rsvps

    def rsvp_count(self, event_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(EventRsvp).where(EventRsvp.event_id == event_id)
        ).scalar_one()

    def all_rsvp_counts(self) -> Dict[int, int]:
        rows = self.db.execute(select(EventRsvp.event_id, func.count()).group_by(EventRsvp.event_id)).all()
        return {event_id: count for event_id, count in rows}

    def _rsvp(self, event_id: int, user_id: int) -> Optional[EventRsvp]:
        return self.db.execute(
            select(EventRsvp).where(EventRsvp.event_id == event_id, EventRsvp.user_id == user_id)
        ).scalars().first()

    def has_rsvp(self, event_id: int, user: User) -> bool:
        return self._rsvp(event_id, user.id) is not None

    def my_rsvps(self, user: User) -> List[EventWithBrandOut]:
        stmt = (
            select(Event)
            .join(EventRsvp, EventRsvp.event_id == Event.id)
            .where(EventRsvp.user_id == user.id)
            .order_by(Event.event_date.asc())
        )
        return [self.with_brand(e) for e in self.db.execute(stmt).scalars().all()]

    def rsvp(self, event_id: int, user: User) -> EventRsvp:
        event = self.get(event_id)
        existing = self._rsvp(event_id, user.id)
        if existing:
            return existing
        if event.max_attendees is not None and self.rsvp_count(event_id) >= event.max_attendees:
            logger.info("rsvp_full event_id=%s user_id=%s", event_id, user.id)
            raise CarConnectError(ErrorKind.CONFLICT, "El evento esta completo")
        rsvp = EventRsvp(event_id=event_id, user_id=user.id)
        self.db.add(rsvp)
        commit_unique(self.db, "Ya confirmaste asistencia")
        self.db.refresh(rsvp)
        logger.info("rsvp_created event_id=%s user_id=%s", event_id, user.id)
        return rsvp

    def cancel_rsvp(self, event_id: int, user: User) -> None:
        self.db.execute(delete(EventRsvp).where(EventRsvp.event_id == event_id, EventRsvp.user_id == user.id))
        self.db.commit()

    def attendees(self, event_id: int) -> List[UserOut]:
        stmt = (
            select(User)
            .join(EventRsvp, EventRsvp.user_id == User.id)
            .where(EventRsvp.event_id == event_id)
            .order_by(EventRsvp.id.asc())
        )
        return [UserOut.model_validate(u) for u in self.db.execute(stmt).scalars().all()]
