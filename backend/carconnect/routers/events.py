from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_user
from ..db import get_db
from ..errors import forbidden, not_found
from ..models import User
from ..schemas.content import EventWithBrandOut
from ..services.events_service import EventsService

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[EventWithBrandOut])
def list_events(db: Session = Depends(get_db)):
    return EventsService(db).list_events(public_only=True)


@router.get("/rsvp-counts")
def rsvp_counts(db: Session = Depends(get_db)):
    return {str(k): v for k, v in EventsService(db).all_rsvp_counts().items()}


@router.get("/{slug}")
def get_event(slug: str, user: User | None = Depends(get_current_user), db: Session = Depends(get_db)):
    service = EventsService(db)
    event = service.get_by_slug(slug)
    if event is None:
        raise not_found("Evento")
    return {
        "event": service.with_brand(event),
        "rsvp_count": service.rsvp_count(event.id),
        "has_rsvp": service.has_rsvp(event.id, user) if user else False,
    }


@router.post("/{event_id}/rsvp")
def rsvp(event_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    service = EventsService(db)
    event = service.get(event_id)
    if event.requires_verification and user.role not in ("verified_user", "brand_admin", "admin"):
        raise forbidden("Este evento requiere un vehiculo verificado")
    service.rsvp(event_id, user)
    return {"ok": True, "rsvp_count": service.rsvp_count(event_id)}


@router.delete("/{event_id}/rsvp")
def cancel_rsvp(event_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    service = EventsService(db)
    service.cancel_rsvp(event_id, user)
    return {"ok": True, "rsvp_count": service.rsvp_count(event_id)}
