"""Brand console API.

Every route runs under ``require_brand_admin``; the active brand comes from the
``brand_id`` query parameter (defaulting to the first managed brand) and each
mutation re-checks that the target entity belongs to it before touching it.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import (
    BrandScope,
    ensure_activation_owned,
    ensure_benefit_owned,
    ensure_event_owned,
    ensure_lead_owned,
    ensure_model_owned,
    ensure_trim_owned,
    require_brand_admin,
)
from ..config import settings
from ..db import get_db
from ..errors import forbidden
from ..schemas.activation import (
    ActivationDetailOut,
    ActivationOut,
    ActivationStatus,
    BenefitIn,
    BenefitOut,
    BenefitUpdate,
    BenefitWithBrandOut,
)
from ..schemas.admin import BrandAdminStats, BrandAdminTrends, BrandContactIn, BrandContactOut, BrandContactUpdate
from ..schemas.catalog import BrandOut, ModelIn, ModelOut, ModelUpdate, TrimIn, TrimOut, TrimUpdate
from ..schemas.content import EventIn, EventOut, EventUpdate
from ..schemas.lead import CountOut, LeadOut, LeadStats, LeadStatusUpdate, LeadWithCarOut
from ..schemas.user import UserOut
from ..services.activations_service import ActivationsService
from ..services.admin_service import AdminService
from ..services.catalog_service import CatalogService
from ..services.events_service import EventsService
from ..services.leads_service import LeadsService

router = APIRouter(prefix="/api/marca", tags=["brand-admin"])


def _same_brand(scope: BrandScope, brand_id: Optional[int]) -> None:
    if brand_id is not None and brand_id != scope.brand_id:
        raise forbidden()


@router.get("/brands", response_model=List[BrandOut])
def managed_brands(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    catalog = CatalogService(db)
    return [catalog.get_brand(bid) for bid in scope.caps.brand_ids]


@router.get("/dashboard")
def dashboard(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    leads = LeadsService(db)
    return {
        "brand": BrandOut.model_validate(CatalogService(db).get_brand(scope.brand_id)),
        "stats": AdminService(db).brand_stats(scope.brand_id),
        "new_leads": leads.count_new_by_brand(scope.brand_id),
        "recent_leads": leads.list_recent_by_brand(scope.brand_id, limit=settings.RECENT_LEADS_LIMIT),
        "upcoming_events": [
            EventOut.model_validate(e)
            for e in EventsService(db).list_upcoming_by_brand(scope.brand_id, limit=settings.UPCOMING_EVENTS_LIMIT)
        ],
    }


@router.get("/stats", response_model=BrandAdminStats)
def stats(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return AdminService(db).brand_stats(scope.brand_id)


@router.get("/trends", response_model=BrandAdminTrends)
def trends(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return AdminService(db).brand_trends(scope.brand_id)


# leads


@router.get("/leads", response_model=List[LeadWithCarOut])
def list_leads(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return LeadsService(db).list_by_brand(scope.brand_id)


@router.get("/leads/recent", response_model=List[LeadWithCarOut])
def recent_leads(
    limit: int = Query(default=5, ge=0, le=100),
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    return LeadsService(db).list_recent_by_brand(scope.brand_id, limit=limit)


@router.get("/leads/new-count", response_model=CountOut)
def new_leads_count(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return CountOut(count=LeadsService(db).count_new_by_brand(scope.brand_id))


@router.get("/leads/stats", response_model=LeadStats)
def lead_stats(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return LeadsService(db).stats(scope.brand_id)


@router.patch("/leads/{lead_id}/status", response_model=LeadOut)
def update_lead_status(
    lead_id: int,
    payload: LeadStatusUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_lead_owned(db, scope, lead_id)
    return LeadsService(db).update_status(lead_id, payload.status)


# models


@router.get("/models", response_model=List[ModelOut])
def list_models(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return CatalogService(db).list_models(brand_id=scope.brand_id)


@router.post("/models", response_model=ModelOut, status_code=status.HTTP_201_CREATED)
def create_model(payload: ModelIn, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    _same_brand(scope, payload.brand_id)
    return CatalogService(db).create_model(payload)


@router.patch("/models/{model_id}", response_model=ModelOut)
def update_model(
    model_id: int,
    payload: ModelUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_model_owned(db, scope, model_id)
    return CatalogService(db).update_model(model_id, payload)


@router.delete("/models/{model_id}")
def delete_model(model_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_model_owned(db, scope, model_id)
    CatalogService(db).delete_model(model_id)
    return {"ok": True}


# trims


@router.get("/trims", response_model=List[TrimOut])
def list_trims(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return CatalogService(db).list_trims_by_brand(scope.brand_id)


@router.post("/trims", response_model=TrimOut, status_code=status.HTTP_201_CREATED)
def create_trim(payload: TrimIn, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_model_owned(db, scope, payload.model_id)
    return CatalogService(db).create_trim(payload)


@router.patch("/trims/{trim_id}", response_model=TrimOut)
def update_trim(
    trim_id: int,
    payload: TrimUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_trim_owned(db, scope, trim_id)
    return CatalogService(db).update_trim(trim_id, payload)


@router.delete("/trims/{trim_id}")
def delete_trim(trim_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_trim_owned(db, scope, trim_id)
    CatalogService(db).delete_trim(trim_id)
    return {"ok": True}


# events


@router.get("/events", response_model=List[EventOut])
def list_events(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return EventsService(db).list_by_brand(scope.brand_id)


@router.post("/events", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventIn, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    _same_brand(scope, payload.brand_id)
    return EventsService(db).create(payload.model_copy(update={"brand_id": scope.brand_id}))


@router.patch("/events/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_event_owned(db, scope, event_id)
    return EventsService(db).update(event_id, payload)


@router.delete("/events/{event_id}")
def delete_event(event_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_event_owned(db, scope, event_id)
    EventsService(db).delete(event_id)
    return {"ok": True}


@router.get("/events/{event_id}/attendees", response_model=List[UserOut])
def event_attendees(event_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_event_owned(db, scope, event_id)
    return EventsService(db).attendees(event_id)


# benefits


@router.get("/benefits", response_model=List[BenefitWithBrandOut])
def list_benefits(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return ActivationsService(db).list_benefits(brand_id=scope.brand_id)


@router.post("/benefits", response_model=BenefitOut, status_code=status.HTTP_201_CREATED)
def create_benefit(payload: BenefitIn, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    _same_brand(scope, payload.brand_id)
    return ActivationsService(db).create_benefit(payload)


@router.patch("/benefits/{benefit_id}", response_model=BenefitOut)
def update_benefit(
    benefit_id: int,
    payload: BenefitUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_benefit_owned(db, scope, benefit_id)
    return ActivationsService(db).update_benefit(benefit_id, payload)


@router.delete("/benefits/{benefit_id}")
def delete_benefit(benefit_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    ensure_benefit_owned(db, scope, benefit_id)
    ActivationsService(db).delete_benefit(benefit_id)
    return {"ok": True}


# activations


@router.get("/activations", response_model=List[ActivationDetailOut])
def list_activations(
    status_filter: Optional[ActivationStatus] = Query(default=None, alias="status"),
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    return ActivationsService(db).list_by_brand(scope.brand_id, status_filter)


@router.post("/activations/{activation_id}/verify", response_model=ActivationOut)
def verify_activation(
    activation_id: int,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_activation_owned(db, scope, activation_id)
    return ActivationsService(db).verify(activation_id, scope.user)


@router.post("/activations/{activation_id}/reject", response_model=ActivationOut)
def reject_activation(
    activation_id: int,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_activation_owned(db, scope, activation_id)
    return ActivationsService(db).reject(activation_id, scope.user)


@router.delete("/activations/{activation_id}")
def delete_activation(
    activation_id: int,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    ensure_activation_owned(db, scope, activation_id)
    ActivationsService(db).delete(activation_id)
    return {"ok": True}


# contacts


@router.get("/contacts", response_model=List[BrandContactOut])
def list_contacts(scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    return AdminService(db).list_contacts(scope.brand_id)


@router.post("/contacts", response_model=BrandContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: BrandContactIn,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).create_contact(scope.brand_id, payload)


@router.patch("/contacts/{contact_id}", response_model=BrandContactOut)
def update_contact(
    contact_id: int,
    payload: BrandContactUpdate,
    scope: BrandScope = Depends(require_brand_admin),
    db: Session = Depends(get_db),
):
    service = AdminService(db)
    _same_brand(scope, service.get_contact(contact_id).brand_id)
    return service.update_contact(contact_id, payload)


@router.delete("/contacts/{contact_id}")
def delete_contact(contact_id: int, scope: BrandScope = Depends(require_brand_admin), db: Session = Depends(get_db)):
    service = AdminService(db)
    _same_brand(scope, service.get_contact(contact_id).brand_id)
    service.delete_contact(contact_id)
    return {"ok": True}
