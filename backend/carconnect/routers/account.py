from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_user
from ..db import get_db
from ..models import User
from ..schemas.activation import ActivationCreate, ActivationDetailOut, ActivationOut
from ..schemas.catalog import BrandOut, SavedCarOut
from ..schemas.content import CommunityOut, EventWithBrandOut
from ..schemas.lead import LeadWithCarOut
from ..schemas.user import BrandAdminInfoOut, ProfileUpdate, UserOut
from ..services.activations_service import ActivationsService
from ..services.communities_service import CommunitiesService
from ..services.events_service import EventsService
from ..services.identity_service import IdentityService
from ..services.leads_service import LeadsService
from ..services.saved_cars_service import SavedCarsService

router = APIRouter(prefix="/api/me", tags=["account"])


@router.get("", response_model=UserOut)
def get_profile(user: User = Depends(require_user)):
    return user


@router.patch("", response_model=UserOut)
def update_profile(payload: ProfileUpdate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return IdentityService(db).update_profile(user, payload)


@router.get("/saved-cars", response_model=List[SavedCarOut])
def saved_cars(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return SavedCarsService(db).list_cars(user)


@router.get("/saved-cars/ids")
def saved_car_ids(user: User | None = Depends(get_current_user), db: Session = Depends(get_db)):
    if not user:
        return {"ids": []}
    return {"ids": SavedCarsService(db).list_ids(user)}


@router.post("/saved-cars/{trim_id}")
def save_car(trim_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    saved_id = SavedCarsService(db).save(user, trim_id)
    return {"ok": True, "id": saved_id}


@router.delete("/saved-cars/{trim_id}")
def unsave_car(trim_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    SavedCarsService(db).unsave(user, trim_id)
    return {"ok": True}


@router.get("/leads", response_model=List[LeadWithCarOut])
def my_leads(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return LeadsService(db).list_for_user(user.id)


@router.get("/activations", response_model=List[ActivationDetailOut])
def my_activations(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return ActivationsService(db).list_for_user(user)


@router.post("/activations", response_model=ActivationOut, status_code=status.HTTP_201_CREATED)
def create_activation(payload: ActivationCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return ActivationsService(db).create(payload, user)


@router.get("/memberships", response_model=List[CommunityOut])
def my_memberships(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return CommunitiesService(db).my_memberships(user)


@router.get("/rsvps", response_model=List[EventWithBrandOut])
def my_rsvps(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return EventsService(db).my_rsvps(user)


@router.get("/brand-admin", response_model=BrandAdminInfoOut | None)
def brand_admin_info(user: User = Depends(require_user), db: Session = Depends(get_db)):
    info = IdentityService(db).brand_admin_info(user)
    if info is None:
        return None
    user, brand, row = info
    return BrandAdminInfoOut(
        user=UserOut.model_validate(user),
        brand=BrandOut.model_validate(brand),
        brand_admin_id=row.id,
    )
