from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import require_admin
from ..db import get_db
from ..models import User
from ..schemas.activation import (
    ActivationDetailOut,
    ActivationOut,
    ActivationStatus,
    BenefitIn,
    BenefitOut,
    BenefitUpdate,
    BenefitWithBrandOut,
)
from ..schemas.admin import (
    AdminStats,
    AdminTrends,
    BrandAdminIn,
    BrandAdminOut,
    BrandContactIn,
    BrandContactOut,
    BrandContactUpdate,
    MakeAdminIn,
    MakeBrandAdminIn,
    SeedResult,
)
from ..schemas.catalog import BrandIn, BrandOut, BrandUpdate, ModelIn, ModelOut, ModelUpdate, TrimIn, TrimOut, TrimUpdate
from ..schemas.content import (
    BannerIn,
    BannerOrderIn,
    BannerOut,
    BannerUpdate,
    CommentDetailOut,
    CommentOut,
    CommunityIn,
    CommunityOut,
    CommunityUpdate,
    EventIn,
    EventOut,
    EventUpdate,
    EventWithBrandOut,
    ReviewIn,
    ReviewOut,
    ReviewUpdate,
    SettingIn,
)
from ..schemas.lead import LeadOut, LeadStats, LeadStatusUpdate, LeadWithCarOut
from ..schemas.user import RoleUpdate, UserOut
from ..services.activations_service import ActivationsService
from ..services.admin_service import AdminService
from ..services.banners_service import BannersService
from ..services.catalog_service import CatalogService
from ..services.communities_service import CommunitiesService
from ..services.events_service import EventsService
from ..services.identity_service import IdentityService
from ..services.leads_service import LeadsService
from ..services.reviews_service import ReviewsService
from ..services.seed_service import seed_database
from ..services.settings_service import SettingsService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# dashboard


@router.get("/stats", response_model=AdminStats)
def stats(db: Session = Depends(get_db)):
    return AdminService(db).stats()


@router.get("/trends", response_model=AdminTrends)
def trends(db: Session = Depends(get_db)):
    return AdminService(db).trends()


@router.post("/seed", response_model=SeedResult)
def seed(db: Session = Depends(get_db)):
    return seed_database(db)


# users


@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return IdentityService(db).list_users()


@router.patch("/users/{user_id}/role", response_model=UserOut)
def set_role(user_id: int, payload: RoleUpdate, db: Session = Depends(get_db)):
    return IdentityService(db).set_role(user_id, payload.role)


@router.post("/make-admin", response_model=UserOut)
def make_admin(payload: MakeAdminIn, db: Session = Depends(get_db)):
    return IdentityService(db).make_admin(payload.email)


@router.post("/make-brand-admin", response_model=BrandAdminOut)
def make_brand_admin(payload: MakeBrandAdminIn, db: Session = Depends(get_db)):
    return AdminService(db).make_brand_admin(payload.email, payload.brand_id)


# brands


@router.get("/brands", response_model=List[BrandOut])
def list_brands(db: Session = Depends(get_db)):
    return CatalogService(db).list_brands()


@router.post("/brands", response_model=BrandOut, status_code=status.HTTP_201_CREATED)
def create_brand(payload: BrandIn, db: Session = Depends(get_db)):
    return CatalogService(db).create_brand(payload)


@router.patch("/brands/{brand_id}", response_model=BrandOut)
def update_brand(brand_id: int, payload: BrandUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_brand(brand_id, payload)


@router.delete("/brands/{brand_id}")
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_brand(brand_id)
    return {"ok": True}


@router.get("/brands/{brand_id}/contacts", response_model=List[BrandContactOut])
def list_contacts(brand_id: int, db: Session = Depends(get_db)):
    return AdminService(db).list_contacts(brand_id)


@router.post("/brands/{brand_id}/contacts", response_model=BrandContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(brand_id: int, payload: BrandContactIn, db: Session = Depends(get_db)):
    return AdminService(db).create_contact(brand_id, payload)


@router.patch("/contacts/{contact_id}", response_model=BrandContactOut)
def update_contact(contact_id: int, payload: BrandContactUpdate, db: Session = Depends(get_db)):
    return AdminService(db).update_contact(contact_id, payload)


@router.delete("/contacts/{contact_id}")
def delete_contact(contact_id: int, db: Session = Depends(get_db)):
    AdminService(db).delete_contact(contact_id)
    return {"ok": True}


@router.get("/brand-admins", response_model=List[BrandAdminOut])
def list_brand_admins(brand_id: Optional[int] = Query(default=None), db: Session = Depends(get_db)):
    return AdminService(db).list_brand_admins(brand_id)


@router.post("/brands/{brand_id}/admins", response_model=BrandAdminOut, status_code=status.HTTP_201_CREATED)
def add_brand_admin(brand_id: int, payload: BrandAdminIn, db: Session = Depends(get_db)):
    return AdminService(db).add_brand_admin(brand_id, payload.user_id)


@router.delete("/brand-admins/{brand_admin_id}")
def remove_brand_admin(brand_admin_id: int, db: Session = Depends(get_db)):
    AdminService(db).remove_brand_admin(brand_admin_id)
    return {"ok": True}


# models and trims


@router.post("/models", response_model=ModelOut, status_code=status.HTTP_201_CREATED)
def create_model(payload: ModelIn, db: Session = Depends(get_db)):
    return CatalogService(db).create_model(payload)


@router.patch("/models/{model_id}", response_model=ModelOut)
def update_model(model_id: int, payload: ModelUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_model(model_id, payload)


@router.delete("/models/{model_id}")
def delete_model(model_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_model(model_id)
    return {"ok": True}


@router.post("/trims", response_model=TrimOut, status_code=status.HTTP_201_CREATED)
def create_trim(payload: TrimIn, db: Session = Depends(get_db)):
    return CatalogService(db).create_trim(payload)


@router.patch("/trims/{trim_id}", response_model=TrimOut)
def update_trim(trim_id: int, payload: TrimUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_trim(trim_id, payload)


@router.delete("/trims/{trim_id}")
def delete_trim(trim_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_trim(trim_id)
    return {"ok": True}


# leads


@router.get("/leads", response_model=List[LeadWithCarOut])
def list_leads(db: Session = Depends(get_db)):
    return LeadsService(db).list_all()


@router.get("/leads/stats", response_model=LeadStats)
def lead_stats(db: Session = Depends(get_db)):
    return LeadsService(db).stats()


@router.patch("/leads/{lead_id}/status", response_model=LeadOut)
def update_lead_status(lead_id: int, payload: LeadStatusUpdate, db: Session = Depends(get_db)):
    return LeadsService(db).update_status(lead_id, payload.status)


@router.delete("/leads/{lead_id}")
def delete_lead(lead_id: int, db: Session = Depends(get_db)):
    LeadsService(db).delete(lead_id)
    return {"ok": True}


# reviews and comments


@router.get("/reviews", response_model=List[ReviewOut])
def list_reviews(db: Session = Depends(get_db)):
    return ReviewsService(db).list_reviews()


@router.post("/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewIn, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ReviewsService(db).create(payload, admin)


@router.patch("/reviews/{review_id}", response_model=ReviewOut)
def update_review(review_id: int, payload: ReviewUpdate, db: Session = Depends(get_db)):
    return ReviewsService(db).update(review_id, payload)


@router.post("/reviews/{review_id}/publish", response_model=ReviewOut)
def publish_review(review_id: int, db: Session = Depends(get_db)):
    return ReviewsService(db).publish(review_id)


@router.post("/reviews/{review_id}/unpublish", response_model=ReviewOut)
def unpublish_review(review_id: int, db: Session = Depends(get_db)):
    return ReviewsService(db).unpublish(review_id)


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, db: Session = Depends(get_db)):
    ReviewsService(db).delete(review_id)
    return {"ok": True}


@router.get("/comments", response_model=List[CommentDetailOut])
def list_comments(db: Session = Depends(get_db)):
    return ReviewsService(db).list_all_comments()


@router.post("/comments/{comment_id}/approve", response_model=CommentOut)
def approve_comment(comment_id: int, db: Session = Depends(get_db)):
    return ReviewsService(db).approve_comment(comment_id)


@router.post("/comments/{comment_id}/reject")
def reject_comment(comment_id: int, db: Session = Depends(get_db)):
    ReviewsService(db).reject_comment(comment_id)
    return {"ok": True}


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, db: Session = Depends(get_db)):
    ReviewsService(db).delete_comment(comment_id)
    return {"ok": True}


# communities


@router.post("/communities", response_model=CommunityOut, status_code=status.HTTP_201_CREATED)
def create_community(payload: CommunityIn, db: Session = Depends(get_db)):
    return CommunitiesService(db).create(payload)


@router.patch("/communities/{community_id}", response_model=CommunityOut)
def update_community(community_id: int, payload: CommunityUpdate, db: Session = Depends(get_db)):
    return CommunitiesService(db).update(community_id, payload)


@router.delete("/communities/{community_id}")
def delete_community(community_id: int, db: Session = Depends(get_db)):
    CommunitiesService(db).delete(community_id)
    return {"ok": True}


# events


@router.get("/events", response_model=List[EventWithBrandOut])
def list_events(db: Session = Depends(get_db)):
    return EventsService(db).list_events()


@router.post("/events", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventIn, db: Session = Depends(get_db)):
    return EventsService(db).create(payload)


@router.patch("/events/{event_id}", response_model=EventOut)
def update_event(event_id: int, payload: EventUpdate, db: Session = Depends(get_db)):
    return EventsService(db).update(event_id, payload)


@router.delete("/events/{event_id}")
def delete_event(event_id: int, db: Session = Depends(get_db)):
    EventsService(db).delete(event_id)
    return {"ok": True}


@router.get("/events/{event_id}/attendees", response_model=List[UserOut])
def event_attendees(event_id: int, db: Session = Depends(get_db)):
    return EventsService(db).attendees(event_id)


# activations and benefits


@router.get("/activations", response_model=List[ActivationDetailOut])
def list_activations(status_filter: Optional[ActivationStatus] = Query(default=None, alias="status"), db: Session = Depends(get_db)):
    return ActivationsService(db).list_activations(status_filter)


@router.post("/activations/{activation_id}/verify", response_model=ActivationOut)
def verify_activation(activation_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ActivationsService(db).verify(activation_id, admin)


@router.post("/activations/{activation_id}/reject", response_model=ActivationOut)
def reject_activation(activation_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ActivationsService(db).reject(activation_id, admin)


@router.delete("/activations/{activation_id}")
def delete_activation(activation_id: int, db: Session = Depends(get_db)):
    ActivationsService(db).delete(activation_id)
    return {"ok": True}


@router.get("/benefits", response_model=List[BenefitWithBrandOut])
def list_benefits(brand_id: Optional[int] = Query(default=None), db: Session = Depends(get_db)):
    return ActivationsService(db).list_benefits(brand_id=brand_id)


@router.post("/benefits", response_model=BenefitOut, status_code=status.HTTP_201_CREATED)
def create_benefit(payload: BenefitIn, db: Session = Depends(get_db)):
    return ActivationsService(db).create_benefit(payload)


@router.patch("/benefits/{benefit_id}", response_model=BenefitOut)
def update_benefit(benefit_id: int, payload: BenefitUpdate, db: Session = Depends(get_db)):
    return ActivationsService(db).update_benefit(benefit_id, payload)


@router.delete("/benefits/{benefit_id}")
def delete_benefit(benefit_id: int, db: Session = Depends(get_db)):
    ActivationsService(db).delete_benefit(benefit_id)
    return {"ok": True}


# site content


@router.get("/settings", response_model=Dict[str, str])
def all_settings(db: Session = Depends(get_db)):
    return SettingsService(db).get_all()


@router.put("/settings/{key}")
def set_setting(key: str, payload: SettingIn, db: Session = Depends(get_db)):
    entry = SettingsService(db).set(key, payload.value)
    return {"key": entry.key, "value": entry.value}


@router.delete("/settings/{key}")
def delete_setting(key: str, db: Session = Depends(get_db)):
    SettingsService(db).delete(key)
    return {"ok": True}


@router.get("/banners", response_model=List[BannerOut])
def list_banners(db: Session = Depends(get_db)):
    return BannersService(db).list_banners()


@router.post("/banners", response_model=BannerOut, status_code=status.HTTP_201_CREATED)
def create_banner(payload: BannerIn, db: Session = Depends(get_db)):
    return BannersService(db).create(payload)


@router.put("/banners/order", response_model=List[BannerOut])
def reorder_banners(payload: BannerOrderIn, db: Session = Depends(get_db)):
    return BannersService(db).reorder(payload.banner_ids)


@router.patch("/banners/{banner_id}", response_model=BannerOut)
def update_banner(banner_id: int, payload: BannerUpdate, db: Session = Depends(get_db)):
    return BannersService(db).update(banner_id, payload)


@router.delete("/banners/{banner_id}")
def delete_banner(banner_id: int, db: Session = Depends(get_db)):
    BannersService(db).delete(banner_id)
    return {"ok": True}
