from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..auth import Capabilities, page_admin, page_brand_admin, page_user
from ..config import settings
from ..db import get_db
from ..models import User
from ..schemas.catalog import BrandOut
from ..schemas.content import BannerOut
from ..schemas.user import UserOut
from ..services.admin_service import AdminService
from ..services.banners_service import BannersService
from ..services.catalog_service import CatalogService
from ..services.leads_service import LeadsService
from ..services.settings_service import SettingsService

router = APIRouter(tags=["pages"])


@router.get("/")
def home(request: Request, db: Session = Depends(get_db)):
    catalog = CatalogService(db)
    return {
        "flash": request.session.pop("flash", None),
        "content": SettingsService(db).get_many(["hero_title", "hero_subtitle"]),
        "banners": [BannerOut.model_validate(b) for b in BannersService(db).list_banners(active_only=True)],
        "brands": [BrandOut.model_validate(b) for b in catalog.list_brands(active_only=True)],
        "featured": catalog.list_cars_with_details(featured_only=True),
    }


@router.get("/perfil")
def profile_page(caps: Capabilities = Depends(page_user), db: Session = Depends(get_db)):
    user = db.get(User, caps.user_id)
    return {"user": UserOut.model_validate(user), "role": caps.role}


@router.get("/admin")
def admin_page(caps: Capabilities = Depends(page_admin), db: Session = Depends(get_db)):
    service = AdminService(db)
    return {"stats": service.stats(), "trends": service.trends()}


@router.get("/marca")
def brand_page(
    brand_id: int | None = Query(default=None),
    caps: Capabilities = Depends(page_brand_admin),
    db: Session = Depends(get_db),
):
    active = brand_id if caps.manages(brand_id) else caps.brand_ids[0]
    leads = LeadsService(db)
    return {
        "brand": BrandOut.model_validate(CatalogService(db).get_brand(active)),
        "brand_ids": list(caps.brand_ids),
        "stats": AdminService(db).brand_stats(active),
        "new_leads": leads.count_new_by_brand(active),
        "recent_leads": leads.list_recent_by_brand(active, limit=settings.RECENT_LEADS_LIMIT),
    }
