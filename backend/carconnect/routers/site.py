from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import not_found
from ..schemas.activation import BenefitWithBrandOut
from ..schemas.content import BannerOut
from ..services.activations_service import ActivationsService
from ..services.banners_service import BannersService
from ..services.settings_service import SettingsService

router = APIRouter(prefix="/api", tags=["site"])


@router.get("/benefits", response_model=List[BenefitWithBrandOut])
def list_benefits(brand_id: Optional[int] = Query(default=None), db: Session = Depends(get_db)):
    return ActivationsService(db).list_benefits(brand_id=brand_id, active_only=True)


@router.get("/banners", response_model=List[BannerOut])
def list_banners(db: Session = Depends(get_db)):
    return BannersService(db).list_banners(active_only=True)


@router.get("/settings")
def get_settings(keys: Optional[List[str]] = Query(default=None), db: Session = Depends(get_db)):
    return SettingsService(db).get_many(keys)


@router.get("/settings/{key}")
def get_setting(key: str, db: Session = Depends(get_db)):
    value = SettingsService(db).get(key)
    if value is None:
        raise not_found("Ajuste")
    return {"key": key, "value": value}
