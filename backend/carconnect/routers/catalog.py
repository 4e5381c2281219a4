from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import not_found
from ..schemas.catalog import BrandOut, CarDetailOut, FuelType, ModelOut, ModelWithBrandOut, Segment, TrimOut
from ..services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/brands", response_model=List[BrandOut])
def list_brands(active_only: bool = Query(default=True), db: Session = Depends(get_db)):
    return CatalogService(db).list_brands(active_only=active_only)


@router.get("/brands/{slug}", response_model=BrandOut)
def get_brand(slug: str, db: Session = Depends(get_db)):
    brand = CatalogService(db).get_brand_by_slug(slug)
    if brand is None:
        raise not_found("Marca")
    return brand


@router.get("/models", response_model=List[ModelOut])
def list_models(brand_id: Optional[int] = Query(default=None), db: Session = Depends(get_db)):
    return CatalogService(db).list_models(brand_id=brand_id)


@router.get("/models/{model_id}", response_model=ModelWithBrandOut)
def get_model(model_id: int, db: Session = Depends(get_db)):
    model = CatalogService(db).get_model_with_brand(model_id)
    if model is None:
        raise not_found("Modelo")
    return model


@router.get("/trims", response_model=List[TrimOut])
def list_trims(
    model_id: Optional[int] = Query(default=None),
    featured: bool = Query(default=False),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_trims(model_id=model_id, featured_only=featured)


@router.get("/cars", response_model=List[CarDetailOut])
def list_cars(
    brand_id: Optional[int] = Query(default=None),
    segment: Optional[Segment] = Query(default=None),
    fuel_type: Optional[FuelType] = Query(default=None),
    price_min: Optional[float] = Query(default=None, ge=0),
    price_max: Optional[float] = Query(default=None, ge=0),
    featured: bool = Query(default=False),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_cars_with_details(
        brand_id=brand_id,
        segment=segment,
        fuel_type=fuel_type,
        price_min=price_min,
        price_max=price_max,
        featured_only=featured,
    )


@router.get("/cars/slug/{slug}", response_model=CarDetailOut)
def get_car_by_slug(slug: str, db: Session = Depends(get_db)):
    service = CatalogService(db)
    trim = service.get_trim_by_slug(slug)
    car = service.get_car(trim.id) if trim else None
    if car is None:
        raise not_found("Auto")
    return car


@router.get("/cars/{trim_id}", response_model=CarDetailOut)
def get_car(trim_id: int, db: Session = Depends(get_db)):
    car = CatalogService(db).get_car(trim_id)
    if car is None:
        raise not_found("Auto")
    return car
