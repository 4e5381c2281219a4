from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import commit_unique, duplicate, not_found
from ..models import Brand, CarModel, Trim
from ..schemas.catalog import (
    BrandIn,
    BrandOut,
    BrandUpdate,
    CarDetailOut,
    ModelIn,
    ModelOut,
    ModelUpdate,
    ModelWithBrandOut,
    TrimIn,
    TrimOut,
    TrimUpdate,
)
from .assembly import Assembler, trims_of_brand

logger = logging.getLogger(__name__)


def changes(payload: BaseModel) -> Dict[str, Any]:
    """Fields the caller actually sent, without explicit nulls."""
    return {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}


def apply_changes(entity: Any, payload: BaseModel) -> Dict[str, Any]:
    values = changes(payload)
    for key, value in values.items():
        setattr(entity, key, value)
    return values


class CatalogService:
    def __init__(self, db: Session) -> None:
        self.db = db

    # brands

    def list_brands(self, active_only: bool = False) -> List[Brand]:
        stmt = select(Brand).order_by(Brand.name.asc())
        if active_only:
            stmt = stmt.where(Brand.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def get_brand(self, brand_id: int) -> Brand:
        brand = self.db.get(Brand, brand_id)
        if brand is None:
            raise not_found("Marca")
        return brand

    def get_brand_by_slug(self, slug: str) -> Optional[Brand]:
        return self.db.execute(select(Brand).where(Brand.slug == slug)).scalars().first()

    def create_brand(self, payload: BrandIn) -> Brand:
        if self.get_brand_by_slug(payload.slug):
            raise duplicate(f"Ya existe una marca con slug {payload.slug}")
        brand = Brand(**payload.model_dump())
        self.db.add(brand)
        commit_unique(self.db, f"Ya existe una marca con slug {payload.slug}")
        self.db.refresh(brand)
        logger.info("brand_created id=%s slug=%s", brand.id, brand.slug)
        return brand

    def update_brand(self, brand_id: int, payload: BrandUpdate) -> Brand:
        brand = self.get_brand(brand_id)
        if payload.slug and payload.slug != brand.slug and self.get_brand_by_slug(payload.slug):
            raise duplicate(f"Ya existe una marca con slug {payload.slug}")
        apply_changes(brand, payload)
        commit_unique(self.db, f"Ya existe una marca con slug {payload.slug}")
        self.db.refresh(brand)
        return brand

    def delete_brand(self, brand_id: int) -> None:
        brand = self.get_brand(brand_id)
        self.db.delete(brand)
        self.db.commit()
        logger.info("brand_deleted id=%s", brand_id)

    # models

    def list_models(self, brand_id: Optional[int] = None) -> List[CarModel]:
        stmt = select(CarModel).order_by(CarModel.name.asc())
        if brand_id is not None:
            stmt = stmt.where(CarModel.brand_id == brand_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_model(self, model_id: int) -> CarModel:
        model = self.db.get(CarModel, model_id)
        if model is None:
            raise not_found("Modelo")
        return model

    def get_model_with_brand(self, model_id: int) -> Optional[ModelWithBrandOut]:
        model = self.db.get(CarModel, model_id)
        if model is None:
            return None
        brand = self.db.get(Brand, model.brand_id) if model.brand_id is not None else None
        return ModelWithBrandOut(
            **ModelOut.model_validate(model).model_dump(),
            brand=BrandOut.model_validate(brand) if brand else None,
        )

    def create_model(self, payload: ModelIn) -> CarModel:
        self.get_brand(payload.brand_id)
        model = CarModel(**payload.model_dump())
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("model_created id=%s brand_id=%s slug=%s", model.id, model.brand_id, model.slug)
        return model

    def update_model(self, model_id: int, payload: ModelUpdate) -> CarModel:
        model = self.get_model(model_id)
        apply_changes(model, payload)
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete_model(self, model_id: int) -> None:
        # trims lose their model and drop out of assembled views
        model = self.get_model(model_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("model_deleted id=%s", model_id)

    # trims

    def list_trims(self, model_id: Optional[int] = None, featured_only: bool = False) -> List[Trim]:
        stmt = select(Trim).order_by(Trim.id.asc())
        if model_id is not None:
            stmt = stmt.where(Trim.model_id == model_id)
        elif featured_only:
            stmt = stmt.where(Trim.is_featured.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def list_trims_by_brand(self, brand_id: int) -> List[Trim]:
        return list(self.db.execute(trims_of_brand(brand_id).order_by(Trim.id.asc())).scalars().all())

    def get_trim(self, trim_id: int) -> Trim:
        trim = self.db.get(Trim, trim_id)
        if trim is None:
            raise not_found("Version")
        return trim

    def get_trim_by_slug(self, slug: str) -> Optional[Trim]:
        return self.db.execute(select(Trim).where(Trim.slug == slug)).scalars().first()

    def create_trim(self, payload: TrimIn) -> Trim:
        self.get_model(payload.model_id)
        trim = Trim(**payload.model_dump())
        self.db.add(trim)
        self.db.commit()
        self.db.refresh(trim)
        logger.info("trim_created id=%s model_id=%s slug=%s", trim.id, trim.model_id, trim.slug)
        return trim

    def update_trim(self, trim_id: int, payload: TrimUpdate) -> Trim:
        trim = self.get_trim(trim_id)
        apply_changes(trim, payload)
        self.db.commit()
        self.db.refresh(trim)
        return trim

    def delete_trim(self, trim_id: int) -> None:
        trim = self.get_trim(trim_id)
        self.db.delete(trim)
        self.db.commit()
        logger.info("trim_deleted id=%s", trim_id)

    # assembled cars

    def list_cars_with_details(
        self,
        *,
        brand_id: Optional[int] = None,
        segment: Optional[str] = None,
        fuel_type: Optional[str] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
        featured_only: bool = False,
    ) -> List[CarDetailOut]:
        """Catalog listing; trims whose model or brand is missing are left out."""
        conditions = []
        if brand_id is not None:
            conditions.append(CarModel.brand_id == brand_id)
        if segment:
            conditions.append(CarModel.segment == segment)
        if fuel_type:
            conditions.append(Trim.fuel_type == fuel_type)
        if price_min is not None:
            conditions.append(Trim.price_usd >= price_min)
        if price_max is not None:
            conditions.append(Trim.price_usd <= price_max)
        if featured_only:
            conditions.append(Trim.is_featured.is_(True))

        stmt = (
            select(Trim, CarModel, Brand)
            .join(CarModel, CarModel.id == Trim.model_id)
            .join(Brand, Brand.id == CarModel.brand_id)
            .where(*conditions)
            .order_by(Trim.id.asc())
        )
        return [
            CarDetailOut(
                **TrimOut.model_validate(trim).model_dump(),
                model=ModelOut.model_validate(model),
                brand=BrandOut.model_validate(brand),
            )
            for trim, model, brand in self.db.execute(stmt).all()
        ]

    def get_car(self, trim_id: int) -> Optional[CarDetailOut]:
        return Assembler(self.db).car(trim_id, require_brand=True)
