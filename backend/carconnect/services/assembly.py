"""Joins leads, reviews, saved cars and activations to their trim/model/brand chain.

A hop that does not resolve never raises: it becomes ``None`` in the
assembled shape so list views survive dangling references.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ..models import Brand, CarModel, Lead, Trim
from ..schemas.catalog import BrandOut, CarDetailOut, ModelOut, TrimOut
from ..schemas.lead import LeadOut, LeadWithCarOut


class Assembler:
    def __init__(self, db: Session) -> None:
        self.db = db

    def car(self, trim_id: Optional[int], require_brand: bool = False) -> Optional[CarDetailOut]:
        if trim_id is None:
            return None
        trim = self.db.get(Trim, trim_id)
        if trim is None:
            return None
        return self.car_from_trim(trim, require_brand=require_brand)

    def car_from_trim(self, trim: Trim, require_brand: bool = False) -> Optional[CarDetailOut]:
        model = self.db.get(CarModel, trim.model_id) if trim.model_id is not None else None
        if model is None:
            return None
        brand = self.db.get(Brand, model.brand_id) if model.brand_id is not None else None
        if brand is None and require_brand:
            return None
        return CarDetailOut(
            **TrimOut.model_validate(trim).model_dump(),
            model=ModelOut.model_validate(model),
            brand=BrandOut.model_validate(brand) if brand else None,
        )

    def lead(self, lead: Lead) -> LeadWithCarOut:
        return LeadWithCarOut(**LeadOut.model_validate(lead).model_dump(), car=self.car(lead.car_id))

    def leads(self, leads: Iterable[Lead]) -> List[LeadWithCarOut]:
        return [self.lead(lead) for lead in leads]


def leads_of_brand(brand_id: int) -> Select:
    """Leads whose trim -> model chain resolves to ``brand_id``, newest first."""
    return (
        select(Lead)
        .join(Trim, Trim.id == Lead.car_id)
        .join(CarModel, CarModel.id == Trim.model_id)
        .where(CarModel.brand_id == brand_id)
        .order_by(Lead.id.desc())
    )


def trims_of_brand(brand_id: int) -> Select:
    return (
        select(Trim)
        .join(CarModel, CarModel.id == Trim.model_id)
        .where(CarModel.brand_id == brand_id)
    )
