from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import CarConnectError, ErrorKind, commit_unique, duplicate, not_found
from ..models import Benefit, Brand, CarModel, User, VehicleActivation
from ..schemas.activation import (
    ActivationCreate,
    ActivationDetailOut,
    ActivationOut,
    BenefitIn,
    BenefitOut,
    BenefitUpdate,
    BenefitWithBrandOut,
)
from ..schemas.catalog import BrandOut, ModelOut
from ..schemas.user import UserOut
from .catalog_service import apply_changes

logger = logging.getLogger(__name__)

DUPLICATE_VIN = "Este VIN ya fue registrado"


class ActivationsService:
    """Ownership claims on vehicles and the brand benefits they unlock."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def detail(self, activation: VehicleActivation) -> ActivationDetailOut:
        user = self.db.get(User, activation.user_id) if activation.user_id is not None else None
        brand = self.db.get(Brand, activation.brand_id) if activation.brand_id is not None else None
        model = self.db.get(CarModel, activation.model_id) if activation.model_id is not None else None
        return ActivationDetailOut(
            **ActivationOut.model_validate(activation).model_dump(),
            user=UserOut.model_validate(user) if user else None,
            brand=BrandOut.model_validate(brand) if brand else None,
            model=ModelOut.model_validate(model) if model else None,
        )

    def list_activations(self, status: Optional[str] = None) -> List[ActivationDetailOut]:
        stmt = select(VehicleActivation).order_by(VehicleActivation.id.desc())
        if status:
            stmt = stmt.where(VehicleActivation.status == status)
        return [self.detail(a) for a in self.db.execute(stmt).scalars().all()]

    def list_by_brand(self, brand_id: int, status: Optional[str] = None) -> List[ActivationDetailOut]:
        stmt = (
            select(VehicleActivation)
            .where(VehicleActivation.brand_id == brand_id)
            .order_by(VehicleActivation.id.desc())
        )
        if status:
            stmt = stmt.where(VehicleActivation.status == status)
        return [self.detail(a) for a in self.db.execute(stmt).scalars().all()]

    def list_for_user(self, user: User) -> List[ActivationDetailOut]:
        stmt = (
            select(VehicleActivation)
            .where(VehicleActivation.user_id == user.id)
            .order_by(VehicleActivation.id.desc())
        )
        return [self.detail(a) for a in self.db.execute(stmt).scalars().all()]

    def get(self, activation_id: int) -> VehicleActivation:
        activation = self.db.get(VehicleActivation, activation_id)
        if activation is None:
            raise not_found("Activacion")
        return activation

    def create(self, payload: ActivationCreate, user: User) -> VehicleActivation:
        vin = payload.vin.strip().upper()
        if self.db.execute(select(VehicleActivation.id).where(VehicleActivation.vin == vin)).first():
            raise duplicate(DUPLICATE_VIN)
        if self.db.get(Brand, payload.brand_id) is None:
            raise not_found("Marca")
        model = self.db.get(CarModel, payload.model_id)
        if model is None:
            raise not_found("Modelo")
        if model.brand_id != payload.brand_id:
            raise CarConnectError(ErrorKind.INVALID, "El modelo no pertenece a la marca")
        activation = VehicleActivation(
            user_id=user.id,
            brand_id=payload.brand_id,
            model_id=payload.model_id,
            year=payload.year,
            vin=vin,
            status="pending",
        )
        self.db.add(activation)
        commit_unique(self.db, DUPLICATE_VIN)
        self.db.refresh(activation)
        logger.info("activation_created id=%s user_id=%s brand_id=%s", activation.id, user.id, activation.brand_id)
        return activation

    def _review(self, activation_id: int, status: str, verifier: User) -> tuple[VehicleActivation, str]:
        # any status may follow any other; the last reviewer wins
        activation = self.get(activation_id)
        previous = activation.status
        activation.status = status
        activation.verified_at = datetime.utcnow()
        activation.verified_by = verifier.id
        return activation, previous

    def verify(self, activation_id: int, verifier: User) -> VehicleActivation:
        activation, previous = self._review(activation_id, "verified", verifier)
        owner = self.db.get(User, activation.user_id) if activation.user_id is not None else None
        if owner is not None and owner.role == "user":
            owner.role = "verified_user"
            logger.info("user_role id=%s from=user to=verified_user", owner.id)
        self.db.commit()
        self.db.refresh(activation)
        logger.info("activation_verified id=%s from=%s by=%s", activation.id, previous, verifier.id)
        return activation

    def reject(self, activation_id: int, verifier: User) -> VehicleActivation:
        activation, previous = self._review(activation_id, "rejected", verifier)
        self.db.commit()
        self.db.refresh(activation)
        logger.info("activation_rejected id=%s from=%s by=%s", activation.id, previous, verifier.id)
        return activation

    def delete(self, activation_id: int) -> None:
        activation = self.get(activation_id)
        self.db.delete(activation)
        self.db.commit()
        logger.info("activation_deleted id=%s", activation_id)

    # benefits

    def list_benefits(self, brand_id: Optional[int] = None, active_only: bool = False) -> List[BenefitWithBrandOut]:
        stmt = select(Benefit).order_by(Benefit.id.desc())
        if brand_id is not None:
            stmt = stmt.where(Benefit.brand_id == brand_id)
        if active_only:
            stmt = stmt.where(Benefit.is_active.is_(True))
        return [self.benefit_with_brand(b) for b in self.db.execute(stmt).scalars().all()]

    def benefit_with_brand(self, benefit: Benefit) -> BenefitWithBrandOut:
        brand = self.db.get(Brand, benefit.brand_id) if benefit.brand_id is not None else None
        return BenefitWithBrandOut(
            **BenefitOut.model_validate(benefit).model_dump(),
            brand=BrandOut.model_validate(brand) if brand else None,
        )

    def get_benefit(self, benefit_id: int) -> Benefit:
        benefit = self.db.get(Benefit, benefit_id)
        if benefit is None:
            raise not_found("Beneficio")
        return benefit

    def create_benefit(self, payload: BenefitIn) -> Benefit:
        if self.db.get(Brand, payload.brand_id) is None:
            raise not_found("Marca")
        benefit = Benefit(**payload.model_dump())
        self.db.add(benefit)
        self.db.commit()
        self.db.refresh(benefit)
        logger.info("benefit_created id=%s brand_id=%s", benefit.id, benefit.brand_id)
        return benefit

    def update_benefit(self, benefit_id: int, payload: BenefitUpdate) -> Benefit:
        benefit = self.get_benefit(benefit_id)
        apply_changes(benefit, payload)
        self.db.commit()
        self.db.refresh(benefit)
        return benefit

    def delete_benefit(self, benefit_id: int) -> None:
        benefit = self.get_benefit(benefit_id)
        self.db.delete(benefit)
        self.db.commit()
        logger.info("benefit_deleted id=%s", benefit_id)
