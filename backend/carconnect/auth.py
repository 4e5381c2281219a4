from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import get_db
from .errors import CarConnectError, ErrorKind, forbidden, not_found
from .models import BrandAdmin, CarModel, Trim, Event, Benefit, Lead, VehicleActivation, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """Permission set of the caller, resolved once per request."""

    user_id: Optional[int] = None
    role: Optional[str] = None
    brand_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_brand_admin(self) -> bool:
        return self.role == "brand_admin" and bool(self.brand_ids)

    def manages(self, brand_id: Optional[int]) -> bool:
        return brand_id is not None and brand_id in self.brand_ids


ANONYMOUS = Capabilities()


def resolve_capabilities(db: Session, user: User | None) -> Capabilities:
    if user is None:
        return ANONYMOUS
    brand_ids: tuple[int, ...] = ()
    # admins do not inherit brand scope; the consoles are separate
    if user.role == "brand_admin":
        rows = db.execute(
            select(BrandAdmin.brand_id).where(BrandAdmin.user_id == user.id).order_by(BrandAdmin.id.asc())
        ).scalars()
        brand_ids = tuple(rows)
    return Capabilities(user_id=user.id, role=user.role, brand_ids=brand_ids)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    user_id = request.session.get("user_id")
    if not user_id:
        request.state.user = None
        return None
    user = db.get(User, user_id)
    request.state.user = user
    return user


def get_capabilities(
    user: User | None = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Capabilities:
    return resolve_capabilities(db, user)


def require_user(request: Request, user: User | None = Depends(get_current_user)) -> User:
    if not user:
        logger.info("auth_denied reason=anonymous path=%s", request.url.path)
        raise CarConnectError(ErrorKind.UNAUTHENTICATED, "Requiere iniciar sesion")
    return user


def require_admin(
    request: Request,
    user: User = Depends(require_user),
    caps: Capabilities = Depends(get_capabilities),
) -> User:
    if not caps.is_admin:
        logger.warning("auth_denied reason=not_admin user_id=%s role=%s path=%s", user.id, user.role, request.url.path)
        raise forbidden("Requiere rol de administrador")
    return user


@dataclass(frozen=True)
class BrandScope:
    user: User
    caps: Capabilities
    brand_id: int


def require_brand_admin(
    request: Request,
    brand_id: Optional[int] = Query(default=None),
    user: User = Depends(require_user),
    caps: Capabilities = Depends(get_capabilities),
) -> BrandScope:
    if not caps.is_brand_admin:
        logger.warning("auth_denied reason=not_brand_admin user_id=%s role=%s path=%s", user.id, user.role, request.url.path)
        raise forbidden("Requiere rol de administrador de marca")
    if brand_id is None:
        brand_id = caps.brand_ids[0]
    elif not caps.manages(brand_id):
        logger.warning("auth_denied reason=foreign_brand user_id=%s brand_id=%s", user.id, brand_id)
        raise forbidden()
    return BrandScope(user=user, caps=caps, brand_id=brand_id)


def _check_brand(scope: BrandScope, brand_id: Optional[int], what: str, entity_id: int) -> None:
    if brand_id != scope.brand_id:
        logger.warning(
            "ownership_denied entity=%s id=%s owner_brand=%s scope_brand=%s user_id=%s",
            what,
            entity_id,
            brand_id,
            scope.brand_id,
            scope.user.id,
        )
        raise forbidden()


def ensure_model_owned(db: Session, scope: BrandScope, model_id: int) -> CarModel:
    model = db.get(CarModel, model_id)
    if model is None:
        raise not_found("Modelo")
    _check_brand(scope, model.brand_id, "model", model_id)
    return model


def ensure_trim_owned(db: Session, scope: BrandScope, trim_id: int) -> Trim:
    trim = db.get(Trim, trim_id)
    if trim is None:
        raise not_found("Version")
    model = db.get(CarModel, trim.model_id) if trim.model_id is not None else None
    _check_brand(scope, model.brand_id if model else None, "trim", trim_id)
    return trim


def ensure_lead_owned(db: Session, scope: BrandScope, lead_id: int) -> Lead:
    lead = db.get(Lead, lead_id)
    if lead is None:
        raise not_found("Lead")
    trim = db.get(Trim, lead.car_id) if lead.car_id is not None else None
    model = db.get(CarModel, trim.model_id) if trim and trim.model_id is not None else None
    _check_brand(scope, model.brand_id if model else None, "lead", lead_id)
    return lead


def ensure_event_owned(db: Session, scope: BrandScope, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise not_found("Evento")
    _check_brand(scope, event.brand_id, "event", event_id)
    return event


def ensure_benefit_owned(db: Session, scope: BrandScope, benefit_id: int) -> Benefit:
    benefit = db.get(Benefit, benefit_id)
    if benefit is None:
        raise not_found("Beneficio")
    _check_brand(scope, benefit.brand_id, "benefit", benefit_id)
    return benefit


def ensure_activation_owned(db: Session, scope: BrandScope, activation_id: int) -> VehicleActivation:
    activation = db.get(VehicleActivation, activation_id)
    if activation is None:
        raise not_found("Activacion")
    _check_brand(scope, activation.brand_id, "activation", activation_id)
    return activation


class GuardRedirect(Exception):
    """Raised by console entry guards; answered with a redirect to the public site."""

    def __init__(self, notice: str, url: str = "/") -> None:
        super().__init__(notice)
        self.notice = notice
        self.url = url


def page_user(request: Request, caps: Capabilities = Depends(get_capabilities)) -> Capabilities:
    if not caps.is_authenticated:
        logger.info("guard_redirect reason=anonymous path=%s", request.url.path)
        raise GuardRedirect("Inicia sesion para continuar")
    return caps


def page_admin(request: Request, caps: Capabilities = Depends(page_user)) -> Capabilities:
    if not caps.is_admin:
        logger.warning("guard_redirect reason=not_admin user_id=%s path=%s", caps.user_id, request.url.path)
        raise GuardRedirect("No tienes acceso al panel de administracion")
    return caps


def page_brand_admin(request: Request, caps: Capabilities = Depends(page_user)) -> Capabilities:
    if not caps.is_brand_admin:
        logger.warning("guard_redirect reason=not_brand_admin user_id=%s path=%s", caps.user_id, request.url.path)
        raise GuardRedirect("No tienes acceso al panel de marca")
    return caps
