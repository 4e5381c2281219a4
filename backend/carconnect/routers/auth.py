import logging

import requests
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..auth import Capabilities, get_capabilities, get_current_user
from ..clients.identity_provider import IdentityProviderClient, IdentityProviderError, get_identity_provider
from ..db import get_db
from ..errors import CarConnectError, ErrorKind
from ..models import User
from ..schemas.user import CapabilitiesOut, MeOut, SessionIn, UserOut
from ..services.identity_service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def capabilities_out(caps: Capabilities) -> CapabilitiesOut:
    return CapabilitiesOut(
        is_authenticated=caps.is_authenticated,
        is_admin=caps.is_admin,
        is_brand_admin=caps.is_brand_admin,
        brand_ids=list(caps.brand_ids),
    )


@router.post("/session", response_model=UserOut)
def open_session(
    payload: SessionIn,
    request: Request,
    db: Session = Depends(get_db),
    provider: IdentityProviderClient = Depends(get_identity_provider),
):
    try:
        identity = provider.fetch_identity(payload.session_token)
    except IdentityProviderError as exc:
        logger.info("session_rejected reason=%s", exc)
        raise CarConnectError(ErrorKind.UNAUTHENTICATED, "Sesion invalida") from exc
    except requests.RequestException as exc:
        logger.error("identity_provider_failed error=%s", exc)
        raise CarConnectError(ErrorKind.UNAUTHENTICATED, "No se pudo validar la sesion") from exc
    user = IdentityService(db).upsert_from_identity(identity)
    if user is None:
        request.session.clear()
        raise CarConnectError(ErrorKind.UNAUTHENTICATED, "Sesion sin usuario")
    request.session["user_id"] = user.id
    logger.info("session_opened user_id=%s", user.id)
    return user


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/me", response_model=MeOut)
def me(
    user: User | None = Depends(get_current_user),
    caps: Capabilities = Depends(get_capabilities),
):
    return MeOut(
        user=UserOut.model_validate(user) if user else None,
        capabilities=capabilities_out(caps),
    )
