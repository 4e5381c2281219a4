from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..clients.identity_provider import ProviderIdentity
from ..errors import CarConnectError, ErrorKind, not_found
from ..models import Brand, BrandAdmin, User
from ..schemas.user import ProfileUpdate
from .catalog_service import changes

logger = logging.getLogger(__name__)


class IdentityService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_provider_id(self, provider_id: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.provider_id == provider_id)).scalars().first()

    def get_by_email(self, email: str) -> Optional[User]:
        email_norm = email.strip().lower()
        return self.db.execute(select(User).where(User.email == email_norm)).scalars().first()

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise not_found("Usuario")
        return user

    def upsert_from_identity(self, identity: ProviderIdentity) -> Optional[User]:
        """Bridge a provider session onto a User row; ``None`` keeps the caller anonymous."""
        if not identity.provider_id:
            return None
        user = self.get_by_provider_id(identity.provider_id)
        now = datetime.utcnow()
        if user:
            user.email = identity.email
            user.full_name = identity.full_name
            user.avatar_url = identity.avatar_url
            user.last_login_at = now
            self.db.commit()
            return user
        user = User(
            provider_id=identity.provider_id,
            email=identity.email,
            full_name=identity.full_name,
            avatar_url=identity.avatar_url,
            role="user",
            last_login_at=now,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_created id=%s provider_id=%s", user.id, user.provider_id)
        return user

    def update_profile(self, user: User, payload: ProfileUpdate) -> User:
        for key, value in changes(payload).items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self) -> List[User]:
        return list(self.db.execute(select(User).order_by(User.id.asc())).scalars().all())

    def set_role(self, user_id: int, role: str) -> User:
        user = self.get(user_id)
        previous = user.role
        user.role = role
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_role id=%s from=%s to=%s", user.id, previous, role)
        return user

    def make_admin(self, email: str) -> User:
        user = self.get_by_email(email)
        if user is None:
            raise CarConnectError(ErrorKind.NOT_FOUND, f"Usuario con email {email} no encontrado")
        return self.set_role(user.id, "admin")

    def brand_admin_info(self, user: User | None) -> Optional[tuple[User, Brand, BrandAdmin]]:
        if user is None or user.role != "brand_admin":
            return None
        row = self.db.execute(
            select(BrandAdmin).where(BrandAdmin.user_id == user.id).order_by(BrandAdmin.id.asc())
        ).scalars().first()
        if row is None:
            return None
        brand = self.db.get(Brand, row.brand_id)
        if brand is None:
            return None
        return user, brand, row
