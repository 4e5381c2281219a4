from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import not_found
from ..models import Banner
from ..schemas.content import BannerIn, BannerUpdate
from .catalog_service import apply_changes


class BannersService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_banners(self, active_only: bool = False) -> List[Banner]:
        stmt = select(Banner).order_by(Banner.position.asc(), Banner.id.asc())
        if active_only:
            stmt = stmt.where(Banner.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def get(self, banner_id: int) -> Banner:
        banner = self.db.get(Banner, banner_id)
        if banner is None:
            raise not_found("Banner")
        return banner

    def create(self, payload: BannerIn) -> Banner:
        banner = Banner(**payload.model_dump())
        self.db.add(banner)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    def update(self, banner_id: int, payload: BannerUpdate) -> Banner:
        banner = self.get(banner_id)
        apply_changes(banner, payload)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    def delete(self, banner_id: int) -> None:
        banner = self.get(banner_id)
        self.db.delete(banner)
        self.db.commit()

    def reorder(self, banner_ids: List[int]) -> List[Banner]:
        existing = {
            b.id: b
            for b in self.db.execute(select(Banner).where(Banner.id.in_(banner_ids))).scalars().all()
        }
        for position, bid in enumerate(banner_ids):
            if bid in existing:
                existing[bid].position = position
        self.db.commit()
        return self.list_banners()
