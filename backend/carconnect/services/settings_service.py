from __future__ import annotations

from typing import Dict, Iterable, Optional
from sqlalchemy.orm import Session
from sqlalchemy import delete, select

from ..models import SiteSetting


class SettingsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.execute(select(SiteSetting).where(SiteSetting.key == key)).scalar_one_or_none()
        return row.value if row else None

    def get_many(self, keys: Optional[Iterable[str]] = None) -> Dict[str, str]:
        query = select(SiteSetting)
        if keys:
            query = query.where(SiteSetting.key.in_(list(keys)))
        rows = self.db.execute(query).scalars().all()
        return {row.key: row.value for row in rows}

    def get_all(self) -> Dict[str, str]:
        return self.get_many()

    def set(self, key: str, value: str) -> SiteSetting:
        existing = self.db.execute(select(SiteSetting).where(SiteSetting.key == key)).scalar_one_or_none()
        if existing:
            existing.value = value
            entry = existing
        else:
            entry = SiteSetting(key=key, value=value)
            self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def set_bulk(self, data: Dict[str, str]) -> None:
        for key, value in data.items():
            self.set(key, value)

    def delete(self, key: str) -> None:
        self.db.execute(delete(SiteSetting).where(SiteSetting.key == key))
        self.db.commit()
