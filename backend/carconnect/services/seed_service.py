from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Brand, CarModel, Community, Event, SiteSetting, Trim
from ..schemas.admin import SeedResult
from ..schemas.catalog import BrandIn, Segment, TrimIn
from ..schemas.content import EventIn

logger = logging.getLogger(__name__)

SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.yml"


class SeedModel(BaseModel):
    brand: str
    name: str
    slug: str
    segment: Segment
    year_start: int
    year_end: Optional[int] = None


class SeedTrim(TrimIn):
    model_config = ConfigDict(protected_namespaces=())

    model: str
    model_id: int = 0


class SeedCommunity(BaseModel):
    name: str
    slug: str
    description: str
    cover_image: Optional[str] = None
    brand: Optional[str] = None


class SeedEvent(EventIn):
    brand: Optional[str] = None


class SeedData(BaseModel):
    brands: List[BrandIn]
    models: List[SeedModel]
    trims: List[SeedTrim]
    communities: List[SeedCommunity] = Field(default_factory=list)
    events: List[SeedEvent] = Field(default_factory=list)
    settings: Dict[str, str] = Field(default_factory=dict)


def load_seed(path: Path = SEED_PATH) -> SeedData:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return SeedData.model_validate(data)


def seed_database(db: Session, path: Path = SEED_PATH) -> SeedResult:
    """Insert demo catalog and content unless any brand already exists."""
    if db.execute(select(Brand.id).limit(1)).first():
        logger.info("seed_skipped reason=already_seeded")
        return SeedResult(seeded=False, message="Database already seeded")

    seed = load_seed(path)

    brands: Dict[str, Brand] = {}
    for item in seed.brands:
        brand = Brand(**item.model_dump())
        db.add(brand)
        brands[item.slug] = brand
    db.flush()

    models: Dict[str, CarModel] = {}
    for item in seed.models:
        model = CarModel(brand_id=brands[item.brand].id, **item.model_dump(exclude={"brand"}))
        db.add(model)
        models[item.slug] = model
    db.flush()

    for item in seed.trims:
        values = item.model_dump(exclude={"model", "model_id"})
        db.add(Trim(model_id=models[item.model].id, **values))

    existing_communities = set(db.execute(select(Community.slug)).scalars().all())
    for item in seed.communities:
        if item.slug in existing_communities:
            logger.info("seed_community_skipped slug=%s", item.slug)
            continue
        brand = brands.get(item.brand) if item.brand else None
        db.add(
            Community(
                brand_id=brand.id if brand else None,
                member_count=0,
                **item.model_dump(exclude={"brand"}),
            )
        )

    existing_events = set(db.execute(select(Event.slug)).scalars().all())
    for item in seed.events:
        if item.slug in existing_events:
            logger.info("seed_event_skipped slug=%s", item.slug)
            continue
        values = item.model_dump(exclude={"brand", "brand_id"})
        brand = brands.get(item.brand) if item.brand else None
        db.add(Event(brand_id=brand.id if brand else None, **values))

    # settings saved before seeding keep their value
    existing_settings = set(db.execute(select(SiteSetting.key)).scalars().all())
    for key, value in seed.settings.items():
        if key not in existing_settings:
            db.add(SiteSetting(key=key, value=value))

    db.commit()
    logger.info(
        "seed_done brands=%s models=%s trims=%s communities=%s events=%s",
        len(seed.brands),
        len(seed.models),
        len(seed.trims),
        len(seed.communities),
        len(seed.events),
    )
    return SeedResult(seeded=True, message="Database seeded successfully!")
