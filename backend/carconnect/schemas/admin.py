from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, List

from .user import UserOut


class AdminStats(BaseModel):
    brands: int
    models: int
    trims: int
    leads: int
    new_leads: int
    events: int
    benefits: int
    activations: int
    pending_activations: int
    users: int


class BrandAdminStats(BaseModel):
    models: int
    trims: int
    leads: int
    new_leads: int
    events: int
    benefits: int
    activations: int
    pending_activations: int


class TrendPoint(BaseModel):
    label: str
    count: int


class AdminTrends(BaseModel):
    leads_per_week: List[TrendPoint]
    users_per_week: List[TrendPoint]
    activations_per_month: List[TrendPoint]


class BrandAdminTrends(BaseModel):
    leads_per_week: List[TrendPoint]
    activations_per_month: List[TrendPoint]


class BrandContactIn(BaseModel):
    email: EmailStr
    department: Optional[str] = None
    is_default: bool = False


class BrandContactUpdate(BaseModel):
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    is_default: Optional[bool] = None


class BrandContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand_id: int
    email: str
    department: Optional[str] = None
    is_default: bool


class BrandAdminIn(BaseModel):
    user_id: int


class BrandAdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand_id: int
    user_id: int
    user: Optional[UserOut] = None


class MakeAdminIn(BaseModel):
    email: str


class MakeBrandAdminIn(BaseModel):
    email: str
    brand_id: int


class SeedResult(BaseModel):
    seeded: bool
    message: str
