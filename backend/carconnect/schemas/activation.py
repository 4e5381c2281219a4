from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, Literal

from .catalog import BrandOut, ModelOut
from .user import UserOut

ActivationStatus = Literal["pending", "verified", "rejected"]


class ActivationCreate(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    brand_id: int
    model_id: int
    year: int = Field(ge=1900, le=2100)
    vin: str = Field(min_length=11, max_length=17)


class ActivationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    user_id: Optional[int] = None
    brand_id: Optional[int] = None
    model_id: Optional[int] = None
    year: int
    vin: str
    status: str
    verified_at: Optional[datetime] = None
    verified_by: Optional[int] = None
    created_at: datetime


class ActivationDetailOut(ActivationOut):
    user: Optional[UserOut] = None
    brand: Optional[BrandOut] = None
    model: Optional[ModelOut] = None


class BenefitIn(BaseModel):
    brand_id: int
    title: str = Field(min_length=1)
    description: str
    terms: Optional[str] = None
    valid_from: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    valid_until: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    is_active: bool = True


class BenefitUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    terms: Optional[str] = None
    valid_from: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    valid_until: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    is_active: Optional[bool] = None


class BenefitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand_id: Optional[int] = None
    title: str
    description: str
    terms: Optional[str] = None
    valid_from: str
    valid_until: str
    is_active: bool


class BenefitWithBrandOut(BenefitOut):
    brand: Optional[BrandOut] = None
