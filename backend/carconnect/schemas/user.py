from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Literal

from .catalog import BrandOut

Role = Literal["visitor", "user", "verified_user", "brand_admin", "admin"]


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    provider_id: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    role: str
    created_at: datetime


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    gender: Optional[str] = None


class RoleUpdate(BaseModel):
    role: Role


class SessionIn(BaseModel):
    session_token: str = Field(min_length=1)


class CapabilitiesOut(BaseModel):
    is_authenticated: bool
    is_admin: bool
    is_brand_admin: bool
    brand_ids: List[int] = Field(default_factory=list)


class MeOut(BaseModel):
    user: Optional[UserOut] = None
    capabilities: CapabilitiesOut


class BrandAdminInfoOut(BaseModel):
    user: UserOut
    brand: BrandOut
    brand_admin_id: int
