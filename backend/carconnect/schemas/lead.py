from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import Optional, Dict, Literal

from .catalog import CarDetailOut

LeadStatus = Literal["new", "contacted", "qualified", "converted", "lost"]


class LeadCreate(BaseModel):
    """Public lead form. Any submitted ``status`` is ignored."""

    car_id: int
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=6, max_length=50)
    department: str = Field(min_length=1, max_length=100)
    city: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=2000)


class LeadStatusUpdate(BaseModel):
    status: LeadStatus


class LeadOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    car_id: Optional[int] = None
    user_id: Optional[int] = None
    name: str
    email: str
    phone: str
    department: str
    city: Optional[str] = None
    message: Optional[str] = None
    status: str
    created_at: datetime


class LeadWithCarOut(LeadOut):
    car: Optional[CarDetailOut] = None


class LeadStats(BaseModel):
    total: int
    by_status: Dict[str, int]


class CountOut(BaseModel):
    count: int
