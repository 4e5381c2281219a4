from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Literal

Segment = Literal["sedan", "hatchback", "suv", "crossover", "pickup", "coupe", "convertible", "wagon", "van", "sports"]
FuelType = Literal["gasolina", "diesel", "hibrido", "electrico", "gnc"]


class BrandIn(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    logo_url: Optional[str] = None
    country: str
    is_active: bool = True
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    social_facebook: Optional[str] = None
    social_instagram: Optional[str] = None
    social_twitter: Optional[str] = None


class BrandUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    logo_url: Optional[str] = None
    country: Optional[str] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    social_facebook: Optional[str] = None
    social_instagram: Optional[str] = None
    social_twitter: Optional[str] = None


class BrandOut(BrandIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class ModelIn(BaseModel):
    brand_id: int
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    segment: Segment
    year_start: int
    year_end: Optional[int] = None


class ModelUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    segment: Optional[Segment] = None
    year_start: Optional[int] = None
    year_end: Optional[int] = None


class ModelOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand_id: Optional[int] = None
    name: str
    slug: str
    segment: str
    year_start: int
    year_end: Optional[int] = None


class ModelWithBrandOut(ModelOut):
    brand: Optional[BrandOut] = None


class TrimIn(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: int
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    year: int
    price_usd: float = Field(ge=0)
    engine: str
    transmission: str
    fuel_type: FuelType
    horsepower: int
    torque: Optional[int] = None
    acceleration_0_100: Optional[float] = None
    top_speed: Optional[int] = None
    fuel_consumption: Optional[float] = None
    doors: int
    seats: int
    trunk_capacity: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    is_featured: bool = False


class TrimUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    year: Optional[int] = None
    price_usd: Optional[float] = Field(default=None, ge=0)
    engine: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[FuelType] = None
    horsepower: Optional[int] = None
    torque: Optional[int] = None
    acceleration_0_100: Optional[float] = None
    top_speed: Optional[int] = None
    fuel_consumption: Optional[float] = None
    doors: Optional[int] = None
    seats: Optional[int] = None
    trunk_capacity: Optional[int] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_featured: Optional[bool] = None


class TrimOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    model_id: Optional[int] = None
    name: str
    slug: str
    year: int
    price_usd: float
    engine: str
    transmission: str
    fuel_type: str
    horsepower: int
    torque: Optional[int] = None
    acceleration_0_100: Optional[float] = None
    top_speed: Optional[int] = None
    fuel_consumption: Optional[float] = None
    doors: int
    seats: int
    trunk_capacity: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    is_featured: bool


class CarDetailOut(TrimOut):
    model: ModelOut
    brand: Optional[BrandOut] = None


class SavedCarOut(CarDetailOut):
    saved_id: int
