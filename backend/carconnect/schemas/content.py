from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Literal

from .catalog import BrandOut, CarDetailOut
from .user import UserOut


class ReviewIn(BaseModel):
    car_id: Optional[int] = None
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    excerpt: str
    content: str
    cover_image: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    rating: float = Field(ge=0, le=10)


class ReviewUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None
    rating: Optional[float] = Field(default=None, ge=0, le=10)


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: Optional[int] = None
    car_id: Optional[int] = None
    title: str
    slug: str
    excerpt: str
    content: str
    cover_image: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    rating: float
    views: int
    published_at: Optional[datetime] = None
    created_at: datetime


class ReviewDetailOut(ReviewOut):
    author: Optional[UserOut] = None
    car: Optional[CarDetailOut] = None


class CommentIn(BaseModel):
    parent_id: Optional[int] = None
    content: str = Field(min_length=1, max_length=5000)


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    author_id: Optional[int] = None
    parent_id: Optional[int] = None
    content: str
    is_approved: bool
    created_at: datetime


class CommentWithAuthorOut(CommentOut):
    author: Optional[UserOut] = None


class CommentDetailOut(CommentWithAuthorOut):
    post: Optional[ReviewOut] = None


class CommunityIn(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str
    cover_image: Optional[str] = None
    brand_id: Optional[int] = None
    model_id: Optional[int] = None


class CommunityUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None


class CommunityOut(CommunityIn):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    member_count: int


class CommunityPostIn(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    images: Optional[List[str]] = None


class CommunityPostUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    images: Optional[List[str]] = None


class CommunityPostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: int
    author_id: Optional[int] = None
    title: str
    content: str
    images: Optional[List[str]] = None
    upvotes: int
    downvotes: int
    comment_count: int
    created_at: datetime


class CommunityPostDetailOut(CommunityPostOut):
    author: Optional[UserOut] = None
    community: Optional[CommunityOut] = None


class VoteIn(BaseModel):
    type: Literal["up", "down"]


class EventIn(BaseModel):
    brand_id: Optional[int] = None
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str
    cover_image: str
    location: str
    event_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    event_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    is_public: bool = True
    requires_verification: bool = False
    max_attendees: Optional[int] = Field(default=None, ge=1)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    event_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    is_public: Optional[bool] = None
    requires_verification: Optional[bool] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)


class EventOut(EventIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class EventWithBrandOut(EventOut):
    brand: Optional[BrandOut] = None


class BannerIn(BaseModel):
    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    position: int = 0
    is_active: bool = True


class BannerUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    position: Optional[int] = None
    is_active: Optional[bool] = None


class BannerOut(BannerIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class BannerOrderIn(BaseModel):
    banner_ids: List[int]


class SettingIn(BaseModel):
    value: str
