from .base import Base
from .user import User, ROLES
from .brand import Brand, BrandContact, BrandAdmin
from .catalog import CarModel, Trim, SEGMENTS, FUEL_TYPES
from .lead import Lead, LEAD_STATUSES
from .activation import VehicleActivation, Benefit, ACTIVATION_STATUSES
from .review import ReviewPost, Comment
from .community import Community, CommunityMember, CommunityPost
from .event import Event, EventRsvp
from .saved_car import SavedCar
from .site_content import SiteSetting, Banner

__all__ = [
    "Base",
    "User",
    "ROLES",
    "Brand",
    "BrandContact",
    "BrandAdmin",
    "CarModel",
    "Trim",
    "SEGMENTS",
    "FUEL_TYPES",
    "Lead",
    "LEAD_STATUSES",
    "VehicleActivation",
    "Benefit",
    "ACTIVATION_STATUSES",
    "ReviewPost",
    "Comment",
    "Community",
    "CommunityMember",
    "CommunityPost",
    "Event",
    "EventRsvp",
    "SavedCar",
    "SiteSetting",
    "Banner",
]
