from datetime import datetime
from pydantic import EmailStr, Field
from typing import List, Optional
import uuid

from app.schemas.response import CamelModel


class RestaurantRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Name of the restaurant.")
    outlet_count: Optional[int] = Field(None, ge=1, description="Maximum number of outlets.")
    image: Optional[str] = None
    profile_photo_url: Optional[str] = None


class RestaurantUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    outlet_count: Optional[int] = Field(None, ge=1)
    image: Optional[str] = None
    profile_photo_url: Optional[str] = None


class RestaurantOut(CamelModel):
    id: uuid.UUID
    name: str
    owner_id: uuid.UUID
    outlet_count: int
    image: Optional[str] = None
    profile_photo_url: Optional[str] = None
    created_at: datetime


class OutletFields(CamelModel):
    location: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None
    full_address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    image: Optional[str] = None


class OutletCreateRequest(OutletFields):
    restaurant_id: uuid.UUID
    name: str = Field(..., min_length=1)


class OutletUpdateRequest(OutletFields):
    name: Optional[str] = Field(None, min_length=1)


class OutletOut(OutletFields):
    id: uuid.UUID
    name: str
    restaurant_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class ManagerAssignRequest(CamelModel):
    manager_email: EmailStr


class AccountOut(CamelModel):
    """Owner or manager as shown to other users."""
    id: uuid.UUID
    name: str
    email: str


class OutletSummary(CamelModel):
    id: uuid.UUID
    name: str
    location: Optional[str] = None


class RestaurantDetailOut(RestaurantOut):
    """Restaurant with its outlets and, on single-restaurant reads, its owner."""
    outlets: List[OutletSummary] = Field(default_factory=list)
    owner: Optional[AccountOut] = None

    @classmethod
    def from_restaurant(cls, restaurant, include_owner: bool = False) -> "RestaurantDetailOut":
        # Relations must already be prefetched
        return cls(
            **RestaurantOut.model_validate(restaurant).model_dump(),
            outlets=[OutletSummary.model_validate(o) for o in restaurant.outlets],
            owner=AccountOut.model_validate(restaurant.owner) if include_owner else None,
        )
