# app/schemas/business.py
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.common import CamelModel

BUSINESS_STATUSES = ("draft", "submitted", "pending", "verified", "rejected")


class BusinessLocation(CamelModel):
    id: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    landmark: str = ""
    verification_status: Optional[str] = None

    @field_validator(
        "id", "address_line1", "address_line2", "city", "state", "pincode", "landmark",
        mode="before",
    )
    @classmethod
    def _text(cls, value):
        return value if isinstance(value, str) else ""


class BusinessProfile(CamelModel):
    """A stored business profile with every field coerced to its expected type."""

    status: str = "draft"
    business_name: str = ""
    business_description: str = ""
    business_category: str = ""
    other_category_name: str = ""
    vehicle_types: List[str] = []
    shop_type: str = ""
    brands: List[str] = []
    business_type: str = ""
    email: str = ""
    website: str = ""
    business_role: str = ""
    name: str = ""
    contact_no: str = ""
    whatsapp_no: str = ""
    business_logo: Optional[Any] = None
    business_locations: List[BusinessLocation] = []
    primary_business_location_id: str = ""
    primary_shop_image: Optional[Any] = None

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value):
        # Anything outside the vocabulary reads as a fresh draft.
        return value if value in BUSINESS_STATUSES else "draft"

    @field_validator(
        "business_name", "business_description", "business_category",
        "other_category_name", "shop_type", "business_type", "email", "website",
        "business_role", "name", "contact_no", "whatsapp_no",
        "primary_business_location_id",
        mode="before",
    )
    @classmethod
    def _text(cls, value):
        return value if isinstance(value, str) else ""

    @field_validator("vehicle_types", "brands", mode="before")
    @classmethod
    def _strings(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @classmethod
    def from_profile(cls, profile) -> "BusinessProfile":
        view = cls.model_validate(profile)
        view.business_locations = [
            BusinessLocation.model_validate(location) for location in profile.locations
        ]
        return view


class BusinessResponse(BaseModel):
    ok: bool = True
    uid: str
    business: Optional[BusinessProfile] = None


class DraftSavedResponse(BaseModel):
    ok: bool = True
    status: str
    message: str = "Draft saved."


class MeResponse(BaseModel):
    ok: bool = True
    uid: str
    hasBusiness: bool
