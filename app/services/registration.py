# app/services/registration.py
"""
Business registration: form validation and draft upsert.

A merchant saves the registration wizard step by step. Each save carries only
the fields of the current step, so only fields present in the form are merged
into the stored profile.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.s3 import ObjectStore
from app.crud import crud_business
from app.middleware.error_handler import InvalidArgumentError
from app.models.business import BusinessProfile
from app.services.lifecycle import BUSINESS, Operation, authorize, creation_fields
from app.services.uploads import UploadBatch, check_image, form_file, media_metadata
from app.utils.timestamps import utcnow
from app.utils.validators import clean_str, is_valid_email, is_valid_url

logger = logging.getLogger(__name__)

BUSINESS_CATEGORIES = (
    "Battery Shop",
    "Key Maker Shop",
    "Lubricants Shop",
    "Machanic Shop",
    "Puncture Shop",
    "Spare parts shop",
    "Towing Van",
    "Tyre Shop",
    "Others",
)

# Categories that serve vehicles directly pick vehicle types instead of brands.
VEHICLE_CATEGORIES = frozenset({"Key Maker Shop", "Puncture Shop", "Towing Van", "Others"})

VEHICLE_TYPES = (
    "two-wheeler",
    "four-wheeler",
    "two-wheeler electric",
    "four-wheeler electric",
)

SHOP_TYPES = ("authorised shop", "local shop")

BRAND_IDS = (
    "amaron",
    "exide",
    "bosch",
    "castrol",
    "mobil",
    "shell",
    "bridgestone",
    "michelin",
    "mrf",
    "ceat",
    "goodyear",
    "others",
)

BUSINESS_TYPES = ("online", "offline", "both")
BUSINESS_ROLES = ("owner", "manager", "employee")
MAX_LOCAL_SHOP_BRANDS = 5

# Scalar form fields merged only when non-empty.
SCALAR_FIELDS = {
    "businessName": "business_name",
    "businessDescription": "business_description",
    "businessCategory": "business_category",
    "businessType": "business_type",
    "website": "website",
    "businessRole": "business_role",
    "name": "name",
    "contactNo": "contact_no",
    "whatsappNo": "whatsapp_no",
}

LOCATION_KEYS = {
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "city": "city",
    "state": "state",
    "pincode": "pincode",
    "landmark": "landmark",
}

LOCATION_REQUIRED = (
    ("address_line1", "Please enter address for each location."),
    ("city", "Please enter city for each location."),
    ("state", "Please enter state for each location."),
    ("pincode", "Please enter pincode for each location."),
)


@dataclass
class RegistrationDraft:
    fields: Dict[str, Any] = field(default_factory=dict)
    locations: Optional[List[Dict[str, str]]] = None
    business_logo: Optional[UploadFile] = None
    shop_image: Optional[UploadFile] = None
    shop_image_location_id: str = ""
    reset_to_draft: bool = False


def normalize_locations(value: Any) -> List[Dict[str, str]]:
    """Keep well-formed location objects; entries without an id are dropped."""
    if not isinstance(value, list):
        return []

    locations = []
    seen = set()
    for item in value:
        if not isinstance(item, dict):
            continue
        location_id = clean_str(item.get("id"))
        if not location_id or location_id in seen:
            continue
        seen.add(location_id)
        location = {"id": location_id}
        for key, attr in LOCATION_KEYS.items():
            location[attr] = clean_str(item.get(key))
        locations.append(location)
    return locations


def _texts(form, key: str) -> List[str]:
    values = [clean_str(value) for value in form.getlist(key)]
    return [value for value in values if value]


def _validate_category(category: str, other_name: str, vehicle_types: List[str], shop_type: str, brands: List[str]) -> None:
    if category not in BUSINESS_CATEGORIES:
        raise InvalidArgumentError("Invalid business category.")

    needs_vehicle_types = category in VEHICLE_CATEGORIES

    if category == "Others" and not other_name:
        raise InvalidArgumentError("Please enter category name.")

    if needs_vehicle_types and not vehicle_types:
        raise InvalidArgumentError("Please select at least one vehicle type.")

    for vehicle_type in vehicle_types:
        if vehicle_type not in VEHICLE_TYPES:
            raise InvalidArgumentError("Invalid vehicle type.")

    if needs_vehicle_types:
        return

    if not shop_type:
        raise InvalidArgumentError("Please select your shop type.")
    if shop_type not in SHOP_TYPES:
        raise InvalidArgumentError("Invalid shop type.")

    for brand in brands:
        if brand not in BRAND_IDS:
            raise InvalidArgumentError("Invalid brand selection.")

    if shop_type == "authorised shop" and len(brands) != 1:
        raise InvalidArgumentError("Please select exactly one brand.")

    if shop_type == "local shop":
        if not brands:
            raise InvalidArgumentError("Please select at least one brand.")
        if len(brands) > MAX_LOCAL_SHOP_BRANDS:
            raise InvalidArgumentError("You can select up to 5 brands.")


def _validate_locations(locations: List[Dict[str, str]], primary_id: str) -> None:
    if not locations:
        raise InvalidArgumentError("Please add at least one business location.")
    for location in locations:
        for attr, message in LOCATION_REQUIRED:
            if not location[attr]:
                raise InvalidArgumentError(message)
    if not primary_id:
        raise InvalidArgumentError("Please select a primary location.")
    if not any(location["id"] == primary_id for location in locations):
        raise InvalidArgumentError("Primary location is invalid.")


def parse_registration_form(form) -> RegistrationDraft:
    """
    Validate a registration form and collect the fields it carries.

    Raises InvalidArgumentError on the first failing rule. Nothing is read
    from or written to storage here.
    """
    values = {key: clean_str(form.get(key)) for key in SCALAR_FIELDS}
    email = clean_str(form.get("email"))
    other_category_name = clean_str(form.get("otherCategoryName"))
    vehicle_types = _texts(form, "vehicleTypes")
    shop_type = clean_str(form.get("shopType"))
    brands = _texts(form, "brands")
    primary_location_id = clean_str(form.get("primaryBusinessLocationId"))
    shop_image_location_id = clean_str(form.get("shopImageLocationId"))
    business_logo = form_file(form, "businessLogo")
    shop_image = form_file(form, "shopImage")

    locations: List[Dict[str, str]] = []
    raw_locations = form.get("businessLocations")
    if isinstance(raw_locations, str) and raw_locations.strip():
        try:
            locations = normalize_locations(json.loads(raw_locations))
        except ValueError:
            raise InvalidArgumentError("Invalid business locations.")

    business_type = values["businessType"]
    if business_type and business_type not in BUSINESS_TYPES:
        raise InvalidArgumentError("Business type must be online, offline, or both.")

    if email and not is_valid_email(email):
        raise InvalidArgumentError("Please enter a valid email.")

    if values["website"] and not is_valid_url(values["website"]):
        raise InvalidArgumentError("Please provide a valid website URL.")

    business_role = values["businessRole"]
    if business_role and business_role not in BUSINESS_ROLES:
        raise InvalidArgumentError("Business role must be owner, manager, or employee.")

    if values["businessCategory"]:
        _validate_category(
            values["businessCategory"], other_category_name, vehicle_types, shop_type, brands
        )

    if business_logo is not None:
        check_image(
            business_logo,
            "Business logo must be under 5MB.",
            "Business logo must be an image.",
        )

    has_locations = "businessLocations" in form
    if has_locations:
        _validate_locations(locations, primary_location_id)

    if shop_image is not None:
        check_image(shop_image, "Shop image must be under 5MB.", "Shop image must be an image.")
        if not shop_image_location_id:
            raise InvalidArgumentError("Shop image location is missing.")

    reset_to_draft = False
    if "status" in form:
        requested = clean_str(form.get("status"))
        if requested != "draft":
            raise InvalidArgumentError("Invalid status.")
        reset_to_draft = True

    draft = RegistrationDraft(
        business_logo=business_logo,
        shop_image=shop_image,
        shop_image_location_id=shop_image_location_id,
        reset_to_draft=reset_to_draft,
    )
    for key, attr in SCALAR_FIELDS.items():
        if values[key]:
            draft.fields[attr] = values[key]
    if email:
        draft.fields["email"] = email.lower()
    if "otherCategoryName" in form:
        draft.fields["other_category_name"] = other_category_name
    if "vehicleTypes" in form:
        draft.fields["vehicle_types"] = vehicle_types
    if "shopType" in form:
        draft.fields["shop_type"] = shop_type
    if "brands" in form:
        draft.fields["brands"] = brands
    if has_locations:
        draft.locations = locations
        draft.fields["primary_business_location_id"] = primary_location_id
    return draft


def next_business_status(existing: Optional[BusinessProfile], reset_to_draft: bool) -> str:
    """
    A saved draft keeps the profile's current non-draft status. The explicit
    ``status=draft`` reset moves a rejected profile back to draft so it can be
    resubmitted.
    """
    current = BUSINESS.parse_status(existing.status) if existing is not None else None
    if current == "rejected" and reset_to_draft:
        return BUSINESS.initial
    if current is not None and current != "draft":
        return current
    return BUSINESS.initial


def save_registration(
    db: Session, store: ObjectStore, owner_id: str, form
) -> BusinessProfile:
    draft = parse_registration_form(form)

    existing = crud_business.business.get(db, owner_id)
    if existing is not None:
        authorize(BUSINESS, existing, owner_id, Operation.UPDATE)
    status = next_business_status(existing, draft.reset_to_draft)

    now = utcnow()
    fields = dict(draft.fields)
    fields["status"] = status

    with UploadBatch(store, owner_id) as batch:
        if draft.business_logo is not None:
            url = batch.upload(draft.business_logo, "businessLogos")
            fields["business_logo"] = media_metadata(draft.business_logo, url)
        if draft.shop_image is not None:
            url = batch.upload(draft.shop_image, "shopImages")
            fields["primary_shop_image"] = {
                **media_metadata(draft.shop_image, url),
                "locationId": draft.shop_image_location_id,
            }

        profile = crud_business.business.save_draft(
            db,
            db_obj=existing,
            create_fields=creation_fields(BUSINESS, owner_id, now=now),
            fields=fields,
            locations=draft.locations,
            now=now,
        )

    logger.info("Saved business draft for %s (status=%s)", owner_id, status)
    return profile
