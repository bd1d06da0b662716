# app/api/v1/endpoints/brands.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import crud_brand
from app.db.session import get_db
from app.middleware.error_handler import InvalidArgumentError, store_errors
from app.schemas.token import TokenPayload
from app.services.registration import VEHICLE_TYPES
from app.utils.validators import clean_str

router = APIRouter(prefix="/brands", tags=["Brands"])

SOURCES = ("brands", "vehicleBrands")


def _vehicle_type(value) -> Optional[str]:
    return value if isinstance(value, str) and value in VEHICLE_TYPES else None


def _brand_view(row) -> dict:
    view = {"id": row.id if clean_str(row.id) else "", "name": clean_str(row.name)}
    logo_url = clean_str(row.logo_url)
    category = clean_str(row.category)
    status = clean_str(row.status)
    if logo_url:
        view["logoUrl"] = logo_url
    if category:
        view["category"] = category
    if status:
        view["status"] = status
    return view


def _vehicle_brand_view(row) -> dict:
    view = {"id": row.id if clean_str(row.id) else "", "name": clean_str(row.name)}
    logo_url = clean_str(row.logo_url)
    vehicle_type = _vehicle_type(row.vehicle_type) or _vehicle_type(row.category)
    if logo_url:
        view["logoUrl"] = logo_url
    if vehicle_type:
        view["vehicleType"] = vehicle_type
    return view


@router.get("")
def list_brands(
    current_user: TokenPayload = Depends(deps.get_current_user),
    source: str = Query(""),
    category: str = Query(""),
    db: Session = Depends(get_db),
):
    """
    Brand lookups for the registration form.

    `source=brands` lists active brands, optionally for one category;
    `source=vehicleBrands` lists active vehicle brands.
    """
    if source not in SOURCES:
        raise InvalidArgumentError("Invalid source.")

    with store_errors("/api/v1/brands GET", "Failed to load brands."):
        if source == "brands":
            rows = crud_brand.brand.get_active(db, category=category or None)
            views = [_brand_view(row) for row in rows]
        else:
            rows = crud_brand.brand.get_active_vehicle_brands(db)
            views = [_vehicle_brand_view(row) for row in rows]

    return {"ok": True, "brands": [view for view in views if view["id"] and view["name"]]}
