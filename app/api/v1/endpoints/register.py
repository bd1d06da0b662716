# app/api/v1/endpoints/register.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from app.api import deps
from app.core.s3 import ObjectStore, get_object_store
from app.crud import crud_business
from app.db.session import get_db
from app.middleware.error_handler import store_errors
from app.schemas.business import BusinessProfile, BusinessResponse, DraftSavedResponse
from app.schemas.token import TokenPayload
from app.services.registration import save_registration

router = APIRouter(prefix="/register", tags=["Registration"])


@router.get("", response_model=BusinessResponse)
def get_registration(
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    """
    The caller's business profile, or `null` before the first save.
    """
    with store_errors("/api/v1/register GET", "Failed to load business."):
        profile = crud_business.business.get(db, current_user.sub)
        business = BusinessProfile.from_profile(profile) if profile is not None else None
    return {"ok": True, "uid": current_user.sub, "business": business}


@router.post("", response_model=DraftSavedResponse)
def save_registration_draft(
    current_user: TokenPayload = Depends(deps.get_current_user),
    form: FormData = Depends(deps.get_form),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """
    Save one step of the registration wizard as a draft.

    Only the fields present in the form are merged. A profile under review
    (`submitted` or `pending`) cannot be edited.
    """
    with store_errors("/api/v1/register POST", "Failed to save business."):
        profile = save_registration(db, store, current_user.sub, form)
    return {"ok": True, "status": profile.status, "message": "Draft saved."}
