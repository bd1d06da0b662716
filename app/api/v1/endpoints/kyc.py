# app/api/v1/endpoints/kyc.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from app.api import deps
from app.core.s3 import ObjectStore, get_object_store
from app.crud import crud_kyc
from app.db.session import get_db
from app.middleware.error_handler import store_errors
from app.schemas.kyc import KycResponse, KycSubmittedResponse
from app.schemas.token import TokenPayload
from app.services.kyc import SUBMITTED_STATUS, submit_kyc

router = APIRouter(prefix="/kyc", tags=["KYC"])


@router.get("", response_model=KycResponse)
def get_kyc(
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    with store_errors("/api/v1/kyc GET", "Failed to load KYC."):
        record = crud_kyc.kyc.get(db, current_user.sub)
    return {"ok": True, "kyc": record}


@router.post("", response_model=KycSubmittedResponse)
def submit(
    current_user: TokenPayload = Depends(deps.get_current_user),
    form: FormData = Depends(deps.get_form),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """
    Submit KYC videos and move the business into review.
    """
    with store_errors("/api/v1/kyc POST", "Failed to submit KYC."):
        submit_kyc(db, store, current_user.sub, form)
    return {"ok": True, "message": "KYC submitted.", "status": SUBMITTED_STATUS}
