# app/api/v1/endpoints/me.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import crud_business
from app.db.session import get_db
from app.middleware.error_handler import store_errors
from app.schemas.business import MeResponse
from app.schemas.token import TokenPayload

router = APIRouter(tags=["Session"])


@router.get("/me", response_model=MeResponse)
def read_me(
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    """Who the token belongs to and whether they have started registration."""
    with store_errors("/api/v1/me GET", "Failed to load session."):
        has_business = crud_business.business.exists(db, current_user.sub)
    return {"ok": True, "uid": current_user.sub, "hasBusiness": has_business}
