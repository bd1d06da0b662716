# app/api/v1/endpoints/flash_sale.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.middleware.error_handler import store_errors
from app.schemas.flash_sale import FlashSaleResponse
from app.schemas.token import TokenPayload
from app.services.flash_sale import current_campaign

router = APIRouter(prefix="/flash-sale", tags=["Flash Sale"])


@router.get("", response_model=FlashSaleResponse)
def get_current_flash_sale(
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    """
    The flash sale campaign running right now, or `null`.
    """
    with store_errors("/api/v1/flash-sale GET", "Failed to load flash sale."):
        item = current_campaign(db)
    return {"ok": True, "item": item}
