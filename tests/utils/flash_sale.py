from typing import Any, Optional

from sqlalchemy.orm import Session

from app.crud import crud_flash_sale
from app.models.flash_sale import FlashSale


def campaign(
    starts_at: Any,
    ends_at: Any,
    status: str = "active",
    cutoff_at: Any = None,
    business_cutoff_at: Any = None,
    **extra,
) -> dict:
    """A campaign document as stored."""
    doc = {"status": status, "campaign": {"startsAt": starts_at, "endsAt": ends_at}}
    if cutoff_at is not None:
        doc["cutoffAt"] = cutoff_at
    if business_cutoff_at is not None:
        doc["business"] = {"cutoffAt": business_cutoff_at}
    doc.update(extra)
    return doc


def create_flash_sale(
    db: Session,
    starts_at: Any,
    ends_at: Any,
    status: str = "active",
    cutoff_at: Any = None,
    business_cutoff_at: Any = None,
    title: Optional[str] = None,
) -> FlashSale:
    """
    Creates a flash sale campaign row for testing purposes.
    """
    return crud_flash_sale.flash_sale.create(
        db,
        obj_in={
            "status": status,
            "title": title,
            "campaign": {"startsAt": starts_at, "endsAt": ends_at},
            "cutoff_at": cutoff_at,
            "business": {"cutoffAt": business_cutoff_at} if business_cutoff_at is not None else None,
        },
    )
