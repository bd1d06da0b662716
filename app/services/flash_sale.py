# app/services/flash_sale.py
"""
Flash sale campaign selection and the catalogue cutoff rule.

Campaign applicability is classified purely at read time by comparing the
current instant with the instants stored on each campaign; nothing here
writes to the database.
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from app.crud import crud_flash_sale
from app.core.config import settings
from app.middleware.error_handler import ForbiddenError, InternalError
from app.utils.timestamps import now_ms, to_epoch_ms

logger = logging.getLogger(__name__)

CUTOFF_PASSED_MESSAGE = "Catalogue cannot be added after the flash sale cutoff."


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _is_active(campaign: dict) -> bool:
    status = campaign.get("status")
    return isinstance(status, str) and status.strip().lower() == "active"


def campaign_window(campaign: dict):
    """(startsAt, endsAt) in epoch ms, or None when either bound is unusable."""
    window = _as_dict(campaign.get("campaign"))
    starts_at = to_epoch_ms(window.get("startsAt"))
    ends_at = to_epoch_ms(window.get("endsAt"))
    if starts_at is None or ends_at is None:
        return None
    return starts_at, ends_at


def select_active(campaigns: Iterable[dict], now: int) -> Optional[dict]:
    """
    Pick the campaign that applies at ``now`` (epoch ms).

    Candidates must be tagged active and have a well-formed window containing
    ``now`` (both ends inclusive). When windows overlap, the campaign that
    started most recently wins.
    """
    candidates = []
    for campaign in campaigns:
        if not _is_active(campaign):
            continue
        window = campaign_window(campaign)
        if window is None:
            continue
        starts_at, ends_at = window
        if starts_at <= now <= ends_at:
            candidates.append((starts_at, campaign))

    if not candidates:
        return None
    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    return candidates[0][1]


def cutoff_at_ms(campaign: dict) -> Optional[int]:
    business_cutoff = to_epoch_ms(_as_dict(campaign.get("business")).get("cutoffAt"))
    if business_cutoff is not None:
        return business_cutoff
    return to_epoch_ms(campaign.get("cutoffAt"))


def check_cutoff(cutoff: Optional[int], now: int) -> None:
    """Refuse once ``now`` is strictly after the cutoff instant, when there is one."""
    if cutoff is not None and now > cutoff:
        raise ForbiddenError(CUTOFF_PASSED_MESSAGE)


def current_campaign(db: Session, now: Optional[int] = None) -> Optional[dict]:
    documents = [row.to_document() for row in crud_flash_sale.flash_sale.get_all(db)]
    return select_active(documents, now_ms() if now is None else now)


def enforce_catalogue_cutoff(
    db: Session,
    now: Optional[int] = None,
    fail_open: Optional[bool] = None,
) -> None:
    """
    Refuse new catalogue items once the active campaign's cutoff has passed.

    When the rule itself cannot be evaluated the outcome depends on
    ``FLASH_SALE_CUTOFF_FAIL_OPEN``: creation proceeds as if no campaign were
    active, or the request fails with an internal error.
    """
    now = now_ms() if now is None else now
    if fail_open is None:
        fail_open = settings.FLASH_SALE_CUTOFF_FAIL_OPEN

    try:
        active = current_campaign(db, now)
        cutoff = cutoff_at_ms(active) if active is not None else None
    except Exception:
        if not fail_open:
            logger.exception("/api/v1/catalogue POST flash sale cutoff check failed")
            raise InternalError()
        logger.exception(
            "/api/v1/catalogue POST flash sale cutoff check failed; continuing"
        )
        db.rollback()
        return

    check_cutoff(cutoff, now)
