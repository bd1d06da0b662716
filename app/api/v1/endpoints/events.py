# app/api/v1/endpoints/events.py
import json
import logging
import math
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from app.api import deps
from app.core.s3 import ObjectStore, get_object_store
from app.crud import crud_event
from app.db.session import get_db
from app.middleware.error_handler import InvalidArgumentError, store_errors
from app.schemas.common import CreatedResponse, OkResponse
from app.schemas.event import EventCreate, EventItemResponse, EventListResponse, EventPatch
from app.schemas.token import TokenPayload
from app.services.lifecycle import (
    EVENT,
    Operation,
    apply_partial_update,
    authorize,
    check_version,
    creation_fields,
)
from app.services.uploads import UploadBatch, check_image, form_file, form_files
from app.utils.validators import clean_str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])

MAX_TAGS = 5
TAGS_MESSAGE = "Please add at least 1 tag (max 5)."

# Fields an event patch may not blank out, with the message used when it tries.
REQUIRED_PATCH_FIELDS = {
    "title": "Event title is required.",
    "description": "Event description is required.",
    "start_date": "Start date and end date are required.",
    "end_date": "Start date and end date are required.",
    "time_text": "Event time is required.",
}


def parse_json_list(value: Any) -> list:
    """A JSON array carried in a form field; anything else reads as empty."""
    if not isinstance(value, str) or not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except ValueError:
        return []
    return parsed if isinstance(parsed, list) else []


def clean_names(values: list) -> List[str]:
    names = [value.strip() for value in values if isinstance(value, str)]
    return [name for name in names if name]


def normalize_tags(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    return clean_names(values)[:MAX_TAGS]


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def normalize_ticket(raw: Any) -> Optional[dict]:
    """
    Validate one ticket from the `tickets` field.

    Title and description are required, price and quantity must be finite and
    non-negative. A positive discount is capped at 100; anything else drops it.
    Returns None for an unusable ticket.
    """
    if not isinstance(raw, dict):
        return None

    title = clean_str(raw.get("title"))
    description = clean_str(raw.get("description"))
    price = to_number(raw.get("price"))
    quantity = to_number(raw.get("quantity"))
    discount = to_number(raw.get("discountPercent"))
    coupon_code = clean_str(raw.get("couponCode"))

    if not title or not description:
        return None
    if price is None or price < 0:
        return None
    if quantity is None or quantity < 0:
        return None

    ticket = {
        "title": title,
        "description": description,
        "price": price,
        "quantity": quantity,
    }
    if discount is not None and discount > 0:
        ticket["discountPercent"] = min(100, discount)
    if coupon_code:
        ticket["couponCode"] = coupon_code
    return ticket


def _pair_logos(names: List[str], logo_urls: List[str]) -> List[dict]:
    pairs = []
    for index, name in enumerate(names):
        entry = {"name": name}
        if index < len(logo_urls):
            entry["logoUrl"] = logo_urls[index]
        pairs.append(entry)
    return pairs


def _event_id(event_id: str) -> str:
    event_id = event_id.strip()
    if not event_id:
        raise InvalidArgumentError("Missing event id.")
    return event_id


@router.get("", response_model=EventListResponse, response_model_exclude_none=True)
def list_events(
    current_user: TokenPayload = Depends(deps.get_current_user),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    with store_errors("/api/v1/events GET", "Failed to load events."):
        events = crud_event.event.get_multi_by_owner(
            db, owner_id=current_user.sub, status=EVENT.parse_status(status_filter)
        )
    return {"ok": True, "events": events}


@router.post("", response_model=CreatedResponse)
def create_event(
    current_user: TokenPayload = Depends(deps.get_current_user),
    form: FormData = Depends(deps.get_form),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """
    Create an event from a multipart form. The event starts as `pending` when
    the form asks for it, otherwise as a draft.
    """
    title = clean_str(form.get("title"))
    description = clean_str(form.get("description"))
    start_date = clean_str(form.get("startDate"))
    end_date = clean_str(form.get("endDate"))
    time_text = clean_str(form.get("timeText"))
    location_address = clean_str(form.get("locationAddress"))
    location_place_id = clean_str(form.get("locationPlaceId"))
    location_lat = to_number(form.get("locationLat"))
    location_lng = to_number(form.get("locationLng"))
    terms_html = form.get("termsHtml")
    about_html = form.get("aboutHtml")
    organiser_name = clean_str(form.get("organiserName"))

    banner = form_file(form, "banner")
    if banner is None:
        raise InvalidArgumentError("Event banner is required.")
    if not title:
        raise InvalidArgumentError("Event title is required.")
    if not description:
        raise InvalidArgumentError("Event description is required.")
    if not start_date or not end_date:
        raise InvalidArgumentError("Start date and end date are required.")
    if not time_text:
        raise InvalidArgumentError("Event time is required.")
    if not location_address:
        raise InvalidArgumentError("Event location is required.")
    if not organiser_name:
        raise InvalidArgumentError("Event organiser name is required.")

    tags = normalize_tags(parse_json_list(form.get("tags")))
    if not tags:
        raise InvalidArgumentError(TAGS_MESSAGE)

    tickets = [
        ticket
        for ticket in (normalize_ticket(raw) for raw in parse_json_list(form.get("tickets")))
        if ticket is not None
    ]
    if not tickets:
        raise InvalidArgumentError("Please add at least 1 ticket.")

    sponsor_names = clean_names(parse_json_list(form.get("sponsorNames")))
    partner_names = clean_names(parse_json_list(form.get("partnerNames")))
    sponsor_logos = form_files(form, "sponsorLogos")
    partner_logos = form_files(form, "partnerLogos")
    gallery = form_files(form, "gallery")
    organiser_logo = form_file(form, "organiserLogo")

    for image in [banner, *sponsor_logos, *partner_logos, *gallery]:
        check_image(image, "Each image must be under 5MB.", "All uploads must be images.")
    if organiser_logo is not None:
        check_image(
            organiser_logo,
            "Organiser logo must be under 5MB.",
            "Organiser logo must be an image.",
        )

    location = {"address": location_address}
    if location_place_id:
        location["placeId"] = location_place_id
    if location_lat is not None:
        location["lat"] = location_lat
    if location_lng is not None:
        location["lng"] = location_lng

    fields = creation_fields(EVENT, current_user.sub, clean_str(form.get("status")) or None)

    with store_errors("/api/v1/events POST", "Failed to create event."):
        with UploadBatch(store, current_user.sub) as batch:
            banner_url = batch.upload(banner, "eventBanners")
            organiser = {"name": organiser_name}
            if organiser_logo is not None:
                organiser["logoUrl"] = batch.upload(organiser_logo, "eventOrganiserLogos")
            sponsor_urls = batch.upload_all(sponsor_logos, "eventSponsorLogos")
            partner_urls = batch.upload_all(partner_logos, "eventPartnerLogos")
            gallery_urls = batch.upload_all(gallery, "eventGallery")

            event = crud_event.event.create(
                db,
                obj_in=EventCreate(
                    title=title,
                    description=description,
                    start_date=start_date,
                    end_date=end_date,
                    time_text=time_text,
                    location=location,
                    banner_url=banner_url,
                    tags=tags,
                    terms_html=terms_html if isinstance(terms_html, str) and terms_html else None,
                    about_html=about_html if isinstance(about_html, str) and about_html else None,
                    organiser=organiser,
                    sponsors=_pair_logos(sponsor_names, sponsor_urls) or None,
                    partners=_pair_logos(partner_names, partner_urls) or None,
                    gallery_urls=gallery_urls or None,
                    tickets=tickets,
                ),
                extra=fields,
            )

    logger.info("Event %s created by %s (status=%s)", event.id, current_user.sub, event.status)
    message = (
        "Event submitted for verification." if event.status == "pending" else "Event draft saved."
    )
    return {"ok": True, "id": event.id, "status": event.status, "message": message}


@router.get("/{event_id}", response_model=EventItemResponse, response_model_exclude_none=True)
def get_event(
    event_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    event_id = _event_id(event_id)
    with store_errors("/api/v1/events/{id} GET", "Failed to load event."):
        event = crud_event.event.get(db, event_id)
    authorize(EVENT, event, current_user.sub, Operation.READ)
    return {"ok": True, "item": event}


@router.patch("/{event_id}", response_model=OkResponse, response_model_exclude_none=True)
def update_event(
    event_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    body: dict = Depends(deps.get_json_body),
    db: Session = Depends(get_db),
):
    event_id = _event_id(event_id)
    try:
        patch = EventPatch.model_validate(body)
    except ValidationError:
        raise InvalidArgumentError("Invalid request body.")

    changes = patch.model_dump(exclude_unset=True)
    expected_version = changes.pop("version", None)
    for field, message in REQUIRED_PATCH_FIELDS.items():
        if field in changes and not changes[field]:
            raise InvalidArgumentError(message)
    if "tags" in changes:
        changes["tags"] = normalize_tags(changes["tags"])
        if not changes["tags"]:
            raise InvalidArgumentError(TAGS_MESSAGE)
    for field in ("terms_html", "about_html"):
        if field in changes and not changes[field]:
            changes[field] = None

    with store_errors("/api/v1/events/{id} PATCH", "Failed to update event."):
        event = crud_event.event.get(db, event_id)
        authorize(EVENT, event, current_user.sub, Operation.UPDATE)
        check_version(EVENT, event, expected_version)
        apply_partial_update(EVENT, event, changes)
        crud_event.event.save(db, db_obj=event)

    return {"ok": True}


@router.delete("/{event_id}", response_model=OkResponse, response_model_exclude_none=True)
def delete_event(
    event_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    event_id = _event_id(event_id)
    with store_errors("/api/v1/events/{id} DELETE", "Failed to delete event."):
        event = crud_event.event.get(db, event_id)
        authorize(EVENT, event, current_user.sub, Operation.DELETE)
        crud_event.event.remove(db, db_obj=event)

    logger.info("Event %s deleted by %s", event_id, current_user.sub)
    return {"ok": True}
