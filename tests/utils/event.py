from sqlalchemy.orm import Session

from app.crud import crud_event
from app.models.event import Event
from app.schemas.event import EventCreate
from app.services.lifecycle import EVENT, creation_fields


def create_event(db: Session, owner_id: str, status: str = "draft") -> Event:
    """
    Creates an event for testing purposes.
    """
    fields = creation_fields(EVENT, owner_id)
    fields["status"] = status
    event_in = EventCreate(
        title="Monsoon service camp",
        description="Free check-up for two-wheelers",
        start_date="2026-07-01",
        end_date="2026-07-03",
        time_text="10 AM - 6 PM",
        location={"address": "12 MG Road, Pune"},
        banner_url="https://cdn.test/eventBanners/banner.png",
        tags=["service", "monsoon"],
        organiser={"name": "Pune Motors"},
        tickets=[{"title": "Entry", "description": "General entry", "price": 0, "quantity": 100}],
    )
    return crud_event.event.create(db, obj_in=event_in, extra=fields)
