# app/schemas/event.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.common import CamelModel, PatchModel, raw_text, trimmed_text


class Ticket(CamelModel):
    title: str
    description: str
    price: float
    quantity: float
    discount_percent: Optional[float] = None
    coupon_code: Optional[str] = None


class EventLocation(CamelModel):
    address: str
    place_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class NamedLogo(CamelModel):
    name: str
    logo_url: Optional[str] = None


class EventCreate(BaseModel):
    title: str
    description: str
    start_date: str
    end_date: str
    time_text: str
    location: dict
    banner_url: str
    tags: List[str]
    terms_html: Optional[str] = None
    about_html: Optional[str] = None
    organiser: dict
    sponsors: Optional[List[dict]] = None
    partners: Optional[List[dict]] = None
    gallery_urls: Optional[List[str]] = None
    tickets: List[dict]


class EventPatch(PatchModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    time_text: Optional[str] = None
    tags: Optional[Any] = None
    terms_html: Optional[str] = None
    about_html: Optional[str] = None
    status: Optional[Any] = None
    version: Optional[int] = None

    @field_validator("title", "description", "start_date", "end_date", "time_text", mode="before")
    @classmethod
    def _trim(cls, value):
        return trimmed_text(value)

    @field_validator("terms_html", "about_html", mode="before")
    @classmethod
    def _text(cls, value):
        return raw_text(value)


class Event(CamelModel):
    id: str
    owner_id: str
    title: str
    description: str
    start_date: str
    end_date: str
    time_text: str
    location: EventLocation
    banner_url: str
    tags: List[str] = []
    terms_html: Optional[str] = None
    about_html: Optional[str] = None
    organiser: NamedLogo
    sponsors: Optional[List[NamedLogo]] = None
    partners: Optional[List[NamedLogo]] = None
    gallery_urls: Optional[List[str]] = None
    tickets: List[Ticket] = []
    status: str
    version: int
    createdAt: datetime
    updatedAt: datetime


class EventListResponse(BaseModel):
    ok: bool = True
    events: List[Event]


class EventItemResponse(BaseModel):
    ok: bool = True
    item: Event
