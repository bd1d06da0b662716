# app/crud/crud_event.py
from .base import CRUDBase
from app.models.event import Event
from app.schemas.event import EventCreate, EventPatch


class CRUDEvent(CRUDBase[Event, EventCreate, EventPatch]):
    pass


event = CRUDEvent(Event)
