# app/schemas/catalogue.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.common import CamelModel, PatchModel, raw_text, trimmed_text


class CatalogueCreate(BaseModel):
    title: str
    description: str
    offer_details: str
    image_urls: List[str]


class CataloguePatch(PatchModel):
    title: Optional[str] = None
    description: Optional[str] = None
    offer_details: Optional[str] = None
    # Version the client last read; a mismatch is refused with 409.
    version: Optional[int] = None
    # Validated against the catalogue vocabulary by the lifecycle guard.
    status: Optional[Any] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _trim(cls, value):
        return trimmed_text(value)

    @field_validator("offer_details", mode="before")
    @classmethod
    def _text(cls, value):
        return raw_text(value)


class CatalogueItem(CamelModel):
    id: str
    owner_id: str
    title: str
    description: str
    offer_details: str
    image_urls: List[str] = []
    status: str
    version: int
    createdAt: datetime
    updatedAt: datetime


class CatalogueListResponse(BaseModel):
    ok: bool = True
    catalogue: List[CatalogueItem]


class CatalogueItemResponse(BaseModel):
    ok: bool = True
    item: CatalogueItem
