# app/schemas/common.py
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response models serialize with the camelCase keys the console expects."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )


class PatchModel(BaseModel):
    """JSON patch bodies: camelCase keys accepted, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class OkResponse(BaseModel):
    ok: bool = True
    message: Optional[str] = None


class CreatedResponse(BaseModel):
    ok: bool = True
    id: str
    status: str
    message: str


def trimmed_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def raw_text(value) -> str:
    return value if isinstance(value, str) else ""
