# app/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str  # subject id of the authenticated merchant
    exp: Optional[int] = None  # absent for the development bypass identity

    model_config = {"from_attributes": True}
