# app/schemas/kyc.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from app.schemas.common import CamelModel


class KycRecord(CamelModel):
    business_id: str
    script_text: str = ""
    status: str
    selfie_video: Optional[Any] = None
    createdAt: datetime
    updatedAt: datetime


class KycResponse(BaseModel):
    ok: bool = True
    kyc: Optional[KycRecord] = None


class KycSubmittedResponse(BaseModel):
    ok: bool = True
    message: str = "KYC submitted."
    status: str
