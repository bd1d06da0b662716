# app/schemas/flash_sale.py
from typing import Any, Dict, Optional

from pydantic import BaseModel


class FlashSaleResponse(BaseModel):
    ok: bool = True
    # The campaign document as stored, with its id merged in.
    item: Optional[Dict[str, Any]] = None
