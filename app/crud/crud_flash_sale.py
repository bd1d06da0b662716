# app/crud/crud_flash_sale.py
from typing import List

from sqlalchemy.orm import Session

from app.models.flash_sale import FlashSale


class CRUDFlashSale:
    def get_all(self, db: Session) -> List[FlashSale]:
        # The campaign set is small; selection happens in Python.
        return db.query(FlashSale).all()

    def create(self, db: Session, *, obj_in: dict) -> FlashSale:
        db_obj = FlashSale(**obj_in)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


flash_sale = CRUDFlashSale()
