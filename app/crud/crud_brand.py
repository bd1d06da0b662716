# app/crud/crud_brand.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.brand import Brand, VehicleBrand


class CRUDBrand:
    def get_active(self, db: Session, *, category: Optional[str] = None) -> List[Brand]:
        query = db.query(Brand).filter(Brand.status == "ACTIVE")
        if category:
            query = query.filter(Brand.category == category)
        return query.all()

    def get_active_vehicle_brands(self, db: Session) -> List[VehicleBrand]:
        return db.query(VehicleBrand).filter(VehicleBrand.is_active.is_(True)).all()


brand = CRUDBrand()
