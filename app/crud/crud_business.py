# app/crud/crud_business.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.business import BusinessProfile
from app.models.business_location import BusinessLocation

LOCATION_FIELDS = ("address_line1", "address_line2", "city", "state", "pincode", "landmark")


class CRUDBusiness:
    def get(self, db: Session, owner_id: str) -> Optional[BusinessProfile]:
        return db.get(BusinessProfile, owner_id)

    def exists(self, db: Session, owner_id: str) -> bool:
        return (
            db.query(BusinessProfile.id).filter(BusinessProfile.id == owner_id).first()
            is not None
        )

    def save_draft(
        self,
        db: Session,
        *,
        db_obj: Optional[BusinessProfile],
        create_fields: Dict[str, Any],
        fields: Dict[str, Any],
        locations: Optional[List[Dict[str, Any]]],
        now: datetime,
    ) -> BusinessProfile:
        """
        Insert or merge a business profile and, when ``locations`` is given,
        replace its location rows. Everything lands in one commit.
        """
        if db_obj is None:
            db_obj = BusinessProfile(id=create_fields["owner_id"], **create_fields)
            db.add(db_obj)

        for field, value in fields.items():
            setattr(db_obj, field, value)
        db_obj.updatedAt = now

        if locations is not None:
            self._sync_locations(db_obj, locations, now)

        db.commit()
        db.refresh(db_obj)
        return db_obj

    def _sync_locations(
        self, business: BusinessProfile, locations: List[Dict[str, Any]], now: datetime
    ) -> None:
        existing = {location.id: location for location in business.locations}
        synced = []
        for position, data in enumerate(locations):
            row = existing.get(data["id"])
            if row is None:
                row = BusinessLocation(id=data["id"], createdAt=now)
            row.position = position
            for field in LOCATION_FIELDS:
                setattr(row, field, data.get(field, ""))
            row.updatedAt = now
            synced.append(row)
        # Rows missing from the new list are removed by the delete-orphan cascade.
        business.locations = synced


business = CRUDBusiness()
