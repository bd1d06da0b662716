# app/crud/crud_kyc.py
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.models.business import BusinessProfile
from app.models.kyc import KycRecord


class CRUDKyc:
    def get(self, db: Session, owner_id: str) -> Optional[KycRecord]:
        return db.get(KycRecord, owner_id)

    def submit(
        self,
        db: Session,
        *,
        business: BusinessProfile,
        kyc_status: str,
        location_status: str,
        business_status: str,
        script_text: str,
        selfie_video: dict,
        location_videos: Dict[str, dict],
        now: datetime,
    ) -> KycRecord:
        """
        Write the KYC record, every location's verification state and the
        business status flip as a single atomic commit.
        """
        record = self.get(db, business.id)
        if record is None:
            record = KycRecord(
                business_id=business.id, owner_id=business.owner_id, createdAt=now
            )
            db.add(record)

        record.script_text = script_text
        record.status = kyc_status
        record.selfie_video = selfie_video
        record.updatedAt = now

        for location in business.locations:
            location.verification_status = location_status
            video = location_videos.get(location.id)
            if video is not None:
                location.verification_video = video
            location.updatedAt = now

        business.status = business_status
        business.updatedAt = now

        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(record)
        return record


kyc = CRUDKyc()
