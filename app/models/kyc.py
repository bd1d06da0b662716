# app/models/kyc.py
from sqlalchemy import Column, DateTime, JSON, String, Text
from app.db.base_class import Base


class KycRecord(Base):
    __tablename__ = "business_kyc"

    # Keyed by the owning merchant's subject id, not a generated id.
    business_id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")
    script_text = Column(Text, nullable=False, default="")
    selfie_video = Column(JSON, nullable=True)

    createdAt = Column(DateTime(timezone=True), nullable=False)
    updatedAt = Column(DateTime(timezone=True), nullable=False)
