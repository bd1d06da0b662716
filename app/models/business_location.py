# app/models/business_location.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship
from app.db.base_class import Base


class BusinessLocation(Base):
    __tablename__ = "business_locations"

    business_id = Column(
        String,
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Client-generated location id, unique within a business.
    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    address_line1 = Column(String, nullable=False, default="")
    address_line2 = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    state = Column(String, nullable=False, default="")
    pincode = Column(String, nullable=False, default="")
    landmark = Column(String, nullable=False, default="")

    verification_status = Column(String, nullable=True)
    verification_video = Column(JSON, nullable=True)

    createdAt = Column(DateTime(timezone=True), nullable=False)
    updatedAt = Column(DateTime(timezone=True), nullable=False)

    business = relationship("BusinessProfile", back_populates="locations")
