# app/models/business.py
from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlalchemy.orm import relationship
from app.db.base_class import Base


class BusinessProfile(Base):
    __tablename__ = "business_profiles"

    # One profile per merchant, keyed by the merchant's subject id.
    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="draft")

    business_name = Column(String, nullable=True)
    business_description = Column(Text, nullable=True)
    business_category = Column(String, nullable=True)
    other_category_name = Column(String, nullable=True)
    vehicle_types = Column(JSON, nullable=True)
    shop_type = Column(String, nullable=True)
    brands = Column(JSON, nullable=True)
    business_type = Column(String, nullable=True)
    email = Column(String, nullable=True)
    website = Column(String, nullable=True)
    business_role = Column(String, nullable=True)
    name = Column(String, nullable=True)
    contact_no = Column(String, nullable=True)
    whatsapp_no = Column(String, nullable=True)
    business_logo = Column(JSON, nullable=True)
    primary_business_location_id = Column(String, nullable=True)
    primary_shop_image = Column(JSON, nullable=True)

    createdAt = Column(DateTime(timezone=True), nullable=False)
    updatedAt = Column(DateTime(timezone=True), nullable=False)

    locations = relationship(
        "BusinessLocation",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="BusinessLocation.position",
    )
