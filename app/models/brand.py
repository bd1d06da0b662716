# app/models/brand.py
from sqlalchemy import Boolean, Column, String
from app.db.base_class import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    status = Column(String, nullable=True, index=True)


class VehicleBrand(Base):
    __tablename__ = "vehicle_brands"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    vehicle_type = Column(String, nullable=True)
    category = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
