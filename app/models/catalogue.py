# app/models/catalogue.py
import uuid
from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from app.db.base_class import Base


class CatalogueItem(Base):
    __tablename__ = "catalogue_items"

    id = Column(
        String, primary_key=True, default=lambda: f"cat_{uuid.uuid4().hex[:12]}"
    )
    owner_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    offer_details = Column(Text, nullable=False)
    image_urls = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="draft", index=True)
    version = Column(Integer, nullable=False)
    createdAt = Column(DateTime(timezone=True), nullable=False, index=True)
    updatedAt = Column(DateTime(timezone=True), nullable=False)

    # Every UPDATE/DELETE is guarded by the version read with the row.
    __mapper_args__ = {"version_id_col": version}
