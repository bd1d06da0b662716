# app/models/event.py
import uuid
from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from app.db.base_class import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    owner_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(String, nullable=False)
    end_date = Column(String, nullable=False)
    time_text = Column(String, nullable=False)
    location = Column(JSON, nullable=False)
    banner_url = Column(String, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    terms_html = Column(Text, nullable=True)
    about_html = Column(Text, nullable=True)
    organiser = Column(JSON, nullable=False)
    sponsors = Column(JSON, nullable=True)
    partners = Column(JSON, nullable=True)
    gallery_urls = Column(JSON, nullable=True)
    tickets = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="draft", index=True)
    version = Column(Integer, nullable=False)
    createdAt = Column(DateTime(timezone=True), nullable=False, index=True)
    updatedAt = Column(DateTime(timezone=True), nullable=False)

    __mapper_args__ = {"version_id_col": version}
