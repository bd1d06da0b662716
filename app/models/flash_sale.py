# app/models/flash_sale.py
import uuid
from sqlalchemy import Column, DateTime, JSON, String
from app.db.base_class import Base


class FlashSale(Base):
    """
    A flash-sale campaign. Instants inside the JSON columns are kept exactly as
    they were written (ISO strings, epoch milliseconds, {seconds, nanoseconds})
    and only normalized when campaigns are evaluated.
    """

    __tablename__ = "flash_sales"

    id = Column(
        String, primary_key=True, default=lambda: f"fls_{uuid.uuid4().hex[:12]}"
    )
    title = Column(String, nullable=True)
    status = Column(String, nullable=True)
    campaign = Column(JSON, nullable=True)
    sale = Column(JSON, nullable=True)
    business = Column(JSON, nullable=True)
    cutoff_at = Column(JSON, nullable=True)
    banner_image_url = Column(String, nullable=True)
    createdAt = Column(DateTime(timezone=True), nullable=True)

    def to_document(self) -> dict:
        """Flatten the row into the campaign document shape callers consume."""
        doc = {
            "id": self.id,
            "status": self.status,
            "campaign": self.campaign,
            "sale": self.sale,
            "business": self.business,
            "cutoffAt": self.cutoff_at,
            "title": self.title,
            "bannerImageUrl": self.banner_image_url,
        }
        return {key: value for key, value in doc.items() if value is not None}
