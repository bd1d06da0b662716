# app/models/__init__.py
# Import all models so Base.metadata knows every table before create_all.

from app.db.base_class import Base
from app.models.business import BusinessProfile
from app.models.business_location import BusinessLocation
from app.models.kyc import KycRecord
from app.models.catalogue import CatalogueItem
from app.models.event import Event
from app.models.flash_sale import FlashSale
from app.models.brand import Brand, VehicleBrand
