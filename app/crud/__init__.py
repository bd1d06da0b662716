# app/crud/__init__.py

from .crud_brand import brand
from .crud_business import business
from .crud_catalogue import catalogue
from .crud_event import event
from .crud_flash_sale import flash_sale
from .crud_kyc import kyc
