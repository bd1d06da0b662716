# app/crud/crud_catalogue.py
from .base import CRUDBase
from app.models.catalogue import CatalogueItem
from app.schemas.catalogue import CatalogueCreate, CataloguePatch


class CRUDCatalogue(CRUDBase[CatalogueItem, CatalogueCreate, CataloguePatch]):
    pass


catalogue = CRUDCatalogue(CatalogueItem)
