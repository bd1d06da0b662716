# app/api/v1/api.py

from fastapi import APIRouter
from app.api.v1.endpoints import (
    brands,
    catalogue,
    events,
    flash_sale,
    kyc,
    me,
    register,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(me.router)
api_router.include_router(register.router)
api_router.include_router(kyc.router)
api_router.include_router(catalogue.router)
api_router.include_router(events.router)
api_router.include_router(flash_sale.router)
api_router.include_router(brands.router)
