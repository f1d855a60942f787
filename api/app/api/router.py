"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import advertisements, catalog, ops, upcoming, views

api_router = APIRouter()
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(upcoming.router, prefix="/upcoming", tags=["upcoming"])
api_router.include_router(views.router, tags=["views"])
api_router.include_router(advertisements.router, prefix="/advertisement-requests", tags=["advertisements"])
api_router.include_router(ops.router, prefix="/ops", tags=["ops"])
