"""API router: include all route modules."""

from fastapi import APIRouter

from catalog.api.v1 import serials

api_router = APIRouter()

api_router.include_router(serials.router)
