"""Main API router."""

from fastapi import APIRouter

from src.api.content import router as content_router

api_router = APIRouter(prefix="/api")

api_router.include_router(content_router, prefix="/content", tags=["content"])
