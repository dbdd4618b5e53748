"""Master API router."""

from fastapi import APIRouter

from propr.api.routes import reviews

api_router = APIRouter()
api_router.include_router(reviews.router)
