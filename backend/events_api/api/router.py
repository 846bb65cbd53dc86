"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from events_api.api.routes import events

api_router = APIRouter()
api_router.include_router(events.router)
