"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from eventgroups.api.routes import events, groups, members
from eventgroups.core.config import get_settings

api_router = APIRouter(prefix=get_settings().API_PREFIX)
api_router.include_router(events.router)
api_router.include_router(groups.router)
api_router.include_router(members.router)
