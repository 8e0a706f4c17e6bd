"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from booth_api.api.routes import requests

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(requests.router)
