"""
FastAPI dependencies shared by the route modules.
"""

from functools import lru_cache

from booth_api.db.session import async_session_maker
from booth_api.services.request_store import RequestStore


@lru_cache()
def get_request_store() -> RequestStore:
    return RequestStore(async_session_maker)
