from booth_api.schemas.request import (
    RequestRecord,
    EventSummary,
    EventRequestRecord,
    RequestCreate,
    RequestUpdate,
)

__all__ = [
    "RequestRecord", "EventSummary", "EventRequestRecord",
    "RequestCreate", "RequestUpdate",
]
