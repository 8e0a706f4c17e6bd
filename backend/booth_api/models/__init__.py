from booth_api.models.user import User
from booth_api.models.event import Event, EventBooth
from booth_api.models.request import Request, RequestStatus

__all__ = ["User", "Event", "EventBooth", "Request", "RequestStatus"]
