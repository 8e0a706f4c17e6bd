"""
Pydantic views of booth requests.

These are what RequestStore hands back: plain records detached from the
session, with status already converted to RequestStatus.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from booth_api.models.request import RequestStatus


class RequestRecord(BaseModel):
    id: int
    event_booth_id: int
    applicant_id: int
    status: RequestStatus

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    id: int
    name: str
    date: datetime
    local: str
    description: Optional[str]

    model_config = {"from_attributes": True}


class EventRequestRecord(RequestRecord):
    event: EventSummary


class RequestCreate(BaseModel):
    event_booth_id: int = Field(..., gt=0)


class RequestUpdate(BaseModel):
    event_booth_id: Optional[int] = Field(None, gt=0)
    applicant_id: Optional[int] = Field(None, gt=0)
    status: Optional[RequestStatus] = None

    model_config = {"extra": "forbid"}
