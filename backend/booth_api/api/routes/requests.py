"""
Booth request endpoints.

Authorization lives here, not in RequestStore: only the creator of the
event a booth belongs to may accept or decline its requests, and a request
may be withdrawn by its applicant or by that creator.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from booth_api.api.deps import get_request_store
from booth_api.core.exceptions import ForbiddenError, NotFoundError
from booth_api.core.logging import get_logger
from booth_api.core.security import get_current_user_id
from booth_api.models.request import RequestStatus
from booth_api.schemas.request import RequestCreate, RequestRecord, EventRequestRecord
from booth_api.services.request_store import RequestStore

logger = get_logger(__name__)
router = APIRouter(prefix="/requests", tags=["Requests"])


async def _require_event_creator(store: RequestStore, request_id: int, user_id: int) -> None:
    creator_id = await store.get_event_creator_id(request_id)
    if creator_id is None:
        raise NotFoundError("Request", request_id)
    if creator_id != user_id:
        raise ForbiddenError("Only the event creator can answer this request")


@router.post("/", response_model=RequestRecord, status_code=status.HTTP_201_CREATED)
async def create_request(
    request_data: RequestCreate,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    """Apply for a booth. The request is opened on behalf of the caller."""
    return await store.create(request_data.event_booth_id, user_id, RequestStatus.OPEN)


@router.get("/", response_model=list[RequestRecord])
async def list_requests(
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    return await store.get_all()


@router.get("/mine", response_model=list[EventRequestRecord])
async def list_my_requests(
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    """Requests made by the caller, with the event each booth belongs to."""
    return await store.list_by_applicant(user_id)


@router.get("/inbox", response_model=list[EventRequestRecord])
async def list_inbox(
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    """Open requests waiting for an answer on events the caller created."""
    return await store.list_open_for_events_created_by(user_id)


@router.get("/booth/{event_booth_id}", response_model=list[RequestRecord])
async def list_booth_requests(
    event_booth_id: int,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    return await store.list_by_booth(event_booth_id)


@router.get("/{request_id}", response_model=RequestRecord)
async def get_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    request = await store.get_by_id(request_id)
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Request {request_id} not found",
        )
    return request


@router.post("/{request_id}/accept", response_model=RequestRecord)
async def accept_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    """Accept a request. Every other request for the same booth is declined."""
    await _require_event_creator(store, request_id, user_id)
    return await store.accept_and_decline_others(request_id)


@router.post("/{request_id}/decline", response_model=RequestRecord)
async def decline_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    await _require_event_creator(store, request_id, user_id)
    return await store.decline(request_id)


@router.delete("/{request_id}", response_model=RequestRecord)
async def delete_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    store: RequestStore = Depends(get_request_store),
):
    """Withdraw (applicant) or remove (event creator) a request."""
    request = await store.get_by_id(request_id)
    if request is None:
        raise NotFoundError("Request", request_id)

    if request.applicant_id != user_id:
        await _require_event_creator(store, request_id, user_id)

    deleted = await store.delete(request_id)
    logger.info("request_removed_by", booth_request_id=request_id, actor_id=user_id)
    return deleted
