"""
Repository for booth application requests.

CONSISTENCY STRATEGY: Single-Winner Acceptance
==============================================

Problem:
  Several applicants request the same booth. When the event creator accepts
  one of them, every other request for that booth must end up declined.
  Doing this as two independent writes leaves a window where the accepted
  request is visible next to siblings that are still open.

Solution:
  accept_and_decline_others runs both writes in one transaction:

  1. UPDATE requests SET status = 'A' WHERE id = :id RETURNING ...
  2. If nothing was returned the request does not exist -> NotFoundError,
     the transaction rolls back and nothing is written
  3. UPDATE requests SET status = 'D'
     WHERE event_booth_id = :booth AND id != :id
  4. COMMIT

  The transaction runs at REQUEST_TRANSITION_ISOLATION_LEVEL (SERIALIZABLE
  by default). Two creators accepting different requests for the same booth
  at the same moment cannot both commit; the loser gets a serialization
  failure, surfaced as PersistenceError. There is no retry at this layer.

Every operation opens its own session from the injected factory and
commits before returning, so callers always read the latest committed state.
Results are detached pydantic records, never ORM instances.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from booth_api.core.config import get_settings
from booth_api.core.exceptions import NotFoundError, PersistenceError
from booth_api.core.logging import get_logger
from booth_api.core.metrics import record_transition, record_siblings_declined, record_persistence_error
from booth_api.models.event import Event, EventBooth
from booth_api.models.request import Request, RequestStatus
from booth_api.schemas.request import RequestRecord, EventRequestRecord, EventSummary, RequestUpdate

logger = get_logger(__name__)

_CORE_COLUMNS = (
    Request.id,
    Request.event_booth_id,
    Request.applicant_id,
    Request.status,
)

_EVENT_COLUMNS = (
    Event.id.label("event_id"),
    Event.name.label("event_name"),
    Event.date.label("event_date"),
    Event.local.label("event_local"),
    Event.description.label("event_description"),
)


def _to_event_request(row) -> EventRequestRecord:
    return EventRequestRecord(
        id=row.id,
        event_booth_id=row.event_booth_id,
        applicant_id=row.applicant_id,
        status=row.status,
        event=EventSummary(
            id=row.event_id,
            name=row.event_name,
            date=row.event_date,
            local=row.event_local,
            description=row.event_description,
        ),
    )


class RequestStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        isolation_level: Optional[str] = None,
    ):
        self._session_factory = session_factory
        self._isolation_level = isolation_level or get_settings().REQUEST_TRANSITION_ISOLATION_LEVEL

    @asynccontextmanager
    async def _transaction(
        self, operation: str, isolation_level: Optional[str] = None
    ) -> AsyncIterator[AsyncSession]:
        """
        Session with an open transaction that commits on clean exit.
        Driver errors, and status codes the enum cannot decode (LookupError),
        become PersistenceError. Everything else propagates untouched.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if isolation_level:
                        await session.connection(
                            execution_options={"isolation_level": isolation_level}
                        )
                    yield session
        except (SQLAlchemyError, LookupError) as exc:
            record_persistence_error(operation)
            logger.error("persistence_error", operation=operation, error=str(exc))
            raise PersistenceError(operation, str(exc)) from exc

    # Reads

    async def get_all(self) -> list[RequestRecord]:
        async with self._transaction("get_all") as session:
            result = await session.execute(select(*_CORE_COLUMNS))
            return [RequestRecord.model_validate(row) for row in result]

    async def get_by_id(self, request_id: int) -> Optional[RequestRecord]:
        """Return the request, or None when no row matches."""
        async with self._transaction("get_by_id") as session:
            result = await session.execute(
                select(*_CORE_COLUMNS).where(Request.id == request_id)
            )
            row = result.one_or_none()
            return RequestRecord.model_validate(row) if row else None

    async def list_by_booth(self, event_booth_id: int) -> list[RequestRecord]:
        async with self._transaction("list_by_booth") as session:
            result = await session.execute(
                select(*_CORE_COLUMNS).where(Request.event_booth_id == event_booth_id)
            )
            return [RequestRecord.model_validate(row) for row in result]

    def _event_request_query(self):
        return (
            select(*_CORE_COLUMNS, *_EVENT_COLUMNS)
            .select_from(Request)
            .join(EventBooth, Request.event_booth_id == EventBooth.id)
            .join(Event, EventBooth.event_id == Event.id)
        )

    async def list_by_applicant(self, applicant_id: int) -> list[EventRequestRecord]:
        """Requests made by one applicant, each with its event's public fields."""
        async with self._transaction("list_by_applicant") as session:
            result = await session.execute(
                self._event_request_query().where(Request.applicant_id == applicant_id)
            )
            return [_to_event_request(row) for row in result]

    async def list_open_for_events_created_by(self, user_id: int) -> list[EventRequestRecord]:
        """
        The creator's inbox: open requests for booths of events the user created.
        Accepted and declined requests are left out.
        """
        async with self._transaction("list_open_for_events_created_by") as session:
            result = await session.execute(
                self._event_request_query().where(
                    Event.creator_id == user_id,
                    Request.status == RequestStatus.OPEN,
                )
            )
            return [_to_event_request(row) for row in result]

    async def get_event_creator_id(self, request_id: int) -> Optional[int]:
        async with self._transaction("get_event_creator_id") as session:
            result = await session.execute(
                select(Event.creator_id)
                .select_from(Request)
                .join(EventBooth, Request.event_booth_id == EventBooth.id)
                .join(Event, EventBooth.event_id == Event.id)
                .where(Request.id == request_id)
            )
            return result.scalar_one_or_none()

    # Writes

    async def create(
        self,
        event_booth_id: int,
        applicant_id: int,
        status: Union[RequestStatus, str] = RequestStatus.OPEN,
    ) -> RequestRecord:
        status = RequestStatus(status)

        async with self._transaction("create") as session:
            request = Request(
                event_booth_id=event_booth_id,
                applicant_id=applicant_id,
                status=status,
            )
            session.add(request)
            await session.flush()
            record = RequestRecord.model_validate(request)

        logger.info(
            "request_created",
            booth_request_id=record.id,
            event_booth_id=event_booth_id,
            applicant_id=applicant_id,
            status=record.status.name,
        )
        record_transition("created")
        return record

    async def _set_status(
        self, session: AsyncSession, request_id: int, status: RequestStatus
    ) -> RequestRecord:
        result = await session.execute(
            update(Request)
            .where(Request.id == request_id)
            .values(status=status)
            .returning(*_CORE_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Request", request_id)
        return RequestRecord.model_validate(row)

    async def update(self, request_id: int, **fields) -> RequestRecord:
        """
        Partial update of event_booth_id, applicant_id and/or status.

        Unknown field names and unknown status codes raise ValueError
        (pydantic's ValidationError) before anything is written.
        """
        changes = RequestUpdate.model_validate(fields).model_dump(
            exclude_unset=True, exclude_none=True
        )

        async with self._transaction("update") as session:
            if not changes:
                result = await session.execute(
                    select(*_CORE_COLUMNS).where(Request.id == request_id)
                )
                row = result.one_or_none()
                if row is None:
                    raise NotFoundError("Request", request_id)
                return RequestRecord.model_validate(row)

            result = await session.execute(
                update(Request)
                .where(Request.id == request_id)
                .values(**changes)
                .returning(*_CORE_COLUMNS)
                .execution_options(synchronize_session=False)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("Request", request_id)
            record = RequestRecord.model_validate(row)

        logger.info("request_updated", booth_request_id=request_id, fields=sorted(changes))
        record_transition("updated")
        return record

    async def accept_and_decline_others(self, request_id: int) -> RequestRecord:
        """
        Accept one request and decline every sibling for the same booth,
        atomically. Safe to call again on an already accepted request.
        """
        async with self._transaction(
            "accept_and_decline_others", isolation_level=self._isolation_level
        ) as session:
            accepted = await self._set_status(session, request_id, RequestStatus.ACCEPTED)

            result = await session.execute(
                update(Request)
                .where(
                    Request.event_booth_id == accepted.event_booth_id,
                    Request.id != request_id,
                )
                .values(status=RequestStatus.DECLINED)
                .execution_options(synchronize_session=False)
            )
            declined_count = result.rowcount

        logger.info(
            "request_accepted",
            booth_request_id=request_id,
            event_booth_id=accepted.event_booth_id,
            siblings_declined=declined_count,
        )
        record_transition("accepted")
        record_siblings_declined(declined_count)
        return accepted

    async def decline(self, request_id: int) -> RequestRecord:
        """Decline one request. Other requests for the booth are not touched."""
        async with self._transaction("decline") as session:
            record = await self._set_status(session, request_id, RequestStatus.DECLINED)

        logger.info("request_declined", booth_request_id=request_id, event_booth_id=record.event_booth_id)
        record_transition("declined")
        return record

    async def delete(self, request_id: int) -> RequestRecord:
        """Remove the request and return the fields it held."""
        async with self._transaction("delete") as session:
            result = await session.execute(
                delete(Request)
                .where(Request.id == request_id)
                .returning(*_CORE_COLUMNS)
                .execution_options(synchronize_session=False)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("Request", request_id)
            record = RequestRecord.model_validate(row)

        logger.info("request_deleted", booth_request_id=request_id, status=record.status.name)
        record_transition("deleted")
        return record
