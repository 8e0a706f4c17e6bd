"""
Domain exceptions raised by the request store and the API layer,
plus the handlers that translate them into HTTP responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from booth_api.core.logging import get_logger

logger = get_logger(__name__)


class BoothRequestError(Exception):
    """Base class for all errors raised by this service."""


class NotFoundError(BoothRequestError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class PersistenceError(BoothRequestError):
    """
    The database rejected a read or write.
    The driver exception is always chained as __cause__.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")

    @property
    def is_integrity_violation(self) -> bool:
        return isinstance(self.__cause__, IntegrityError)


class ForbiddenError(BoothRequestError):
    """The acting user may not perform this transition on the request."""


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("not_found", entity=exc.entity, entity_id=exc.entity_id)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    if exc.is_integrity_violation:
        logger.warning("persistence_conflict", operation=exc.operation, error=str(exc.__cause__))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": f"{exc.operation} conflicts with existing data"},
        )

    logger.error("persistence_error", operation=exc.operation, error=str(exc.__cause__))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Database unavailable, please try again"},
    )


async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    logger.warning("forbidden", reason=str(exc))
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )
