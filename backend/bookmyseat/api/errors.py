"""
Maps domain errors to HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bookmyseat.core.logging import get_logger
from bookmyseat.domain.errors import DomainError, ErrorCode

logger = get_logger(__name__)

STATUS_BY_CODE = {
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_BOOKABLE: status.HTTP_409_CONFLICT,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_IN_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.DEPARTURE_ELAPSED: 422,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.info("domain_error", code=exc.code.value, status_code=status_code, detail=exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code.value, "detail": exc.message},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
