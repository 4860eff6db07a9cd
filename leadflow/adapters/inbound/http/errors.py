"""Mapping of domain errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from leadflow.domain.errors import (
    AlreadyConverted,
    ConsistencyFault,
    Forbidden,
    LeadFlowError,
    NotFound,
    ValidationError,
)

_STATUS_CODES: dict[type[LeadFlowError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyConverted: status.HTTP_409_CONFLICT,
    ConsistencyFault: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(error: LeadFlowError) -> int:
    """
    Get the HTTP status code of a domain error.

    Args:
        error: Domain error

    Returns:
        HTTP status code (500 for unmapped errors)
    """
    for error_type in type(error).__mro__:
        if error_type in _STATUS_CODES:
            return _STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_leadflow_error(request: Request, exc: LeadFlowError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(exc),
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register domain error handlers on an application.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(LeadFlowError, _handle_leadflow_error)
