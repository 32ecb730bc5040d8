from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from ..core.database import is_connectivity_error
from ..exceptions import CatalogException, BackendUnavailableError
from ..config import settings
import logging

logger = logging.getLogger(__name__)


async def catalog_exception_handler(request: Request, exc: CatalogException):
    """Handle custom catalog exceptions"""
    logger.warning(f"Catalog exception: {exc.status_code} {exc.detail} - {request.method} {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies, forms and parameters as 400"""
    errors = exc.errors()
    logger.warning(f"Validation error: {errors} - {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(errors)}
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle lost or refused database connections as 503, other driver errors as 500"""
    if not is_connectivity_error(exc):
        return await general_exception_handler(request, exc)
    logger.error(f"Database unavailable: {exc} - {request.method} {request.url}")
    unavailable = BackendUnavailableError()
    return JSONResponse(
        status_code=unavailable.status_code,
        content={"detail": unavailable.detail},
        headers=unavailable.headers
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc} - {request.method} {request.url}", exc_info=True)
    content = {"detail": "Internal server error"}
    if settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content
    )
