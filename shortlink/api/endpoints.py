"""
FastAPI Endpoints for the Short Link Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Error handling and HTTP responses
- Delegating to service layer

All business logic is in services.

Design Principles:
- Thin endpoints: Only parsing and status-code mapping
- Service layer: All business logic
- Error handling: Proper HTTP status codes, bodies are {"error": "..."}
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from shortlink.api.schemas import (
    AnalyticsResponse,
    ClickEntry,
    ErrorResponse,
    LogRequest,
    ShortenRequest,
    ShortenResponse,
)
from shortlink.core.exceptions import (
    AuditLogError,
    InternalError,
    ShortCodeConflictError,
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
    ValidationError,
)
from shortlink.core.store_manager import get_audit_logger, get_link_service
from shortlink.core.validators import sanitize_short_code
from shortlink.services.audit_logger import AuditLogger, validate_entry
from shortlink.services.background_tasks import forward_log_background
from shortlink.services.link_service import ShortLinkService

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_MESSAGE = "Short URL not found"
EXPIRED_MESSAGE = "Short URL expired"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Handles proxies and load balancers by checking X-Forwarded-For header.

    Args:
        request: FastAPI Request object

    Returns:
        IP address as string
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


@router.post(
    "/shorturls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version with a unique code"
)
async def create_short_url(
    body: ShortenRequest,
    service: ShortLinkService = Depends(get_link_service)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    Returns:
        ShortenResponse with the complete short URL
    """
    try:
        record = service.create_short_link(
            body.original_url,
            custom_code=body.custom_code,
            validity_period=body.validity_period,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ShortCodeConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_MESSAGE
        )

    return ShortenResponse(short_url=service.build_short_url(record.short_code))


@router.get(
    "/shorturls/{short_code}",
    response_model=AnalyticsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get short URL analytics",
    description="Returns click count, unique visitors and click history for a short URL"
)
async def get_url_analytics(
    short_code: str,
    service: ShortLinkService = Depends(get_link_service)
) -> AnalyticsResponse:
    """
    Get analytics for a short URL.

    Raises:
        HTTPException 404: If short code not found
    """
    try:
        view = service.analytics(short_code)
    except ShortCodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )

    return AnalyticsResponse(
        original_url=view.original_url,
        clicks=view.clicks,
        unique_users=view.unique_users,
        click_history=[
            ClickEntry(ip=event.visitor, timestamp=event.timestamp)
            for event in view.click_history
        ],
    )


@router.post(
    "/log",
    responses={400: {"model": ErrorResponse}},
    summary="Forward a frontend log entry",
    description="Accepts a log entry from the frontend and relays it to the audit log API"
)
async def submit_frontend_log(
    body: LogRequest,
    background_tasks: BackgroundTasks,
    audit_logger: AuditLogger = Depends(get_audit_logger)
) -> dict:
    """
    Validate a frontend log entry and forward it after responding.

    Raises:
        HTTPException 400: If level or package is not accepted for the frontend stack
    """
    try:
        validate_entry("frontend", body.level, body.package)
    except AuditLogError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    background_tasks.add_task(
        forward_log_background,
        audit_logger,
        stack="frontend",
        level=body.level,
        package=body.package,
        message=body.message
    )
    return {"status": "logged"}


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
async def redirect_to_url(
    short_code: str,
    request: Request,
    service: ShortLinkService = Depends(get_link_service)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Args:
        short_code: The short code to look up
        request: FastAPI Request object (for visitor IP extraction)

    Returns:
        RedirectResponse (HTTP 302) to original URL

    Raises:
        HTTPException 404: If short code not found
        HTTPException 410: If short code expired
    """
    # Codes with characters we never issue can't be in the store
    sanitized_code = sanitize_short_code(short_code)
    if not sanitized_code:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )

    short_code = sanitized_code

    try:
        original_url = service.redirect(short_code, get_client_ip(request))
    except ShortCodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE
        )
    except ShortCodeExpiredError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=EXPIRED_MESSAGE
        )

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND
    )
