"""Events search endpoint."""

import asyncio
import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_executor, require_responsible
from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, EventResponse, EventsResponse
from core.config import MAX_EVENTS_PER_PAGE, MAX_QUERY_YEAR, MIN_QUERY_YEAR
from core.database import DocumentExecutor
from models.results import QueryErrorKind, QueryResult
from models.roles import CallerContext
from services.events import search_events

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _invalid_parameter(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "success": False,
            "message": message,
            "errorType": ErrorCodes.INVALID_PARAMETERS,
        },
    )


def parse_int_param(
    raw: str | None,
    message: str,
    minimum: int | None = None,
    maximum: int | None = None,
    default: int | None = None,
) -> int | None:
    """
    Parse an optional integer query parameter.

    Missing or empty values give `default`. Integral decimals such as "10.0"
    are accepted. Non-numeric, fractional or out-of-range values raise a 400
    carrying `message`.
    """
    if raw is None or raw.strip() == "":
        return default
    try:
        number = float(raw.strip())
    except ValueError:
        raise _invalid_parameter(message)
    if not number.is_integer():
        raise _invalid_parameter(message)
    value = int(number)
    if minimum is not None and value < minimum:
        raise _invalid_parameter(message)
    if maximum is not None and value > maximum:
        raise _invalid_parameter(message)
    return value


def _period_label(month: int | None, year: int | None) -> str:
    label = f"month {month}"
    if year:
        label += f" of {year}"
    return label


def _query_failure(result: QueryResult) -> HTTPException:
    if result.error_kind == QueryErrorKind.PERMISSION_DENIED:
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "success": False,
                "message": str(result.error),
                "errorType": ErrorCodes.INSUFFICIENT_PERMISSIONS,
            },
        )
    if result.error_kind == QueryErrorKind.INVALID_PARAMETERS:
        return _invalid_parameter(str(result.error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "success": False,
            "message": "Internal server error while searching events",
            "errorType": ErrorCodes.UNKNOWN_ERROR,
            "details": repr(result.error),
        },
    )


@router.get("/eventos")
async def get_events_endpoint(
    request: Request,
    month: Annotated[str | None, Query(alias="Mes", description="Month (1-12)")] = None,
    year: Annotated[str | None, Query(alias="Año", description="Year (1900-2100)")] = None,
    limit: Annotated[str | None, Query(alias="Limit", description="Page size (1-100)")] = None,
    offset: Annotated[str | None, Query(alias="Offset", description="Events to skip")] = None,
    caller: CallerContext = Depends(require_responsible),
    executor: DocumentExecutor = Depends(get_executor),
):
    """
    Search events, optionally restricted to one month, oldest first.

    Returns 200 with a page of events and the total number of matches, or 404
    (still success) when nothing matches.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/api/eventos",
        method="GET",
        client_ip=get_client_ip(request),
        instance=caller.instance,
        role=caller.role.value,
    )

    try:
        logger.info(
            "Events search parameters: Mes=%s Año=%s Limit=%s Offset=%s",
            month, year, limit, offset,
        )

        page_size = parse_int_param(
            limit,
            f"Limit must be a number between 1 and {MAX_EVENTS_PER_PAGE}",
            minimum=1,
            maximum=MAX_EVENTS_PER_PAGE,
            default=MAX_EVENTS_PER_PAGE,
        )
        skip = parse_int_param(
            offset,
            "Offset must be a number greater than or equal to 0",
            minimum=0,
            default=0,
        )
        query_month = parse_int_param(
            month, "Month must be a number between 1 and 12", minimum=1, maximum=12
        )
        query_year = parse_int_param(
            year,
            f"Year must be a valid number between {MIN_QUERY_YEAR} and {MAX_QUERY_YEAR}",
            minimum=MIN_QUERY_YEAR,
            maximum=MAX_QUERY_YEAR,
        )

        request_log.query_month = query_month
        request_log.query_year = query_year
        request_log.query_limit = page_size
        request_log.query_offset = skip

        # pymongo is blocking
        result = await asyncio.to_thread(
            search_events,
            executor,
            month=query_month,
            year=query_year,
            limit=page_size,
            offset=skip,
            instance=caller.instance,
        )
        if not result.ok:
            raise _query_failure(result)

        events = result.value["events"]
        total = result.value["total"]

        if not events:
            if query_month is not None:
                message = f"No events found for {_period_label(query_month, query_year)}"
            else:
                message = "No events found in the system"
            status_code = status.HTTP_404_NOT_FOUND
            total = 0
        else:
            if query_month is not None:
                message = (
                    f"Found {len(events)} event(s) of {total} total for "
                    f"{_period_label(query_month, query_year)}"
                )
            else:
                message = f"Found {len(events)} event(s) of {total} total (oldest first)"
            status_code = status.HTTP_200_OK

        request_log.status_code = status_code
        request_log.events_returned = len(events)
        request_log.total_events = total
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return JSONResponse(
            status_code=status_code,
            content=EventsResponse(
                message=message,
                data=[EventResponse.from_event(event) for event in events],
                total=total,
            ).model_dump(mode="json", by_alias=True),
        )

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("errorType")
            request_log.error_message = e.detail.get("message")
        else:
            request_log.error_message = str(e.detail)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        raise

    except Exception as e:
        logger.exception("Error searching events")
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.UNKNOWN_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "message": "Internal server error while searching events",
                "errorType": ErrorCodes.UNKNOWN_ERROR,
                "details": repr(e),
            },
        )

    finally:
        # A failed audit write must not fail the request
        try:
            log_request(request_log)
        except Exception:
            logger.warning("Could not write request log", exc_info=True)
