"""Route planning endpoints."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, HTTPException, status

from ...data.reports_repository import ReportsBackendError
from ...schemas.routing import RoutePlanError, RoutePlanRequest, RoutePlanResponse
from ...services.routing.errors import InsufficientDestinations, OriginUnavailable
from ...services.routing.service import plan_collection_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/plan", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
def plan(payload: RoutePlanRequest) -> RoutePlanResponse:
    try:
        return plan_collection_route(payload)
    except OriginUnavailable as exc:
        error = RoutePlanError(kind=exc.kind, message=exc.message, reason=exc.reason.value)
        raise HTTPException(status_code=422, detail=error.model_dump()) from exc
    except InsufficientDestinations as exc:
        error = RoutePlanError(kind=exc.kind, message=str(exc), dropped_report_ids=sorted(exc.dropped_ids))
        raise HTTPException(status_code=422, detail=error.model_dump()) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Reports backend rejected credentials: {exc}") from exc
    except ReportsBackendError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Reports backend unavailable: {exc}") from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error planning collection route: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan route: {str(exc)}",
        ) from exc
