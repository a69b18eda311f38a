"""API routes for facilities, feedback, analytics and image analysis."""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from smart_toilets.config import Settings
from smart_toilets.errors import FacilityNotFoundError
from smart_toilets.generator import Clock, RandomSource
from smart_toilets.schemas.facility import (
    AnalyticsResponse,
    ErrorResponse,
    FacilitiesListResponse,
    FacilityResponse,
    FeedbackResponse,
    ImageAnalysisResponse,
)
from smart_toilets.services.analytics import analyze_image, compute_analytics
from smart_toilets.store import FacilityStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Facilities"])

FEEDBACK_FIELDS = ("facilityId", "rating", "comment")


# ── Dependencies ────────────────────────────────────


def get_store(request: Request) -> FacilityStore:
    return request.app.state.store


def get_rng(request: Request) -> RandomSource:
    return request.app.state.rng


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# ── GET /api/facilities ─────────────────────────────


@router.get(
    "/facilities",
    response_model=FacilitiesListResponse,
    summary="List all facilities",
)
async def list_facilities(store: FacilityStore = Depends(get_store)):
    facilities = store.all()
    return FacilitiesListResponse(count=len(facilities), data=facilities)


# ── GET /api/facility/{facility_id} ─────────────────


@router.get(
    "/facility/{facility_id}",
    response_model=FacilityResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Single facility with fresh readings",
)
async def get_facility(facility_id: str, store: FacilityStore = Depends(get_store)):
    """
    Return one facility after redrawing its cleanliness score and usage
    count, simulating a live sensor poll. The new values are kept.
    """
    try:
        facility = await store.refresh_readings(facility_id)
    except FacilityNotFoundError:
        raise
    except Exception:
        logger.exception("Refresh failed for facility %s", facility_id)
        raise HTTPException(status_code=500, detail="Internal server error")
    return FacilityResponse(data=facility)


# ── POST /api/feedback ──────────────────────────────


@router.post(
    "/feedback",
    response_model=FeedbackResponse,
    summary="Submit user feedback",
)
async def submit_feedback(
    payload: Any = Body(default=None),
    clock: Clock = Depends(get_clock),
):
    """Echo the submitted feedback back. Nothing is validated or stored."""
    submitted = payload if isinstance(payload, dict) else {}
    data = {key: submitted[key] for key in FEEDBACK_FIELDS if key in submitted}
    data["timestamp"] = clock()

    logger.info("Feedback received for facility %s", data.get("facilityId"))
    return FeedbackResponse(message="Feedback submitted successfully", data=data)


# ── GET /api/analytics ──────────────────────────────


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Fleet-wide aggregates",
)
async def get_analytics(store: FacilityStore = Depends(get_store)):
    try:
        analytics = compute_analytics(store.all())
    except Exception:
        logger.exception("Analytics aggregation failed")
        raise HTTPException(status_code=500, detail="Internal server error")
    return AnalyticsResponse(data=analytics)


# ── POST /api/analyze-image ─────────────────────────


@router.post(
    "/analyze-image",
    response_model=ImageAnalysisResponse,
    summary="Simulated AI cleanliness check",
)
async def analyze_image_endpoint(
    rng: RandomSource = Depends(get_rng),
    settings: Settings = Depends(get_app_settings),
):
    """
    Wait to mimic model latency, then return a random assessment.
    The uploaded image, if any, is never read.
    """
    await asyncio.sleep(settings.ANALYSIS_DELAY_SECONDS)
    result = analyze_image(rng)
    logger.debug("Image analysis score=%d", result.cleanliness_score)
    return ImageAnalysisResponse(data=result)
