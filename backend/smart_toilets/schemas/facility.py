"""Pydantic schemas for the facility endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Facility ────────────────────────────────────────


class Coordinates(ApiModel):
    lat: float
    lng: float


class SensorBlock(ApiModel):
    """Simulated sensor readings attached to a facility."""
    air_quality: int = Field(description="Air quality index, 0-99")
    usage: int = Field(description="Uses since last reset, 0-499")
    water_level: int = Field(description="Tank level percent, 0-99")
    cleanliness_score: int = Field(ge=1, le=10)
    temperature: int = Field(description="Ambient °C, 25-39")
    last_cleaned: datetime


class Facility(ApiModel):
    id: str
    name: str
    location: str
    coordinates: Coordinates
    status: str = Field(description="active | maintenance")
    sensors: SensorBlock
    alerts: list[str]
    user_rating: str = Field(description="One-decimal rating, 3.0-8.0")
    daily_users: int
    last_updated: datetime


# ── Analytics ───────────────────────────────────────


class CostSavings(ApiModel):
    monthly: str = "₹4,32,000"
    annual: str = "₹51,84,000"


class MaintenanceStats(ApiModel):
    scheduled: int = 15
    completed: int = 12
    pending: int = 3


class StaticFacts(ApiModel):
    """Fixed figures reported alongside the computed aggregates."""
    model_config = ConfigDict(frozen=True)

    cost_savings: CostSavings = Field(default_factory=CostSavings)
    maintenance_stats: MaintenanceStats = Field(default_factory=MaintenanceStats)


class Analytics(ApiModel):
    total_facilities: int
    active_facilities: int
    average_rating: str
    total_daily_users: int
    alert_count: int
    cost_savings: CostSavings
    maintenance_stats: MaintenanceStats


# ── Image analysis ──────────────────────────────────


class ImageAnalysis(ApiModel):
    cleanliness_score: int = Field(ge=1, le=10)
    confidence: str
    issues: list[str]
    recommendation: str
    analysis_time: str


# ── Response envelopes ──────────────────────────────


class FacilitiesListResponse(ApiModel):
    """Response for GET /api/facilities."""
    success: bool = True
    count: int
    data: list[Facility]


class FacilityResponse(ApiModel):
    """Response for GET /api/facility/{facility_id}."""
    success: bool = True
    data: Facility


class FeedbackResponse(ApiModel):
    """Response for POST /api/feedback. ``data`` echoes whatever was sent."""
    success: bool = True
    message: str
    data: dict[str, Any]


class AnalyticsResponse(ApiModel):
    success: bool = True
    data: Analytics


class ImageAnalysisResponse(ApiModel):
    success: bool = True
    data: ImageAnalysis


class ErrorResponse(ApiModel):
    success: bool = False
    message: str


class ServiceInfo(ApiModel):
    """Response for GET /."""
    message: str
    version: str
    endpoints: list[str]
