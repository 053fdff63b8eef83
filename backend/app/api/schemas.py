"""
API schemas (Pydantic models) for request/response validation.
"""

from pydantic import BaseModel


# ============================================================================
# Upload Schemas
# ============================================================================

class UploadResponse(BaseModel):
    """Result of a successful FIT upload."""
    status: str
    id: str


# ============================================================================
# Activity Schemas
# ============================================================================

class ActivityStatsResponse(BaseModel):
    """Stats blob of an activity."""
    distance: float  # meters
    elevation: float  # meters (session total ascent)
    record_count: int


class ActivitySummaryResponse(BaseModel):
    """Activity for listing."""
    id: str
    timestamp: str  # ISO 8601, UTC
    type: str
    stats: ActivityStatsResponse
    has_track: bool


class ActivityDetailResponse(ActivitySummaryResponse):
    """Activity including its GPX track ("" when there is no track)."""
    gpx_data: str


# ============================================================================
# Service Schemas
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    database: str
    activity_count: int
