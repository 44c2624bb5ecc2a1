"""Pydantic schemas for API request/response validation.

Defines all data models used by the region statistics API.
"""

from datetime import date as date_type
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from avalanchemap.regions.models import ALL_VALUE, FilterCategory
from avalanchemap.regions.schemas import RegionSummaryRecord


class FilterModel(BaseModel):
    """Map filter.

    Attributes:
        category: "Gefahrenstufe" or "Lawinenprobleme"
        value: "alle", a danger level or an avalanche problem label
    """

    category: FilterCategory = Field(
        default=FilterCategory.DANGER_LEVEL,
        description="Metric family",
    )
    value: str = Field(
        default=ALL_VALUE,
        description="'alle', a danger level 1-5 or an avalanche problem label",
    )


class FeatureModel(BaseModel):
    """Properties of one rendered polygon as delivered by the tile source.

    Attributes:
        id: Micro-region id
        layer: Tile layer name
        start_date: First valid day (YYYY-MM-DD)
        end_date: First invalid day (YYYY-MM-DD)
    """

    id: Optional[str] = Field(default=None, description="Micro-region id")
    layer: Optional[str] = Field(default=None, description="Tile layer name")
    start_date: Optional[str] = Field(default=None, description="First valid day")
    end_date: Optional[str] = Field(default=None, description="First invalid day (exclusive)")


class StyleBatchRequest(BaseModel):
    """Request schema for resolving feature styles.

    Attributes:
        filter: Active map filter
        today: Reference date for polygon validity (default: server date)
        scale: Color scale for fills
        features: Features to style
    """

    filter: FilterModel = Field(default_factory=FilterModel)
    today: Optional[date_type] = Field(
        default=None,
        description="Reference date for polygon validity",
    )
    scale: Literal["choropleth", "marker"] = Field(
        default="choropleth",
        description="Color scale for fills",
    )
    features: list[FeatureModel] = Field(
        default_factory=list,
        max_length=10000,
        description="Features to style",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "filter": {"category": "Gefahrenstufe", "value": "3"},
                    "today": "2025-02-01",
                    "scale": "choropleth",
                    "features": [
                        {"id": "AT-07-01", "layer": "micro-regions"},
                        {"id": "AT-07", "layer": "outline"},
                    ],
                }
            ]
        }
    }


class StyleResponse(BaseModel):
    """Resolved style of one feature.

    Attributes:
        id: Feature id as requested
        kind: outline, fill, default or suppressed
        fill_color: Hex fill color
        fill_opacity: Fill opacity 0-1
        stroke_color: Hex stroke color
        stroke_width: Stroke width in pixels
        label: "{count}/{max}" for filled regions
    """

    id: Optional[str] = None
    kind: str
    fill_color: Optional[str] = None
    fill_opacity: float = 0.0
    stroke_color: Optional[str] = None
    stroke_width: float = 0.0
    label: Optional[str] = None


class FeatureExtent(BaseModel):
    """Extent of one drawn micro-region."""

    id: str = Field(..., min_length=1, description="Micro-region id")
    extent: list[float] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="[min_lon, min_lat, max_lon, max_lat]",
    )


class FeatureExtentBatch(BaseModel):
    """Extents reported by the renderer on tile load."""

    extents: list[FeatureExtent] = Field(default_factory=list, max_length=10000)


class FeatureExtentResponse(BaseModel):
    """Result of recording feature extents.

    Attributes:
        recorded: Number of new centers stored by this request
        known: Number of centers known to the session
    """

    recorded: int = 0
    known: int = 0


class RegionLabelResponse(BaseModel):
    """Count label of one filled region, placed at its extent center."""

    id: str
    lon: float
    lat: float
    text: str
    color: str


class PieChartModel(BaseModel):
    """Slices of one pie chart."""

    labels: list[str]
    values: list[int]
    colors: list[str]


class SuperRegionResponse(BaseModel):
    """Aggregated counts of one super-region.

    Attributes:
        code: Super-region code (e.g. "AT-07")
        lon: Chart anchor longitude
        lat: Chart anchor latitude
        region_count: Number of contributing micro-regions
        danger_levels: Danger level -> count
        avalanche_problems: Problem key -> count
        pie: Chart slices for the requested category
    """

    code: str
    lon: float
    lat: float
    region_count: int
    danger_levels: dict[str, int]
    avalanche_problems: dict[str, int]
    pie: PieChartModel


class MaximaResponse(BaseModel):
    """Normalization maxima of the loaded dataset."""

    maxima: dict[str, int] = Field(default_factory=dict)
    region_count: int = 0


class LegendEntry(BaseModel):
    """One legend row."""

    min_count: int
    color: str


class LegendResponse(BaseModel):
    """Legend for the selected metric."""

    key: Optional[str] = None
    max_count: int = 1
    entries: list[LegendEntry] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response.

    Attributes:
        status: Service status ('healthy' or 'degraded')
        dataset_loaded: Whether a dataset snapshot is installed
        region_count: Number of regions in the snapshot
        loaded_at: When the snapshot was built
        last_error: Error of the most recent failed refresh
        version: API version
    """

    status: str = Field(
        default="healthy",
        description="Service status",
    )
    dataset_loaded: bool = Field(
        default=False,
        description="Whether a dataset is loaded",
    )
    region_count: int = Field(
        default=0,
        description="Number of regions in the dataset",
    )
    loaded_at: Optional[datetime] = Field(
        default=None,
        description="When the dataset was loaded",
    )
    last_error: Optional[str] = Field(
        default=None,
        description="Error of the most recent failed refresh",
    )
    version: str = Field(
        default="0.1.0",
        description="API version",
    )


class ErrorResponse(BaseModel):
    """Error response schema.

    Attributes:
        error: Error type/code
        message: Human-readable error message
        detail: Additional error details
    """

    error: str = Field(
        ...,
        description="Error type",
    )
    message: str = Field(
        ...,
        description="Error message",
    )
    detail: Optional[str] = Field(
        default=None,
        description="Additional details",
    )


__all__ = [
    "ErrorResponse",
    "FeatureExtent",
    "FeatureExtentBatch",
    "FeatureExtentResponse",
    "FeatureModel",
    "FilterModel",
    "HealthResponse",
    "LegendEntry",
    "LegendResponse",
    "MaximaResponse",
    "PieChartModel",
    "RegionLabelResponse",
    "RegionSummaryRecord",
    "StyleBatchRequest",
    "StyleResponse",
    "SuperRegionResponse",
]
