"""FastAPI application serving region statistics and feature styles.

Provides REST API endpoints for:
- Feature styles for the tile renderer (choropleth and country views)
- Region count labels placed at reported feature extents
- Super-region totals and pie chart slices (aggregate view)
- Normalization maxima and legends
- Health checks and dataset reloads

Example:
    >>> from avalanchemap.api import create_app
    >>> app = create_app()
    >>> # Run with: uvicorn avalanchemap.api.app:app --reload
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from avalanchemap import __version__
from avalanchemap.api.schemas import (
    ErrorResponse,
    FeatureExtentBatch,
    FeatureExtentResponse,
    HealthResponse,
    LegendEntry,
    LegendResponse,
    MaximaResponse,
    PieChartModel,
    RegionLabelResponse,
    RegionSummaryRecord,
    StyleBatchRequest,
    StyleResponse,
    SuperRegionResponse,
)
from avalanchemap.regions.aggregation import pie_chart_data
from avalanchemap.regions.fetch import load_region_summaries
from avalanchemap.regions.maxima import max_for
from avalanchemap.regions.models import ALL_VALUE, Filter, FilterCategory, SuperRegion
from avalanchemap.regions.session import MapSession
from avalanchemap.regions.validity import normalize_today
from avalanchemap.visualization.colors import legend_entries

logger = logging.getLogger(__name__)

API_VERSION = __version__


def health_of(session: MapSession) -> HealthResponse:
    """Build the health response for a session."""
    snapshot = session.snapshot
    return HealthResponse(
        status="healthy" if snapshot.is_loaded else "degraded",
        dataset_loaded=snapshot.is_loaded,
        region_count=len(snapshot.store),
        loaded_at=snapshot.loaded_at,
        last_error=session.refresh_state.last_error,
        version=API_VERSION,
    )


def create_app(
    session: Optional[MapSession] = None,
    source: Optional[Union[str, Path]] = None,
    load_dataset: bool = True,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        session: Map session to serve, a new empty one if not provided
        source: Dataset path or URL (default: AVALANCHEMAP_SUMMARY_SOURCE)
        load_dataset: Whether to load the dataset on startup

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Avalanche Map API",
        description="Region statistics and choropleth styles for avalanche bulletin maps",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    session = session if session is not None else MapSession()
    app.state.session = session

    def reload_dataset() -> bool:
        return session.refresh(lambda: load_region_summaries(source))

    @app.on_event("startup")
    async def startup_event():
        """Load dataset on startup."""
        if load_dataset:
            if reload_dataset():
                logger.info("Dataset loaded on startup")
            else:
                logger.error("Starting without dataset")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with custom response."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=f"HTTP_{exc.status_code}",
                message=str(exc.detail),
            ).model_dump(),
        )

    @app.get("/", tags=["info"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Avalanche Map API",
            "version": API_VERSION,
            "docs": "/docs",
        }

    @app.get("/health", response_model=HealthResponse, tags=["info"])
    async def health_check():
        """Health check endpoint."""
        return health_of(session)

    @app.post("/refresh", response_model=HealthResponse, tags=["info"])
    async def refresh():
        """Reload the dataset. A failed reload keeps the previous dataset."""
        reload_dataset()
        return health_of(session)

    @app.get(
        "/regions/{code}",
        response_model=RegionSummaryRecord,
        responses={404: {"model": ErrorResponse, "description": "Unknown region"}},
        tags=["regions"],
    )
    async def get_region(code: str):
        """Get the bulletin counts of one micro-region."""
        summary = session.snapshot.store.get(code)
        if summary is None:
            raise HTTPException(status_code=404, detail=f"Region not found: {code}")
        return RegionSummaryRecord(**summary.to_dict())

    @app.get("/maxima", response_model=MaximaResponse, tags=["regions"])
    async def get_maxima():
        """Get the per-metric maxima used to normalize the color scale."""
        snapshot = session.snapshot
        return MaximaResponse(
            maxima=dict(snapshot.maxima),
            region_count=len(snapshot.store),
        )

    @app.get(
        "/super-regions",
        response_model=list[SuperRegionResponse],
        tags=["aggregate"],
    )
    async def get_super_regions(
        category: FilterCategory = Query(default=FilterCategory.DANGER_LEVEL),
    ):
        """Get super-region totals with pie chart slices for the category."""
        totals = session.snapshot.super_regions
        return [
            SuperRegionResponse(
                code=super_region.code,
                lon=super_region.lon,
                lat=super_region.lat,
                region_count=totals[super_region].region_count,
                danger_levels=dict(totals[super_region].danger_levels),
                avalanche_problems=dict(totals[super_region].avalanche_problems),
                pie=PieChartModel(**pie_chart_data(totals[super_region], category)),
            )
            for super_region in SuperRegion
        ]

    @app.post("/styles", response_model=list[StyleResponse], tags=["styles"])
    async def resolve_styles(request: StyleBatchRequest):
        """Resolve the style of a batch of features.

        With 'alle' regions are colored by country as backdrop for the pie
        charts. Features that should not be drawn come back with kind
        'suppressed'.
        """
        region_filter = Filter(request.filter.category, request.filter.value)
        today = normalize_today(request.today)

        responses = []
        for feature in request.features:
            style = session.style_for(feature.model_dump(), today, region_filter, request.scale)
            responses.append(StyleResponse(id=feature.id, **style.to_dict()))
        return responses

    @app.post("/feature-extents", response_model=FeatureExtentResponse, tags=["styles"])
    async def record_feature_extents(request: FeatureExtentBatch):
        """Record where the renderer drew micro-regions, for label placement.

        The first extent seen for an id wins; the centers are dropped when
        the dataset is reloaded.
        """
        recorded = sum(
            session.record_feature_extent(entry.id, entry.extent)
            for entry in request.extents
        )
        return FeatureExtentResponse(recorded=recorded, known=len(session.centers))

    @app.get("/labels", response_model=list[RegionLabelResponse], tags=["styles"])
    async def get_labels(
        category: FilterCategory = Query(default=FilterCategory.DANGER_LEVEL),
        value: str = Query(default=ALL_VALUE),
        today: Optional[date] = Query(default=None),
    ):
        """Get "{count}/{max}" markers for the recorded regions."""
        labels = session.label_markers(Filter(category, value), today)
        return [RegionLabelResponse(**label.to_dict()) for label in labels]

    @app.get("/legend", response_model=LegendResponse, tags=["styles"])
    async def get_legend(
        category: FilterCategory = Query(default=FilterCategory.DANGER_LEVEL),
        value: str = Query(default=ALL_VALUE),
    ):
        """Get the color legend for the selected metric."""
        key = Filter(category, value).metric_key()
        if key is None:
            return LegendResponse()

        max_count = max_for(session.snapshot.maxima, key)
        return LegendResponse(
            key=key,
            max_count=max_count,
            entries=[
                LegendEntry(min_count=count, color=color)
                for count, color in legend_entries(max_count)
            ],
        )

    return app


# Default app instance for uvicorn
app = create_app()
