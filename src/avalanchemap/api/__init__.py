"""Region statistics API for avalanchemap.

This module provides:

- create_app: Factory function to create FastAPI application
- StyleBatchRequest: Request schema for feature styles
- SuperRegionResponse: Aggregated super-region counts with pie slices

Note: FastAPI-dependent exports (create_app, health_of) are lazy-loaded
to allow importing schemas without FastAPI installed.
"""

# Schemas can be imported directly (only depend on pydantic)
from avalanchemap.api.schemas import (
    ErrorResponse,
    FeatureExtentBatch,
    FeatureModel,
    FilterModel,
    HealthResponse,
    LegendResponse,
    MaximaResponse,
    RegionLabelResponse,
    StyleBatchRequest,
    StyleResponse,
    SuperRegionResponse,
)


# Lazy imports for FastAPI-dependent components
def __getattr__(name):
    """Lazy load FastAPI-dependent components."""
    if name in ("create_app", "health_of"):
        from avalanchemap.api.app import create_app, health_of
        if name == "create_app":
            return create_app
        return health_of
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "create_app",
    "health_of",
    "FilterModel",
    "FeatureModel",
    "StyleBatchRequest",
    "StyleResponse",
    "FeatureExtentBatch",
    "RegionLabelResponse",
    "SuperRegionResponse",
    "MaximaResponse",
    "LegendResponse",
    "HealthResponse",
    "ErrorResponse",
]
