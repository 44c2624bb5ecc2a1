"""Pydantic schema for region summary records.

Validates records of ``region_summary.json`` at the point where the dataset
enters the engine. Malformed count entries are dropped rather than failing
the whole record.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


def _coerce_count(value: Any) -> Optional[int]:
    """Convert a raw count to a non-negative int, None if unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        count = int(value.strip())
    else:
        return None
    return count if count >= 0 else None


class RegionSummaryRecord(BaseModel):
    """One record of the region summary dataset.

    Attributes:
        code: Micro-region code (e.g. "AT-07-01")
        name: Region display name
        rating_counts: Danger level ("1".."5") -> bulletin count
        avalanche_problem_counts: Problem key -> bulletin count
    """

    code: str = Field(
        ...,
        min_length=1,
        description="Micro-region code",
    )
    name: str = Field(
        default="",
        description="Region display name",
    )
    rating_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Bulletin count per danger level",
    )
    avalanche_problem_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Bulletin count per avalanche problem",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "AT-07-01",
                    "name": "Allgäuer Alpen Ost",
                    "rating_counts": {"1": 12, "2": 40, "3": 21},
                    "avalanche_problem_counts": {
                        "wind_drifted_snow": 30,
                        "persistent_weak_layers": 8,
                    },
                }
            ]
        }
    }

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("rating_counts", "avalanche_problem_counts", mode="before")
    @classmethod
    def _clean_counts(cls, value: Any, info: ValidationInfo) -> dict[str, int]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            logger.warning(f"Ignoring non-object {info.field_name}: {value!r}")
            return {}

        cleaned = {}
        for key, raw in value.items():
            count = _coerce_count(raw)
            if count is None:
                logger.warning(f"Dropping malformed {info.field_name} entry {key!r}: {raw!r}")
                continue
            cleaned[str(key)] = count
        return cleaned
