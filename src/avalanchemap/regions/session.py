"""Map session: dataset snapshots and per-session caches.

A MapSession owns everything that lives for one map view: the current
dataset snapshot, the active filter, the feature center cache and a memo of
resolved styles. Snapshots are immutable and swapped in one assignment, so
a style resolution always sees summaries and maxima of the same dataset.

Refreshes are tagged with a generation number. A response that arrives after
a newer refresh was started is discarded, and a failed fetch keeps the
previous snapshot.

Example:
    >>> session = MapSession()
    >>> session.refresh(lambda: load_region_summaries("data/raw/region_summary.json"))
    True
    >>> session.set_filter(Filter(FilterCategory.DANGER_LEVEL, "3"))
    >>> session.style_for({"id": "AT-07-01", "layer": "micro-regions"})
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterator, Mapping, Optional, Sequence, Union

from avalanchemap.regions.aggregation import SuperRegionTotals, aggregate
from avalanchemap.regions.fetch import LOAD_ERRORS
from avalanchemap.regions.maxima import compute_maxima
from avalanchemap.regions.models import Filter, SuperRegion
from avalanchemap.regions.store import RegionSummaryStore
from avalanchemap.regions.styles import Style, StyleKind, resolve_country_style, resolve_style
from avalanchemap.regions.validity import FeatureLayer, FeatureProperties, normalize_today
from avalanchemap.utils.geo import extent_center

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSnapshot:
    """One consistent view of the dataset and everything derived from it.

    Attributes:
        store: Region summaries keyed by code
        maxima: Metric key -> maximum count (read-only)
        super_regions: Super-region totals
        generation: Refresh generation that produced the snapshot
        loaded_at: When the snapshot was built, None for the empty snapshot
    """

    store: RegionSummaryStore
    maxima: Mapping[str, int]
    super_regions: Mapping[SuperRegion, SuperRegionTotals]
    generation: int = 0
    loaded_at: Optional[datetime] = None

    @classmethod
    def build(cls, records: Any, generation: int = 0) -> "DatasetSnapshot":
        """Build a snapshot from the decoded dataset payload.

        Raises:
            ValueError: If the payload is not a JSON array
        """
        store = RegionSummaryStore.from_records(records)
        return cls(
            store=store,
            maxima=MappingProxyType(compute_maxima(store)),
            super_regions=MappingProxyType(aggregate(store)),
            generation=generation,
            loaded_at=datetime.now(),
        )

    @classmethod
    def empty(cls) -> "DatasetSnapshot":
        """Snapshot used before any dataset is loaded."""
        store = RegionSummaryStore()
        return cls(
            store=store,
            maxima=MappingProxyType({}),
            super_regions=MappingProxyType(aggregate(store)),
        )

    @property
    def is_loaded(self) -> bool:
        return self.loaded_at is not None


class FeatureCenterCache:
    """Feature id -> center of its polygon extent.

    Filled from tile-load events; the first observation of an id wins since
    later tiles only carry clipped parts of the same polygon.
    """

    def __init__(self):
        self._centers: dict[str, tuple[float, float]] = {}

    def record(self, feature_id: Optional[str], extent: Sequence[float]) -> bool:
        """Record the extent center of a feature if not already known.

        Args:
            feature_id: Feature id, ignored when empty
            extent: [min_x, min_y, max_x, max_y] of the feature geometry

        Returns:
            True if the center was stored
        """
        if not feature_id or feature_id in self._centers:
            return False
        try:
            self._centers[feature_id] = extent_center(extent)
        except (TypeError, ValueError) as e:
            logger.debug(f"Ignoring extent for {feature_id}: {e}")
            return False
        return True

    def get(self, feature_id: str) -> Optional[tuple[float, float]]:
        return self._centers.get(feature_id)

    def items(self) -> Iterator[tuple[str, tuple[float, float]]]:
        return iter(list(self._centers.items()))

    def clear(self) -> None:
        self._centers.clear()

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._centers

    def __len__(self) -> int:
        return len(self._centers)


@dataclass(frozen=True)
class RegionLabel:
    """A "{count}/{max}" marker placed at a region's extent center."""

    id: str
    lon: float
    lat: float
    text: str
    color: str

    def to_dict(self) -> dict:
        """Return as dictionary."""
        return {
            "id": self.id,
            "lon": self.lon,
            "lat": self.lat,
            "text": self.text,
            "color": self.color,
        }


@dataclass
class RefreshState:
    """Bookkeeping for in-flight refreshes."""

    latest_generation: int = 0
    last_error: Optional[str] = None
    discarded: int = 0


class MapSession:
    """State of one map view.

    Attributes:
        centers: Feature center cache, cleared with the dataset and filter
        refresh_state: Refresh generation bookkeeping
    """

    def __init__(self, region_filter: Optional[Filter] = None, scale: str = "choropleth"):
        """Initialize an empty session.

        Args:
            region_filter: Initial filter, defaults to the aggregate view
            scale: Color scale used by style_for
        """
        self._snapshot = DatasetSnapshot.empty()
        self._filter = region_filter or Filter()
        self.scale = scale
        self.centers = FeatureCenterCache()
        self.refresh_state = RefreshState()
        self._styles: dict[tuple, Style] = {}

    # -------------------------------------------------------------------------
    # Dataset snapshots
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> DatasetSnapshot:
        """Current dataset snapshot."""
        return self._snapshot

    def begin_refresh(self) -> int:
        """Start a refresh and return its generation token."""
        self.refresh_state.latest_generation += 1
        return self.refresh_state.latest_generation

    def complete_refresh(self, token: int, records: Any) -> bool:
        """Install a fetched payload if its refresh is still the newest.

        Args:
            token: Generation returned by begin_refresh
            records: Decoded dataset payload

        Returns:
            True if a new snapshot was installed, False if the payload was
            stale or invalid
        """
        if token != self.refresh_state.latest_generation:
            self.refresh_state.discarded += 1
            logger.warning(
                f"Discarding stale dataset (generation {token}, "
                f"latest {self.refresh_state.latest_generation})"
            )
            return False

        try:
            snapshot = DatasetSnapshot.build(records, generation=token)
        except ValueError as e:
            self.fail_refresh(token, e)
            return False

        self._snapshot = snapshot
        self.refresh_state.last_error = None
        self._invalidate()
        logger.info(
            f"Installed dataset generation {token}: {len(snapshot.store)} regions, "
            f"{len(snapshot.maxima)} metrics"
        )
        return True

    def fail_refresh(self, token: int, error: BaseException) -> bool:
        """Record a failed refresh; the previous snapshot stays in place.

        Failures of superseded refreshes are discarded like their payloads,
        so they never mask the state of the newest one.

        Returns:
            True if the error was recorded, False if it was stale
        """
        if token != self.refresh_state.latest_generation:
            self.refresh_state.discarded += 1
            logger.warning(
                f"Discarding stale refresh failure (generation {token}, "
                f"latest {self.refresh_state.latest_generation}): {error}"
            )
            return False

        self.refresh_state.last_error = str(error)
        logger.error(f"Failed to load region summaries (generation {token}): {error}")
        return True

    def refresh(self, fetch: Callable[[], Any]) -> bool:
        """Fetch and install a dataset synchronously.

        Args:
            fetch: Callable returning the decoded dataset payload

        Returns:
            True if a new snapshot was installed
        """
        token = self.begin_refresh()
        try:
            records = fetch()
        except LOAD_ERRORS as e:
            self.fail_refresh(token, e)
            return False
        return self.complete_refresh(token, records)

    async def arefresh(self, fetch: Callable[[], Awaitable[Any]]) -> bool:
        """Fetch and install a dataset from a coroutine.

        A refresh started while this one awaits supersedes it; this one's
        payload is then discarded.

        Args:
            fetch: Coroutine function returning the decoded dataset payload

        Returns:
            True if a new snapshot was installed
        """
        token = self.begin_refresh()
        try:
            records = await fetch()
        except LOAD_ERRORS as e:
            self.fail_refresh(token, e)
            return False
        return self.complete_refresh(token, records)

    # -------------------------------------------------------------------------
    # Filter and styles
    # -------------------------------------------------------------------------

    @property
    def filter(self) -> Filter:
        """Active filter."""
        return self._filter

    def set_filter(self, region_filter: Filter) -> None:
        """Change the active filter, dropping the session caches on change."""
        if region_filter != self._filter:
            self._filter = region_filter
            self._invalidate()

    def _invalidate(self) -> None:
        self._styles.clear()
        self.centers.clear()

    def style_for(
        self,
        properties: Union[FeatureProperties, Mapping[str, Any]],
        today: Union[str, date, None] = None,
        region_filter: Optional[Filter] = None,
        scale: Optional[str] = None,
    ) -> Style:
        """Resolve the style of one feature.

        The aggregate filter colors regions by country as backdrop for the
        pie charts; any other filter gives the choropleth style. Results are
        memoized per (feature, filter, today, scale) until the dataset or the
        active filter changes.

        Args:
            properties: Feature properties (validated or raw tile properties)
            today: Reference date for polygon validity, defaults to today
            region_filter: Filter for this call, defaults to the active filter
            scale: Color scale for this call, defaults to the session scale
        """
        feature = FeatureProperties.from_raw(properties)
        ref = normalize_today(today)
        region_filter = region_filter if region_filter is not None else self._filter
        scale = scale or self.scale
        # One snapshot per call, never a mix of two datasets
        snapshot = self._snapshot
        key = (feature, region_filter, ref, scale, snapshot.generation)

        style = self._styles.get(key)
        if style is None:
            if region_filter.is_aggregate:
                style = resolve_country_style(feature, ref)
            else:
                style = resolve_style(
                    feature, region_filter, snapshot.store, snapshot.maxima, ref, scale
                )
            self._styles[key] = style
        return style

    def record_feature_extent(self, feature_id: Optional[str], extent: Sequence[float]) -> bool:
        """Remember where a feature is drawn, for label placement."""
        return self.centers.record(feature_id, extent)

    def label_markers(
        self,
        region_filter: Optional[Filter] = None,
        today: Union[str, date, None] = None,
    ) -> list[RegionLabel]:
        """Count labels for the filled regions whose center is known.

        Centers come from record_feature_extent, which the renderer calls
        for drawn micro-regions only. Marker colors use the coarse marker
        scale.

        Args:
            region_filter: Filter for the labels, defaults to the active filter
            today: Reference date for polygon validity, defaults to today

        Returns:
            One RegionLabel per filled region, in order of first observation
        """
        labels = []
        for feature_id, (lon, lat) in self.centers.items():
            style = self.style_for(
                FeatureProperties(id=feature_id, layer=FeatureLayer.MICRO_REGIONS),
                today,
                region_filter,
                scale="marker",
            )
            if style.kind is not StyleKind.FILL or style.label is None:
                continue
            labels.append(RegionLabel(feature_id, lon, lat, style.label, style.fill_color))
        return labels
