"""In-memory store of region summaries.

Built once from the fetched ``region_summary.json`` payload and replaced
wholesale on refetch. Lookups are keyed by region code.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError

from avalanchemap.regions.models import AVALANCHE_PROBLEMS, DANGER_LEVELS, RegionSummary
from avalanchemap.regions.schemas import RegionSummaryRecord

logger = logging.getLogger(__name__)


def parse_record(raw: Any) -> Optional[RegionSummary]:
    """Validate one raw dataset record.

    Args:
        raw: Decoded JSON object

    Returns:
        RegionSummary with read-only count mappings, or None when the record
        has no usable code
    """
    try:
        record = RegionSummaryRecord.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Skipping malformed region record: {e.error_count()} error(s), {raw!r:.120}")
        return None

    return RegionSummary(
        code=record.code,
        name=record.name,
        rating_counts=MappingProxyType(dict(record.rating_counts)),
        avalanche_problem_counts=MappingProxyType(dict(record.avalanche_problem_counts)),
    )


class RegionSummaryStore(Mapping[str, RegionSummary]):
    """Read-only mapping of region code -> RegionSummary.

    Duplicate codes keep the first record seen.

    Example:
        >>> store = RegionSummaryStore.from_records([
        ...     {"code": "AT-07-01", "name": "Allgäu", "rating_counts": {"2": 4},
        ...      "avalanche_problem_counts": {}},
        ... ])
        >>> store["AT-07-01"].rating_counts["2"]
        4
    """

    def __init__(self, summaries: Iterable[RegionSummary] = ()):
        index: dict[str, RegionSummary] = {}
        for summary in summaries:
            if summary.code in index:
                logger.warning(f"Duplicate region code {summary.code}, keeping first record")
                continue
            index[summary.code] = summary
        self._index = index

    @classmethod
    def from_records(cls, records: Any) -> "RegionSummaryStore":
        """Build a store from the decoded JSON payload.

        Args:
            records: Decoded ``region_summary.json`` (a list of objects)

        Returns:
            RegionSummaryStore holding every valid record

        Raises:
            ValueError: If the payload is not a JSON array
        """
        if not isinstance(records, (list, tuple)):
            raise ValueError(
                f"Region summary payload must be a JSON array, got {type(records).__name__}"
            )

        summaries = [s for s in (parse_record(raw) for raw in records) if s is not None]
        skipped = len(records) - len(summaries)
        if skipped:
            logger.warning(f"Skipped {skipped} of {len(records)} region records")
        return cls(summaries)

    def __getitem__(self, code: str) -> RegionSummary:
        return self._index[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"RegionSummaryStore({len(self)} regions)"

    @property
    def summaries(self) -> tuple[RegionSummary, ...]:
        """All summaries in dataset order."""
        return tuple(self._index.values())

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten the store to one row per region.

        Returns:
            DataFrame with columns code, name, one column per danger level
            (``rating_1`` .. ``rating_5``) and one per avalanche problem key
        """
        rows = []
        for summary in self._index.values():
            row = {"code": summary.code, "name": summary.name}
            for level in DANGER_LEVELS:
                row[f"rating_{level}"] = summary.rating_counts.get(level, 0)
            for problem in AVALANCHE_PROBLEMS:
                row[problem] = summary.avalanche_problem_counts.get(problem, 0)
            rows.append(row)

        columns = (
            ["code", "name"]
            + [f"rating_{level}" for level in DANGER_LEVELS]
            + list(AVALANCHE_PROBLEMS)
        )
        return pd.DataFrame(rows, columns=columns)


def iter_summaries(
    summaries: Union[RegionSummaryStore, Mapping[str, RegionSummary], Iterable[RegionSummary], None],
) -> Iterator[RegionSummary]:
    """Iterate summaries from a store, a code mapping or a plain sequence."""
    if summaries is None:
        return iter(())
    if isinstance(summaries, Mapping):
        return iter(summaries.values())
    return iter(summaries)
