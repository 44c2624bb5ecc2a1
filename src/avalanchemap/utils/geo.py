"""Geographic utilities and constants."""


def extent_center(extent) -> tuple[float, float]:
    """Center of an ``[min_x, min_y, max_x, max_y]`` extent.

    Args:
        extent: Sequence of four numbers as produced by tile renderers

    Returns:
        Tuple of (x, y)

    Raises:
        ValueError: If the extent does not have exactly four values
    """
    if len(extent) != 4:
        raise ValueError(f"Extent must have 4 values, got {len(extent)}")
    min_x, min_y, max_x, max_y = (float(v) for v in extent)
    return ((min_x + max_x) / 2, (min_y + max_y) / 2)


# Map overview defaults (lon, lat)
DEFAULT_CENTER = (10.0, 47.0)
DEFAULT_ZOOM = 6
