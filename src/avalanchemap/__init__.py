"""Avalanche bulletin statistics map engine.

Aggregates per-region avalanche bulletin counts into super-region totals and
resolves choropleth styles for micro-region polygons.
"""

__version__ = "0.1.0"
