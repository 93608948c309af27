"""
Geospatial ranking.

Responsibilities:
- Find restaurants within a radius of an origin point.
- Optionally gate results on rating and review volume.
- Order results by distance, breaking ties on quality.
"""
