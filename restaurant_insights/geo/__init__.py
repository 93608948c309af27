"""
Geodesy utilities.

Responsibilities:
- Great-circle (haversine) distance between two latitude/longitude points.
- Vectorised distances from one origin to many points.
- Coordinate validation shared by matching and ranking.
"""
