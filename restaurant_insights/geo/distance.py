from __future__ import annotations

import math

import numpy as np

EARTH_RADIUS_KM = 6371.0

Coordinate = tuple[float, float]

# Slack added to box edges so boundary points survive float rounding.
_BOX_PAD_DEG = 1e-9


class InvalidCoordinate(ValueError):
    """Raised for latitude/longitude values that are NaN or out of range."""


def validate_coordinate(point: Coordinate) -> Coordinate:
    """Return ``(lat, lon)`` as floats, raising ``InvalidCoordinate`` if bad."""
    try:
        lat, lon = point
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(f"Not a latitude/longitude pair: {point!r}") from exc

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinate(f"Coordinate must be finite: ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude out of range [-90, 90]: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"Longitude out of range [-180, 180]: {lon}")
    return lat, lon


def distance_km(point_a: Coordinate, point_b: Coordinate) -> float:
    """Haversine great-circle distance in kilometres."""
    lat1, lon1 = validate_coordinate(point_a)
    lat2, lon2 = validate_coordinate(point_b)

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_KM * c


def distances_km(origin: Coordinate, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Vectorised ``distance_km`` from *origin* to every ``(lats[i], lons[i])``."""
    lat0, lon0 = validate_coordinate(origin)
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)

    bad = ~np.isfinite(lats) | ~np.isfinite(lons) | (np.abs(lats) > 90.0) | (np.abs(lons) > 180.0)
    if bad.any():
        i = int(np.argmax(bad))
        raise InvalidCoordinate(f"Invalid coordinate at position {i}: ({lats[i]}, {lons[i]})")

    dlat = np.radians(lats - lat0)
    dlon = np.radians(lons - lon0)

    a = (
        np.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat0)) * np.cos(np.radians(lats)) * np.sin(dlon / 2) ** 2
    )
    c = 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))

    return EARTH_RADIUS_KM * c


def bounding_box(origin: Coordinate, radius_km: float) -> tuple[float, float, float, float]:
    """
    Return ``(lat_min, lat_max, lon_min, lon_max)`` enclosing every point
    within *radius_km* of *origin*.

    Near the poles, or when the box would cross the antimeridian, the full
    longitude range is returned.
    """
    lat0, lon0 = validate_coordinate(origin)
    angular = radius_km / EARTH_RADIUS_KM

    dlat = math.degrees(angular) + _BOX_PAD_DEG
    lat_min = lat0 - dlat
    lat_max = lat0 + dlat
    if lat_min <= -90.0 or lat_max >= 90.0 or angular >= math.pi / 2:
        return max(lat_min, -90.0), min(lat_max, 90.0), -180.0, 180.0

    ratio = math.sin(angular) / math.cos(math.radians(lat0))
    if ratio >= 1.0:
        return lat_min, lat_max, -180.0, 180.0

    dlon = math.degrees(math.asin(ratio)) + _BOX_PAD_DEG
    lon_min = lon0 - dlon
    lon_max = lon0 + dlon
    if lon_min < -180.0 or lon_max > 180.0:
        return lat_min, lat_max, -180.0, 180.0

    return lat_min, lat_max, lon_min, lon_max
