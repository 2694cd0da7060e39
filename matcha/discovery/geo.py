from __future__ import annotations

import math

import numpy as np

EARTH_RADIUS_KM = 6371.0


def distance_km(
    lat1: float | None,
    lon1: float | None,
    lat2: float | None,
    lon2: float | None,
) -> float:
    """Great-circle distance in km (Haversine).

    Returns ``math.inf`` when any coordinate is missing.
    """
    if lat1 is None or lon1 is None or lat2 is None or lon2 is None:
        return math.inf

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distances_km(lat: float, lon: float, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Vectorised Haversine from one point to many."""
    lat_r = np.radians(lat)
    lats_r = np.radians(lats)
    d_lat = lats_r - lat_r
    d_lon = np.radians(lons - lon)
    a = np.sin(d_lat / 2) ** 2 + np.cos(lat_r) * np.cos(lats_r) * np.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
