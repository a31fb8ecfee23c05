"""
Haversine Algorithm - straight-line distance between two geographical points
Used to measure how far a donor is from the hospital named on a blood request
"""

import math

EARTH_RADIUS_KM = 6371


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate "as the crow flies" distance between two points.
    Actual travel distance is usually longer.

    Args:
        lat1, lon1: Latitude and longitude of point 1 (hospital)
        lat2, lon2: Latitude and longitude of point 2 (donor)

    Returns:
        Distance in kilometers
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(a))

    return c * EARTH_RADIUS_KM


def distance_between(hospital_lat, hospital_lon, donor_lat, donor_lon):
    """
    Distance in km, or None when either side has no coordinates
    """
    if None in (hospital_lat, hospital_lon, donor_lat, donor_lon):
        return None
    return haversine_distance(hospital_lat, hospital_lon, donor_lat, donor_lon)
