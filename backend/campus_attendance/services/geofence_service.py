"""Geofence verification service."""
import math
from typing import Dict, NamedTuple

EARTH_RADIUS_METERS = 6371000

class GeoPoint(NamedTuple):
    """A coordinate in decimal degrees."""
    latitude: float
    longitude: float

class GeofenceChecker:
    """Great-circle distance and radius checks for class locations."""
    
    @staticmethod
    def distance_meters(point: GeoPoint, center: GeoPoint) -> float:
        """Calculate haversine distance between two GPS points in meters."""
        lat1_rad = math.radians(point.latitude)
        lat2_rad = math.radians(center.latitude)
        delta_lat = math.radians(center.latitude - point.latitude)
        delta_lon = math.radians(center.longitude - point.longitude)
        
        a = (math.sin(delta_lat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        
        return EARTH_RADIUS_METERS * c
    
    @staticmethod
    def is_within_radius(point: GeoPoint, center: GeoPoint, radius_meters: float) -> bool:
        """Inclusive radius check: a point exactly on the boundary is inside."""
        return GeofenceChecker.distance_meters(point, center) <= radius_meters
    
    @staticmethod
    def verify_location(point: GeoPoint, center: GeoPoint, radius_meters: float) -> Dict:
        """Check a point against a geofence and report the numbers behind it."""
        distance = GeofenceChecker.distance_meters(point, center)
        
        return {
            'is_inside': distance <= radius_meters,
            'distance': distance,
            'radius': radius_meters
        }
