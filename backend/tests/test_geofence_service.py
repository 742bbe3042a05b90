"""Tests for great-circle distance and radius checks."""
import pytest

from campus_attendance.services.geofence_service import GeofenceChecker, GeoPoint
from conftest import point_north_of

CENTER = GeoPoint(12.9, 77.6)

def test_same_point_is_zero_meters():
    assert GeofenceChecker.distance_meters(CENTER, CENTER) == pytest.approx(0.0)

def test_one_degree_of_latitude_is_about_111_km():
    north = GeoPoint(13.9, 77.6)
    
    assert GeofenceChecker.distance_meters(north, CENTER) == pytest.approx(111195, rel=1e-3)

def test_distance_is_symmetric():
    other = GeoPoint(12.9004, 77.6003)
    
    assert GeofenceChecker.distance_meters(other, CENTER) == pytest.approx(
        GeofenceChecker.distance_meters(CENTER, other)
    )

def test_point_fifty_meters_north_measures_fifty_meters():
    point = GeoPoint(*point_north_of(CENTER, 50))
    
    assert GeofenceChecker.distance_meters(point, CENTER) == pytest.approx(50, abs=0.01)

def test_boundary_is_inclusive():
    point = GeoPoint(*point_north_of(CENTER, 120))
    distance = GeofenceChecker.distance_meters(point, CENTER)
    
    assert GeofenceChecker.is_within_radius(point, CENTER, distance)
    assert not GeofenceChecker.is_within_radius(point, CENTER, distance - 1)

def test_one_meter_outside_radius_is_rejected():
    point = GeoPoint(*point_north_of(CENTER, 51))
    
    assert not GeofenceChecker.is_within_radius(point, CENTER, 50)
    assert GeofenceChecker.is_within_radius(GeoPoint(*point_north_of(CENTER, 49)), CENTER, 50)

def test_verify_location_reports_distance_and_radius():
    point = GeoPoint(*point_north_of(CENTER, 80))
    
    result = GeofenceChecker.verify_location(point, CENTER, 50)
    
    assert result['is_inside'] is False
    assert result['distance'] == pytest.approx(80, abs=0.01)
    assert result['radius'] == 50
