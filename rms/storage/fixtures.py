"""
Sample records loaded into the in-memory backend at startup.
"""
import json
from datetime import datetime

DEFAULT_ADMIN = {
    "first_name": "System",
    "last_name": "Administrator",
    "role": "admin",
    "badge_number": "ADMIN001",
    "department": "IT",
    "position": "System Administrator",
    "phone": "+1-555-0000",
}

SAMPLE_CASES = [
    {
        "title": "Burglary at Main Street Store",
        "description": "Break-in occurred at electronics store on Main Street. Several items reported missing including laptops and phones.",
        "type": "Burglary",
        "priority": "high",
        "status": "in_progress",
        "incident_date": datetime(2025, 1, 20, 10, 30),
        "location": "Main Street Electronics Store, Downtown",
        "assigned_officer": "Officer Johnson",
        "created_by_id": 1,
    },
    {
        "title": "Traffic Accident Investigation",
        "description": "Multi-vehicle accident at highway intersection. Minor injuries reported.",
        "type": "Traffic",
        "priority": "medium",
        "status": "open",
        "incident_date": datetime(2025, 1, 21, 15, 45),
        "location": "Highway 101 & Oak Avenue Intersection",
        "assigned_officer": "Officer Davis",
        "created_by_id": 1,
    },
    {
        "title": "Missing Person Report",
        "description": "Adult male reported missing by family. Last seen at work on Friday evening.",
        "type": "Other",
        "priority": "critical",
        "status": "open",
        "incident_date": datetime(2025, 1, 19, 18, 0),
        "location": "Last seen at Downtown Office Building",
        "assigned_officer": "Detective Smith",
        "created_by_id": 1,
    },
]
CASE_CREATED_AT = datetime(2025, 1, 20, 11, 0)
CASE_UPDATED_AT = datetime(2025, 1, 21, 9, 15)


def _area(west: float, east: float, south: float, north: float) -> str:
    """Closed rectangular patrol polygon as ``[lng, lat]`` points."""
    return json.dumps([[west, north], [east, north], [east, south], [west, south], [west, north]])


SAMPLE_VEHICLES = [
    {
        "vehicle_id": "PATROL-001",
        "license_plate": "POL-001",
        "vehicle_type": "patrol",
        "make": "Ford",
        "model": "Explorer",
        "year": 2023,
        "current_location": json.dumps([-122.4194, 37.7749]),
        "assigned_area": _area(-122.4500, -122.4000, 37.7649, 37.7849),  # downtown
        "status": "on_patrol",
        "assigned_officer_id": 1,
    },
    {
        "vehicle_id": "PATROL-002",
        "license_plate": "POL-002",
        "vehicle_type": "motorcycle",
        "make": "Harley-Davidson",
        "model": "Police Special",
        "year": 2022,
        "current_location": json.dumps([-122.3894, 37.7594]),
        "assigned_area": _area(-122.4200, -122.3700, 37.7500, 37.7700),  # south district
        "status": "available",
        "assigned_officer_id": None,
    },
    {
        "vehicle_id": "K9-001",
        "license_plate": "POL-K9-001",
        "vehicle_type": "k9",
        "make": "Chevrolet",
        "model": "Tahoe",
        "year": 2023,
        "current_location": json.dumps([-122.4094, 37.7849]),
        "assigned_area": _area(-122.4300, -122.3900, 37.7700, 37.7900),  # north district
        "status": "responding",
        "assigned_officer_id": 1,
    },
    {
        "vehicle_id": "SPECIAL-001",
        "license_plate": "POL-SWAT-001",
        "vehicle_type": "special",
        "make": "Ford",
        "model": "F-550",
        "year": 2021,
        "current_location": json.dumps([-122.4394, 37.7949]),
        "assigned_area": _area(-122.4600, -122.4100, 37.7800, 37.8000),  # special operations
        "status": "out_of_service",
        "assigned_officer_id": None,
    },
]

SAMPLE_GEOFILES = [
    {
        "filename": "patrol_routes_downtown.kml",
        "filepath": "/geofiles/patrol_routes_downtown.kml",
        "file_url": "https://example.com/geofiles/patrol_routes_downtown.kml",
        "file_type": "kml",
        "file_size": 15400,
        "coordinates": json.dumps([-122.4194, 37.7749]),
        "bounding_box": json.dumps([[-122.45, 37.77], [-122.40, 37.78]]),
        "address": "100 Market Street, San Francisco, CA",
        "location_name": "Downtown Patrol Zone",
        "description": "Primary patrol routes for downtown district including high-traffic commercial areas and tourist zones.",
        "metadata": json.dumps({
            "creator": "Officer Johnson",
            "version": "2.1",
            "lastUpdated": "2025-01-15",
            "patrolShift": "day",
            "priority": "high",
        }),
        "tags": json.dumps(["patrol", "downtown", "routes", "primary"]),
        "is_public": False,
        "access_level": "department",
        "patrol_area": json.dumps([
            [-122.4500, 37.7849],
            [-122.4000, 37.7849],
            [-122.4000, 37.7649],
            [-122.4500, 37.7649],
        ]),
        "incident_markers": json.dumps([
            {"type": "theft", "coordinates": [-122.4194, 37.7749], "severity": "medium"},
            {"type": "vandalism", "coordinates": [-122.4150, 37.7760], "severity": "low"},
        ]),
        "case_id": 1,
        "uploaded_by": 1,
        "download_count": 12,
    },
    {
        "filename": "crime_hotspots_analysis.geojson",
        "filepath": "/geofiles/crime_hotspots_analysis.geojson",
        "file_type": "geojson",
        "file_size": 28600,
        "coordinates": json.dumps([-122.4094, 37.7849]),
        "bounding_box": json.dumps([[-122.43, 37.78], [-122.39, 37.79]]),
        "address": "500 Mission Street, San Francisco, CA",
        "location_name": "Mission District Analysis Zone",
        "description": "Statistical analysis of crime hotspots in the Mission District based on 6-month incident data.",
        "metadata": json.dumps({
            "creator": "Crime Analytics Team",
            "period": "2024-07-01 to 2024-12-31",
            "incidents": 347,
            "methodology": "kernel_density_estimation",
        }),
        "tags": json.dumps(["analysis", "crime", "hotspots", "statistics", "mission"]),
        "is_public": True,
        "access_level": "public",
        "uploaded_by": 1,
        "download_count": 21,
    },
    {
        "filename": "emergency_evacuation_routes.gpx",
        "filepath": "/geofiles/emergency_evacuation_routes.gpx",
        "file_type": "gpx",
        "file_size": 12300,
        "coordinates": json.dumps([-122.3894, 37.7594]),
        "address": "1800 3rd Street, San Francisco, CA",
        "location_name": "Emergency Response Corridor",
        "description": "Optimized evacuation routes for emergency scenarios including natural disasters and public safety threats.",
        "metadata": json.dumps({
            "creator": "Emergency Planning Unit",
            "capacity": "50000_persons",
            "estimated_time": "45_minutes",
            "accessibility": "ada_compliant",
        }),
        "tags": json.dumps(["emergency", "evacuation", "routes", "safety"]),
        "is_public": False,
        "access_level": "internal",
        "uploaded_by": 1,
        "download_count": 7,
    },
    {
        "filename": "surveillance_coverage_map.shp",
        "filepath": "/geofiles/surveillance_coverage_map.shp",
        "file_type": "shp",
        "file_size": 45200,
        "coordinates": json.dumps([-122.4394, 37.7949]),
        "bounding_box": json.dumps([[-122.46, 37.79], [-122.41, 37.80]]),
        "address": "Citywide Coverage",
        "location_name": "CCTV Network Coverage",
        "description": "Comprehensive map of surveillance camera coverage areas and blind spots throughout the district.",
        "metadata": json.dumps({
            "cameras": 156,
            "coverage_percentage": 78.5,
            "blind_spots": 12,
            "resolution": "high_definition",
        }),
        "tags": json.dumps(["surveillance", "cctv", "coverage", "security"]),
        "is_public": False,
        "access_level": "internal",
        "uploaded_by": 1,
        "download_count": 3,
    },
    {
        "filename": "incident_locations_jan2025.kmz",
        "filepath": "/geofiles/incident_locations_jan2025.kmz",
        "file_type": "kmz",
        "file_size": 67800,
        "coordinates": json.dumps([-122.4194, 37.7749]),
        "address": "Multiple locations citywide",
        "location_name": "January 2025 Incidents",
        "description": "Comprehensive mapping of all reported incidents during January 2025 including theft, vandalism, and traffic violations.",
        "metadata": json.dumps({
            "incidents": 89,
            "resolved": 67,
            "pending": 22,
            "month": "january_2025",
        }),
        "tags": json.dumps(["incidents", "january", "2025", "reports", "mapping"]),
        "is_public": False,
        "access_level": "department",
        "uploaded_by": 1,
        "download_count": 18,
    },
]
GEOFILE_CREATED_AT = datetime(2025, 1, 15, 10, 0)
GEOFILE_UPDATED_AT = datetime(2025, 1, 18, 15, 30)
GEOFILE_ACCESSED_AT = datetime(2025, 1, 20, 10, 0)

SAMPLE_OFFICERS = [
    {
        "username": "officer.johnson",
        "email": "johnson@police.gov",
        "password": "officer123",
        "first_name": "Mike",
        "last_name": "Johnson",
        "role": "user",
        "badge_number": "BADGE001",
        "department": "Patrol",
        "position": "Police Officer",
        "phone": "+1-555-0001",
    },
    {
        "username": "detective.smith",
        "email": "smith@police.gov",
        "password": "detective123",
        "first_name": "Sarah",
        "last_name": "Smith",
        "role": "user",
        "badge_number": "DET001",
        "department": "Detective",
        "position": "Detective",
        "phone": "+1-555-0002",
    },
]
