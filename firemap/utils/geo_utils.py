"""
Geographic helpers: great-circle distance, ring bounds and the web-mercator
projection shared by the clusterer and the headless map.
"""
import math
from typing import Iterable, List, Tuple, TYPE_CHECKING
from shapely.geometry import LineString
from firemap.schemas.viewport import BoundingBox

if TYPE_CHECKING:
	from firemap.schemas.wildfire import FireRecord

# Mean Earth radius in miles. Older backend revisions used 3959.
EARTH_RADIUS_MILES = 3958.8

# Slack on computed box edges for float rounding
BOUNDS_EPSILON = 1e-9


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
	"""
	Great-circle distance between two points using the haversine formula.
	
	Args:
		lat1, lng1: First point in degrees
		lat2, lng2: Second point in degrees
	
	Returns:
		Distance in miles (non-negative)
	"""
	d_lat = math.radians(lat2 - lat1)
	d_lng = math.radians(lng2 - lng1)
	a = (
		math.sin(d_lat / 2) ** 2
		+ math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
	)
	c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
	return EARTH_RADIUS_MILES * c


def radius_bounds(latitude: float, longitude: float, radius_miles: float) -> BoundingBox:
	"""
	Smallest lat/lng box holding every point within radius_miles of the center.
	
	The box wraps across the antimeridian (west > east) when needed and spans
	all longitudes when the circle reaches a pole.
	"""
	d = max(radius_miles, 0.0) / EARTH_RADIUS_MILES
	lat = math.radians(latitude)
	south = math.degrees(lat - d)
	north = math.degrees(lat + d)
	if north >= 90.0 or south <= -90.0 or math.sin(d) >= math.cos(lat):
		return BoundingBox(north=min(north, 90.0), south=max(south, -90.0), east=180.0, west=-180.0)

	d_lng = math.degrees(math.asin(math.sin(d) / math.cos(lat))) + BOUNDS_EPSILON
	west = longitude - d_lng
	east = longitude + d_lng
	if east - west >= 360.0:
		west, east = -180.0, 180.0
	if west < -180.0:
		west += 360.0
	if east > 180.0:
		east -= 360.0
	return BoundingBox(north=north + BOUNDS_EPSILON, south=south - BOUNDS_EPSILON, east=east, west=west)


def filter_nearby(
	fires: Iterable["FireRecord"],
	latitude: float,
	longitude: float,
	radius_miles: float
) -> List["FireRecord"]:
	"""
	Keep the fires whose point location lies within radius_miles.
	Fires without a valid location are dropped.
	"""
	box = radius_bounds(latitude, longitude, radius_miles)
	nearby = []
	for fire in fires:
		if not fire.has_valid_location:
			continue
		if not box.contains(fire.latitude, fire.longitude):
			continue
		if distance_miles(latitude, longitude, fire.latitude, fire.longitude) <= radius_miles:
			nearby.append(fire)
	return nearby


def ring_bounds(ring: List[Tuple[float, float]]) -> BoundingBox:
	"""
	Bounding box of a (lng, lat) ring.
	
	Args:
		ring: Perimeter ring as (lng, lat) pairs
	
	Returns:
		BoundingBox enclosing every vertex
	"""
	min_lng, min_lat, max_lng, max_lat = LineString(ring).bounds
	return BoundingBox(north=max_lat, south=min_lat, east=max_lng, west=min_lng)


def lng_to_x(lng: float) -> float:
	"""Longitude to web-mercator x in [0, 1]."""
	return lng / 360.0 + 0.5


def lat_to_y(lat: float) -> float:
	"""Latitude to web-mercator y in [0, 1] (north is 0)."""
	sin = math.sin(lat * math.pi / 180.0)
	if sin >= 1.0:
		return 0.0
	if sin <= -1.0:
		return 1.0
	y = 0.5 - 0.25 * math.log((1 + sin) / (1 - sin)) / math.pi
	return min(max(y, 0.0), 1.0)


def x_to_lng(x: float) -> float:
	return (x - 0.5) * 360.0


def y_to_lat(y: float) -> float:
	y2 = (180.0 - y * 360.0) * math.pi / 180.0
	return 360.0 * math.atan(math.exp(y2)) / math.pi - 90.0
