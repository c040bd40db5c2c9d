"""
Parser for fire perimeter coordinate strings.

The backend stores a perimeter as a *string containing JSON*, e.g.
'[{"lng": -119.53, "lat": 37.86}, ...]'. A perimeter that cannot be parsed
is treated as absent.
"""
import json
import logging
import math
from typing import Any, List, Optional, Tuple
from shapely.geometry import Polygon

logger = logging.getLogger(__name__)

Ring = List[Tuple[float, float]]


class PerimeterParser:
	"""Parser for extracting perimeter rings from backend records."""

	@staticmethod
	def parse_point(raw: Any) -> Optional[Tuple[float, float]]:
		"""
		Parse one perimeter vertex.
		
		Args:
			raw: Either {"lng": x, "lat": y} or a [lng, lat] pair
		
		Returns:
			(lng, lat) tuple, or None if the vertex is not a valid coordinate
		"""
		try:
			if isinstance(raw, dict):
				lng, lat = float(raw["lng"]), float(raw["lat"])
			elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
				lng, lat = float(raw[0]), float(raw[1])
			else:
				return None
		except (KeyError, TypeError, ValueError):
			return None
		
		if not (math.isfinite(lng) and math.isfinite(lat)):
			return None
		if not (-180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0):
			return None
		return lng, lat

	@staticmethod
	def parse_ring(perimeter_text: Optional[str], fire_id: str = "unknown") -> Optional[Ring]:
		"""
		Parse a perimeter JSON string into a closed ring of (lng, lat) pairs.
		
		Args:
			perimeter_text: JSON string from the perimeterCoordinates field
			fire_id: Owning fire id (for logging)
		
		Returns:
			Closed ring (first point == last point), or None when the fire has
			no usable perimeter
		"""
		if not perimeter_text:
			return None
		
		try:
			raw_points = json.loads(perimeter_text)
		except (json.JSONDecodeError, TypeError) as e:
			logger.warning(f"Could not parse perimeter for wildfire {fire_id}: {str(e)}")
			return None
		
		# GeoJSON-style nesting: [[[lng, lat], ...]]
		if (
			isinstance(raw_points, list)
			and len(raw_points) == 1
			and isinstance(raw_points[0], list)
			and raw_points[0]
			and isinstance(raw_points[0][0], (list, dict))
		):
			raw_points = raw_points[0]
		
		if not isinstance(raw_points, list):
			logger.warning(f"Perimeter for wildfire {fire_id} is not a coordinate list")
			return None
		
		ring: Ring = []
		for raw in raw_points:
			point = PerimeterParser.parse_point(raw)
			if point is None:
				logger.warning(f"Perimeter for wildfire {fire_id} has an invalid vertex: {raw!r}")
				return None
			ring.append(point)
		
		if len(set(ring)) < 3:
			logger.warning(f"Perimeter for wildfire {fire_id} has fewer than 3 distinct vertices")
			return None
		
		if ring[0] != ring[-1]:
			ring.append(ring[0])
		
		if PerimeterParser.to_polygon(ring).is_empty:
			return None
		return ring

	@staticmethod
	def to_polygon(ring: Ring) -> Polygon:
		"""Build a shapely Polygon from a (lng, lat) ring."""
		return Polygon(ring)
