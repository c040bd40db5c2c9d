from typing import Tuple
from pydantic import Field
from firemap.schemas.base import BaseSchema

class BoundingBox(BaseSchema):
	"""Visible map area in degrees. west > east means the box crosses the antimeridian."""
	north: float
	south: float
	east: float
	west: float

	def as_lng_lat_box(self) -> Tuple[float, float, float, float]:
		"""Return (west, south, east, north), the order clustering queries use."""
		return self.west, self.south, self.east, self.north

	@property
	def center(self) -> Tuple[float, float]:
		"""(lng, lat) center of the box."""
		return (self.west + self.east) / 2.0, (self.north + self.south) / 2.0

	def contains(self, latitude: float, longitude: float) -> bool:
		if not self.south <= latitude <= self.north:
			return False
		if self.west <= self.east:
			return self.west <= longitude <= self.east
		return longitude >= self.west or longitude <= self.east

class ViewportState(BaseSchema):
	"""Current zoom level and visible bounds of the map."""
	zoom: float
	bounds: BoundingBox

class MapPosition(BaseSchema):
	"""Initial map camera position."""
	latitude: float
	longitude: float
	zoom: float = Field(default=4.0)
