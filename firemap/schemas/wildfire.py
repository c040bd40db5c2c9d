import math
from datetime import datetime
from enum import Enum
from functools import cached_property
from typing import Optional
from pydantic import Field, field_validator
from firemap.schemas.base import BaseSchema
from firemap.utils.perimeter_parser import PerimeterParser, Ring

class SeverityTier(str, Enum):
	HIGH = "high"
	MEDIUM = "medium"
	LOW = "low"
	CONTAINED = "contained"  # terminal regardless of containment percent

class FireRecord(BaseSchema):
	"""
	Point-in-time snapshot of a wildfire as served by the backend.
	
	Perimeter Note:
	---------------
	perimeter_coordinates is a string holding JSON, not structured JSON.
	Use `perimeter` to get the parsed ring; a value that does not parse is
	reported as no perimeter at all.
	"""
	id: str
	name: str = ""
	location: str = ""  # human readable place name, e.g. "Eagle County, CO"
	latitude: Optional[float] = None
	longitude: Optional[float] = None
	acres: int = Field(default=0, ge=0)
	containment: int = Field(default=0, ge=0, le=100)
	start_date: Optional[str] = Field(default=None, alias="startDate")
	severity: SeverityTier
	cause: Optional[str] = None
	perimeter_coordinates: Optional[str] = Field(default=None, alias="perimeterCoordinates")
	news_url: Optional[str] = Field(default=None, alias="newsUrl")
	updated: Optional[datetime] = None

	@field_validator("latitude", "longitude", mode="before")
	@classmethod
	def _blank_coordinate_to_none(cls, value):
		if value == "":
			return None
		return value

	@property
	def is_active(self) -> bool:
		"""A fire is active iff it is not in the contained tier and below 100% containment."""
		return self.severity != SeverityTier.CONTAINED and self.containment < 100

	@property
	def has_valid_location(self) -> bool:
		"""True when latitude/longitude are finite and within WGS84 ranges."""
		if self.latitude is None or self.longitude is None:
			return False
		if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
			return False
		return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

	@cached_property
	def perimeter(self) -> Optional[Ring]:
		"""Closed (lng, lat) ring, or None when absent or malformed."""
		return PerimeterParser.parse_ring(self.perimeter_coordinates, self.id)
