from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import Field
from firemap.schemas.base import BaseSchema

class AlertSeverity(str, Enum):
	HIGH = "high"
	MEDIUM = "medium"
	LOW = "low"

class Alert(BaseSchema):
	"""Evacuation / air-quality notification, optionally tied to one wildfire."""
	id: str
	type: str
	title: str
	message: str
	severity: AlertSeverity
	wildfire_id: Optional[str] = Field(default=None, alias="wildfireId")
	zones: Optional[List[str]] = None
	active: bool = True
	created_at: datetime = Field(alias="createdAt")

class FireUpdate(BaseSchema):
	"""Short progress note about a wildfire."""
	id: Optional[int] = None
	wildfire_id: str = Field(alias="wildfireId")
	content: str
	timestamp: datetime

class WildfireStats(BaseSchema):
	active_fires_count: int = Field(default=0, alias="activeFiresCount")
	total_acres_burning: int = Field(default=0, alias="totalAcresBurning")
	nearby_fires_count: int = Field(default=0, alias="nearbyFiresCount")
