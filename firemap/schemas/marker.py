from enum import Enum
from typing import Optional
from firemap.schemas.base import BaseSchema

class MarkerKind(str, Enum):
	FIRE = "fire"
	CLUSTER = "cluster"
	USER_LOCATION = "user_location"

class MarkerOpType(str, Enum):
	CREATE = "create"
	UPDATE = "update"
	REMOVE = "remove"

class MarkerSpec(BaseSchema):
	"""Declarative description of one on-map marker."""
	key: str
	kind: MarkerKind
	latitude: float
	longitude: float
	size: int
	color: str
	border_color: str = "#FFFFFF"
	label: Optional[str] = None
	font_size: Optional[int] = None
	pulsing: bool = False
	badge: Optional[str] = None
	fire_id: Optional[str] = None
	cluster_id: Optional[int] = None

class MarkerOp(BaseSchema):
	"""One step of a marker edit list."""
	op: MarkerOpType
	key: str
	spec: Optional[MarkerSpec] = None
