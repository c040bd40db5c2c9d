from typing import Any, Literal, Optional, Union
from firemap.schemas.base import BaseSchema

class ClusterPoint(BaseSchema):
	"""Clustering input: one located item and its payload (normally a FireRecord)."""
	id: str
	latitude: float
	longitude: float
	payload: Any = None

class ClusterLeaf(BaseSchema):
	"""A single unclustered point."""
	kind: Literal["leaf"] = "leaf"
	id: str
	latitude: float
	longitude: float
	payload: Any = None

	@property
	def key(self) -> str:
		return self.id

	@property
	def count(self) -> int:
		return 1

class ClusterAggregate(BaseSchema):
	"""
	A zoom-dependent group of at least min_points points.
	latitude/longitude is the count-weighted centroid in projected space.
	"""
	kind: Literal["cluster"] = "cluster"
	cluster_id: int
	count: int
	latitude: float
	longitude: float
	expansion_zoom: Optional[int] = None

	@property
	def key(self) -> str:
		return f"cluster-{self.cluster_id}"

ClusterNode = Union[ClusterLeaf, ClusterAggregate]
