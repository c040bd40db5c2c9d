import logging
from typing import Iterable, List, Optional, Tuple
from firemap.config import settings
from firemap.schemas.cluster import ClusterLeaf, ClusterNode, ClusterPoint
from firemap.schemas.viewport import BoundingBox
from firemap.schemas.wildfire import FireRecord
from firemap.services.cluster_index import ClusterIndex, ShapelyClusterIndex

logger = logging.getLogger(__name__)


class SpatialClusterer:
	"""
	Clusters the active fire set for the current viewport.
	
	The whole index is rebuilt whenever the active set changes; there is no
	incremental update, so queries always run against the latest data.
	"""

	def __init__(self, index: Optional[ClusterIndex] = None):
		self.index = index or ShapelyClusterIndex(
			radius=settings.cluster_radius,
			max_zoom=settings.cluster_max_zoom,
			min_points=settings.cluster_min_points,
			extent=settings.cluster_extent
		)
		self._fingerprint: Optional[Tuple] = None
		self._point_count = 0
		self.version = 0

	@property
	def point_count(self) -> int:
		return self._point_count

	@property
	def max_zoom(self) -> int:
		return getattr(self.index, "max_zoom", settings.cluster_max_zoom)

	@staticmethod
	def to_points(fires: Iterable[FireRecord]) -> List[ClusterPoint]:
		"""
		Build clustering input from fire records.
		Only active fires with a valid location take part.
		"""
		points = []
		for fire in fires:
			if not fire.is_active:
				continue
			if not fire.has_valid_location:
				logger.warning(f"Skipping wildfire {fire.id} with invalid coordinates")
				continue
			points.append(ClusterPoint(id=fire.id, latitude=fire.latitude, longitude=fire.longitude, payload=fire))
		return points

	@staticmethod
	def _fingerprint_of(fires: List[FireRecord]) -> Tuple:
		return tuple(sorted(
			(f.id, f.latitude, f.longitude, f.severity.value, f.containment, f.acres, str(f.updated))
			for f in fires
		))

	def load(self, fires: Iterable[FireRecord]) -> bool:
		"""
		Replace the clustered data set.
		
		Args:
			fires: Full current fire list (inactive fires are filtered out)
		
		Returns:
			True if the index was rebuilt, False if the active set was unchanged
		"""
		points = self.to_points(fires)
		fingerprint = self._fingerprint_of([p.payload for p in points])
		if fingerprint == self._fingerprint:
			return False

		self.index.rebuild(points)
		self._fingerprint = fingerprint
		self._point_count = len(points)
		self.version += 1
		logger.info(f"Rebuilt cluster index with {len(points)} active wildfires")
		return True

	def get_clusters(self, bbox: BoundingBox, zoom: float) -> List[ClusterNode]:
		"""Clusters and single fires visible in bbox at zoom."""
		nodes = self.index.query(bbox, zoom)
		return [self._with_expansion_zoom(node) for node in nodes]

	def _with_expansion_zoom(self, node: ClusterNode) -> ClusterNode:
		if isinstance(node, ClusterLeaf):
			return node
		return node.model_copy(update={"expansion_zoom": self.index.expansion_zoom(node.cluster_id)})

	def expansion_zoom(self, cluster_id: int) -> int:
		"""Zoom level at which the cluster splits, capped at max_zoom."""
		return min(self.index.expansion_zoom(cluster_id), self.max_zoom)

	def get_leaves(self, cluster_id: int) -> List[ClusterLeaf]:
		return self.index.get_leaves(cluster_id)
