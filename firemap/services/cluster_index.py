"""
Hierarchical point clustering for map display.

Points are projected to web-mercator unit space and clustered greedily once
per integer zoom level, from max_zoom - 1 down to min_zoom. Each level keeps a
shapely STRtree for neighbour search. At max_zoom and beyond the raw points
are returned, so fires are never merged at street level.
"""
import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
import numpy as np
import shapely
from shapely import STRtree
from shapely.geometry import box
from firemap.exceptions import NotFoundError
from firemap.schemas.cluster import ClusterAggregate, ClusterLeaf, ClusterNode, ClusterPoint
from firemap.schemas.viewport import BoundingBox
from firemap.utils.geo_utils import lat_to_y, lng_to_x, x_to_lng, y_to_lat

logger = logging.getLogger(__name__)


class ClusterIndex(ABC):
	"""
	Interface for a zoom-aware clustering index.
	Any implementation (grid, k-d tree, library) can back the clusterer.
	"""

	@abstractmethod
	def rebuild(self, points: Sequence[ClusterPoint]) -> None:
		"""Discard the current index and build a new one from points."""

	@abstractmethod
	def query(self, bbox: BoundingBox, zoom: float) -> List[ClusterNode]:
		"""Clusters and leaves visible in bbox at the given zoom."""

	@abstractmethod
	def expansion_zoom(self, cluster_id: int) -> int:
		"""Zoom at which the cluster first splits, capped at max_zoom."""

	@abstractmethod
	def get_children(self, cluster_id: int) -> List[ClusterNode]:
		"""Nodes the cluster splits into one zoom level deeper."""

	def get_leaves(self, cluster_id: int) -> List[ClusterLeaf]:
		"""All points under a cluster."""
		leaves: List[ClusterLeaf] = []
		for child in self.get_children(cluster_id):
			if isinstance(child, ClusterAggregate):
				leaves.extend(self.get_leaves(child.cluster_id))
			else:
				leaves.append(child)
		return leaves


class _IndexedNode:
	"""Mutable per-level node. ``zoom`` marks the level that consumed it."""

	__slots__ = ("x", "y", "zoom", "id", "parent_id", "num_points")

	def __init__(self, x: float, y: float, id: int, num_points: int):
		self.x = x
		self.y = y
		self.zoom = math.inf
		self.id = id
		self.parent_id = -1
		self.num_points = num_points

	def copy(self) -> "_IndexedNode":
		return _IndexedNode(self.x, self.y, self.id, self.num_points)

	@property
	def is_cluster(self) -> bool:
		return self.num_points > 1


class _Level:
	"""All nodes of one zoom level plus their spatial indexes."""

	def __init__(self, nodes: List[_IndexedNode]):
		self.nodes = nodes
		self.xs = np.array([n.x for n in nodes], dtype=float)
		self.ys = np.array([n.y for n in nodes], dtype=float)
		self.tree: Optional[STRtree] = None
		if nodes:
			self.tree = STRtree(shapely.points(np.column_stack([self.xs, self.ys])))

	def within(self, x: float, y: float, r: float) -> List[int]:
		"""Indexes of nodes within projected distance r of (x, y), inclusive."""
		if self.tree is None:
			return []
		candidates = self.tree.query(box(x - r, y - r, x + r, y + r))
		r2 = r * r
		result = []
		for idx in sorted(int(i) for i in candidates):
			dx = self.xs[idx] - x
			dy = self.ys[idx] - y
			if dx * dx + dy * dy <= r2:
				result.append(idx)
		return result

	def in_range(self, min_x: float, min_y: float, max_x: float, max_y: float) -> List[int]:
		"""Indexes of nodes inside the projected box, edges included."""
		if not self.nodes:
			return []
		mask = (self.xs >= min_x) & (self.xs <= max_x) & (self.ys >= min_y) & (self.ys <= max_y)
		return [int(i) for i in np.nonzero(mask)[0]]


class ShapelyClusterIndex(ClusterIndex):
	"""
	Greedy radius clustering backed by shapely STRtrees.

	Args:
		radius: Merge distance in screen pixels at each zoom level
		max_zoom: Zoom at and beyond which points are never clustered
		min_points: Minimum number of points to form a cluster
		min_zoom: Coarsest zoom level that is indexed
		extent: Tile extent the radius is measured against
	"""

	def __init__(
		self,
		radius: int = 60,
		max_zoom: int = 16,
		min_points: int = 3,
		min_zoom: int = 0,
		extent: int = 512
	):
		self.radius = radius
		self.max_zoom = max_zoom
		self.min_points = min_points
		self.min_zoom = min_zoom
		self.extent = extent
		self._points: List[ClusterPoint] = []
		self._levels: Dict[int, _Level] = {}
		self._cluster_zoom: Dict[int, int] = {}
		self._children: Dict[int, List[_IndexedNode]] = {}

	@property
	def point_count(self) -> int:
		return len(self._points)

	def rebuild(self, points: Sequence[ClusterPoint]) -> None:
		self._points = list(points)
		self._levels = {}
		self._cluster_zoom = {}
		self._children = {}

		nodes = [
			_IndexedNode(lng_to_x(p.longitude), lat_to_y(p.latitude), i, 1)
			for i, p in enumerate(self._points)
		]
		self._levels[self.max_zoom] = _Level(nodes)

		for zoom in range(self.max_zoom - 1, self.min_zoom - 1, -1):
			nodes = self._cluster(self._levels[zoom + 1], zoom)
			self._levels[zoom] = _Level(nodes)

		logger.debug(f"Built cluster index for {len(self._points)} points, zooms {self.min_zoom}-{self.max_zoom}")

	def _cluster(self, level: _Level, zoom: int) -> List[_IndexedNode]:
		r = max(self.radius / (self.extent * math.pow(2, zoom)), 1e-12)
		next_nodes: List[_IndexedNode] = []

		for i, node in enumerate(level.nodes):
			if node.zoom <= zoom:
				continue
			node.zoom = zoom

			neighbor_ids = level.within(node.x, node.y, r)
			num_points_origin = node.num_points
			num_points = num_points_origin
			for neighbor_id in neighbor_ids:
				neighbor = level.nodes[neighbor_id]
				if neighbor.zoom > zoom:
					num_points += neighbor.num_points

			if num_points > num_points_origin and num_points >= self.min_points:
				cluster_id = (i << 5) + (zoom + 1) + len(self._points)
				wx = node.x * num_points_origin
				wy = node.y * num_points_origin
				children = [node]
				for neighbor_id in neighbor_ids:
					neighbor = level.nodes[neighbor_id]
					if neighbor.zoom <= zoom:
						continue
					neighbor.zoom = zoom
					wx += neighbor.x * neighbor.num_points
					wy += neighbor.y * neighbor.num_points
					neighbor.parent_id = cluster_id
					children.append(neighbor)
				node.parent_id = cluster_id

				self._cluster_zoom[cluster_id] = zoom
				self._children[cluster_id] = children
				next_nodes.append(_IndexedNode(wx / num_points, wy / num_points, cluster_id, num_points))
			else:
				next_nodes.append(node.copy())
				if num_points > 1:
					for neighbor_id in neighbor_ids:
						neighbor = level.nodes[neighbor_id]
						if neighbor.zoom <= zoom:
							continue
						neighbor.zoom = zoom
						next_nodes.append(neighbor.copy())

		return next_nodes

	def _limit_zoom(self, zoom: float) -> int:
		return int(max(self.min_zoom, min(math.floor(zoom), self.max_zoom)))

	def _to_node(self, node: _IndexedNode) -> ClusterNode:
		if node.is_cluster:
			return ClusterAggregate(
				cluster_id=node.id,
				count=node.num_points,
				latitude=y_to_lat(node.y),
				longitude=x_to_lng(node.x)
			)
		point = self._points[node.id]
		return ClusterLeaf(
			id=point.id,
			latitude=point.latitude,
			longitude=point.longitude,
			payload=point.payload
		)

	def query(self, bbox: BoundingBox, zoom: float) -> List[ClusterNode]:
		if not self._points:
			return []

		west, south, east, north = bbox.as_lng_lat_box()
		min_lng = ((west + 180.0) % 360.0) - 180.0
		min_lat = max(-90.0, min(90.0, south))
		max_lng = 180.0 if east == 180.0 else ((east + 180.0) % 360.0) - 180.0
		max_lat = max(-90.0, min(90.0, north))

		if east - west >= 360.0:
			min_lng = -180.0
			max_lng = 180.0
		elif min_lng > max_lng:
			eastern = self.query(BoundingBox(north=max_lat, south=min_lat, east=180.0, west=min_lng), zoom)
			western = self.query(BoundingBox(north=max_lat, south=min_lat, east=max_lng, west=-180.0), zoom)
			return eastern + western

		level = self._levels[self._limit_zoom(zoom)]
		ids = level.in_range(lng_to_x(min_lng), lat_to_y(max_lat), lng_to_x(max_lng), lat_to_y(min_lat))
		return [self._to_node(level.nodes[i]) for i in ids]

	def get_children(self, cluster_id: int) -> List[ClusterNode]:
		children = self._children.get(cluster_id)
		if children is None:
			raise NotFoundError("Cluster", str(cluster_id))
		return [self._to_node(child) for child in children]

	def expansion_zoom(self, cluster_id: int) -> int:
		if cluster_id not in self._cluster_zoom:
			raise NotFoundError("Cluster", str(cluster_id))

		expansion_zoom = self._cluster_zoom[cluster_id]
		current_id = cluster_id
		while expansion_zoom <= self.max_zoom:
			children = self._children[current_id]
			expansion_zoom += 1
			if len(children) != 1 or not children[0].is_cluster:
				break
			current_id = children[0].id
		return min(expansion_zoom, self.max_zoom)
