"""
Unit tests for SpatialClusterer.
"""
from unittest.mock import Mock
from firemap.schemas.cluster import ClusterAggregate
from firemap.schemas.viewport import BoundingBox
from firemap.services.cluster_index import ClusterIndex, ShapelyClusterIndex
from firemap.services.spatial_clusterer import SpatialClusterer

WORLD = BoundingBox(north=85, south=-85, east=180, west=-180)


class TestToPoints:
	"""Test cases for SpatialClusterer.to_points."""
	
	def test_only_active_located_fires(self, seed_fires, make_fire):
		"""Test contained and unlocated fires are left out."""
		fires = seed_fires + [
			make_fire("contained", severity="contained"),
			make_fire("done", containment=100),
			make_fire("nowhere", latitude=None, longitude=None)
		]
		points = SpatialClusterer.to_points(fires)
		assert sorted(p.id for p in points) == sorted(f.id for f in seed_fires)
		assert all(p.payload.is_active for p in points)


class TestLoad:
	"""Test cases for SpatialClusterer.load."""
	
	def test_rebuilds_on_change_only(self, seed_fires, make_fire):
		"""Test an unchanged active set does not rebuild the index."""
		index = Mock(spec=ClusterIndex)
		clusterer = SpatialClusterer(index=index)
		
		assert clusterer.load(seed_fires) is True
		assert clusterer.load(list(reversed(seed_fires))) is False
		assert index.rebuild.call_count == 1
		assert clusterer.version == 1
		
		updated = seed_fires[1:] + [seed_fires[0].model_copy(update={"containment": 50})]
		assert clusterer.load(updated) is True
		assert index.rebuild.call_count == 2
		assert clusterer.version == 2
	
	def test_point_count(self, seed_fires, make_fire):
		"""Test point_count reflects the active set."""
		clusterer = SpatialClusterer(index=ShapelyClusterIndex())
		clusterer.load(seed_fires + [make_fire("contained", severity="contained")])
		assert clusterer.point_count == 5


class TestGetClusters:
	"""Test cases for SpatialClusterer.get_clusters."""
	
	def test_world_view_at_zoom_zero(self, seed_fires):
		"""Test the whole seed set collapses into one cluster at zoom 0."""
		clusterer = SpatialClusterer(index=ShapelyClusterIndex())
		clusterer.load(seed_fires)
		nodes = clusterer.get_clusters(WORLD, 0)
		
		assert len(nodes) == 1
		assert isinstance(nodes[0], ClusterAggregate)
		assert nodes[0].count == 5
		assert nodes[0].expansion_zoom is not None
		assert 0 < nodes[0].expansion_zoom <= clusterer.max_zoom
	
	def test_leaves(self, seed_fires):
		"""Test leaves of the world cluster are the seed fires."""
		clusterer = SpatialClusterer(index=ShapelyClusterIndex())
		clusterer.load(seed_fires)
		cluster = clusterer.get_clusters(WORLD, 0)[0]
		leaves = clusterer.get_leaves(cluster.cluster_id)
		assert sorted(leaf.id for leaf in leaves) == sorted(f.id for f in seed_fires)
	
	def test_empty(self):
		"""Test no fires means no nodes."""
		clusterer = SpatialClusterer(index=ShapelyClusterIndex())
		clusterer.load([])
		assert clusterer.get_clusters(WORLD, 5) == []
