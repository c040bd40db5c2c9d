"""
Unit tests for PerimeterLayerManager.
"""
import pytest
from conftest import perimeter_json
from firemap.renderers.map_handle import LayerType
from firemap.services.perimeter_layer_manager import PerimeterLayerManager
from firemap.utils.marker_style import SEVERITY_COLORS


@pytest.fixture
def other_perimeter():
	return perimeter_json([
		(-106.9, 39.6),
		(-106.7, 39.6),
		(-106.7, 39.7),
		(-106.9, 39.7),
	])


class TestShow:
	"""Test cases for PerimeterLayerManager.show."""
	
	def test_creates_fill_and_outline(self, memory_map, seed_fires):
		"""Test the first show adds both layers colored by severity."""
		manager = PerimeterLayerManager(memory_map, padding=50)
		assert manager.show(seed_fires[0]) is True
		
		fill = memory_map.layers["perimeter-crf-001-fill"]
		outline = memory_map.layers["perimeter-crf-001-outline"]
		assert fill.layer_type == LayerType.FILL
		assert outline.layer_type == LayerType.LINE
		assert fill.paint["fill-color"] == SEVERITY_COLORS["high"]
		assert fill.visible and outline.visible
		assert manager.visible_fire_ids == {"crf-001"}
	
	def test_fits_viewport(self, memory_map, seed_fires):
		"""Test the viewport is fitted around the perimeter."""
		manager = PerimeterLayerManager(memory_map, padding=50)
		manager.show(seed_fires[0])
		
		bounds = memory_map.get_bounds()
		assert memory_map.zoom > 8
		assert bounds.contains(37.8, -119.6)
		assert bounds.contains(37.9, -119.4)
		assert memory_map.center[0] == pytest.approx(-119.5)
	
	def test_show_twice_is_idempotent(self, memory_map, seed_fires):
		"""Test showing the same fire again does not duplicate layers."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(seed_fires[0])
		manager.show(seed_fires[0])
		assert len(memory_map.layers) == 2
		assert len(memory_map.visible_layers()) == 2
	
	def test_only_latest_visible(self, memory_map, make_fire, sample_perimeter, other_perimeter):
		"""Test showing B hides A."""
		manager = PerimeterLayerManager(memory_map)
		a = make_fire("a", perimeterCoordinates=sample_perimeter)
		b = make_fire("b", latitude=39.65, longitude=-106.8, perimeterCoordinates=other_perimeter)
		manager.show(a)
		manager.show(b)
		
		assert manager.visible_fire_ids == {"b"}
		assert {layer.layer_id for layer in memory_map.visible_layers()} == {
			"perimeter-b-fill",
			"perimeter-b-outline"
		}
		assert len(memory_map.layers) == 4
	
	def test_no_perimeter_is_noop(self, memory_map, seed_fires):
		"""Test fires without a perimeter add nothing and keep the camera."""
		manager = PerimeterLayerManager(memory_map)
		zoom = memory_map.zoom
		assert manager.show(seed_fires[1]) is False
		assert memory_map.layers == {}
		assert memory_map.zoom == zoom
	
	def test_malformed_perimeter_is_noop(self, memory_map, make_fire):
		"""Test a perimeter string that is not JSON is treated as absent."""
		manager = PerimeterLayerManager(memory_map)
		assert manager.show(make_fire(perimeterCoordinates="not valid json")) is False
		assert memory_map.layers == {}


class TestHideAndRestore:
	"""Test cases for hide_all and restore."""
	
	def test_hide_all_keeps_layers(self, memory_map, seed_fires):
		"""Test hiding keeps the layers on the map for cheap re-show."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(seed_fires[0])
		manager.hide_all()
		
		assert manager.visible_fire_ids == set()
		assert memory_map.visible_layers() == []
		assert len(memory_map.layers) == 2
	
	def test_restore_after_style_change(self, memory_map, seed_fires):
		"""Test layers come back with their visibility after the style is replaced."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(seed_fires[0])
		memory_map.set_style("mapbox://styles/mapbox/dark-v11")
		assert memory_map.layers == {}
		
		manager.restore()
		
		assert len(memory_map.visible_layers()) == 2
		assert manager.visible_fire_ids == {"crf-001"}


class TestChangedPerimeter:
	"""Test cases for fires whose perimeter or severity changed between refreshes."""
	
	def test_reshow_rebuilds_changed_layers(self, memory_map, make_fire, sample_perimeter, other_perimeter):
		"""Test showing a fresher record draws its new ring and colour."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(make_fire("f1", severity="low", perimeterCoordinates=sample_perimeter))
		manager.hide_all()
		
		fresh = make_fire("f1", severity="high", perimeterCoordinates=other_perimeter)
		assert manager.show(fresh) is True
		
		fill = memory_map.layers["perimeter-f1-fill"]
		assert fill.ring == fresh.perimeter
		assert fill.paint["fill-color"] == SEVERITY_COLORS["high"]
		assert len(memory_map.layers) == 2
		assert memory_map.center[0] == pytest.approx(-106.8)
	
	def test_update_keeps_visibility_and_camera(self, memory_map, make_fire, sample_perimeter, other_perimeter):
		"""Test update swaps the ring in place without moving the camera."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(make_fire("f1", perimeterCoordinates=sample_perimeter))
		center, zoom = memory_map.center, memory_map.zoom
		
		fresh = make_fire("f1", perimeterCoordinates=other_perimeter)
		assert manager.update(fresh) is True
		
		assert memory_map.layers["perimeter-f1-outline"].ring == fresh.perimeter
		assert len(memory_map.visible_layers()) == 2
		assert (memory_map.center, memory_map.zoom) == (center, zoom)
	
	def test_update_unchanged_is_noop(self, memory_map, seed_fires):
		"""Test an identical record leaves hidden layers hidden."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(seed_fires[0])
		manager.hide_all()
		
		assert manager.update(seed_fires[0]) is False
		assert memory_map.visible_layers() == []
		assert len(memory_map.layers) == 2
	
	def test_update_drops_vanished_perimeter(self, memory_map, make_fire, sample_perimeter):
		"""Test layers are removed when the perimeter disappears."""
		manager = PerimeterLayerManager(memory_map)
		manager.show(make_fire("f1", perimeterCoordinates=sample_perimeter))
		
		assert manager.update(make_fire("f1")) is False
		assert memory_map.layers == {}
		assert manager.layers == {}
