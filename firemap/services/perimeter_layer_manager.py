import logging
from typing import Dict, List, Optional, Set
from firemap.config import settings
from firemap.exceptions import safe_map_call
from firemap.renderers.map_handle import LayerType, MapHandle
from firemap.schemas.viewport import BoundingBox
from firemap.schemas.wildfire import FireRecord
from firemap.utils.geo_utils import ring_bounds
from firemap.utils.marker_style import MarkerStyle
from firemap.utils.perimeter_parser import Ring

logger = logging.getLogger(__name__)


class PerimeterLayer:
	"""Fill + outline layer pair for one fire's perimeter."""

	def __init__(self, fire_id: str, ring: Ring, severity: str):
		self.fire_id = fire_id
		self.ring = ring
		self.severity = severity
		self.bounds: BoundingBox = ring_bounds(ring)
		self.visible = False

	@property
	def fill_id(self) -> str:
		return f"perimeter-{self.fire_id}-fill"

	@property
	def outline_id(self) -> str:
		return f"perimeter-{self.fire_id}-outline"

	@property
	def layer_ids(self) -> List[str]:
		return [self.fill_id, self.outline_id]

	def is_stale(self, ring: Ring, severity: str) -> bool:
		return self.ring != ring or self.severity != severity


class PerimeterLayerManager:
	"""
	Shows the perimeter of the selected fire.

	Layers are created on first show and afterwards only toggled, so
	re-selecting a fire is cheap and showing twice never duplicates layers.
	They are rebuilt when the perimeter or severity of the fire changes.
	Hidden layers are kept on the map.
	"""

	def __init__(self, map_handle: MapHandle, padding: Optional[int] = None):
		self.map_handle = map_handle
		self.padding = settings.perimeter_fit_padding if padding is None else padding
		self._layers: Dict[str, PerimeterLayer] = {}

	@property
	def layers(self) -> Dict[str, PerimeterLayer]:
		return dict(self._layers)

	@property
	def visible_fire_ids(self) -> Set[str]:
		return {fire_id for fire_id, layer in self._layers.items() if layer.visible}

	def show(self, fire: FireRecord) -> bool:
		"""
		Make the fire's perimeter the only visible one and fit the view to it.

		Args:
			fire: Fire to show; a fire without a usable perimeter is a no-op

		Returns:
			True if a perimeter is now visible for this fire
		"""
		ring = fire.perimeter
		if ring is None:
			logger.debug(f"Wildfire {fire.id} has no perimeter, nothing to show")
			return False

		self.hide_all(except_fire_id=fire.id)

		layer = self._layers.get(fire.id)
		if layer is not None and layer.is_stale(ring, fire.severity.value):
			logger.info(f"Perimeter of wildfire {fire.id} changed, rebuilding its layers")
			self._remove_layers(layer)
			layer = None

		if layer is None:
			layer = PerimeterLayer(fire.id, ring, fire.severity.value)
			if not self._add_layers(layer):
				return False
			self._layers[fire.id] = layer
		else:
			self._set_visible(layer, True)

		layer.visible = True
		safe_map_call("fit_bounds", self.map_handle.fit_bounds, layer.bounds, self.padding)
		return True

	def update(self, fire: FireRecord) -> bool:
		"""
		Bring the known layers of a fire in line with a fresher record.

		Visibility is kept and the camera does not move. A fire whose
		perimeter went away loses its layers.

		Returns:
			True if a perimeter is visible for this fire afterwards
		"""
		layer = self._layers.get(fire.id)
		if layer is None:
			return False

		ring = fire.perimeter
		if ring is None:
			logger.info(f"Wildfire {fire.id} no longer has a perimeter, removing its layers")
			self._remove_layers(layer)
			return False
		if not layer.is_stale(ring, fire.severity.value):
			return layer.visible

		visible = layer.visible
		self._remove_layers(layer)
		fresh = PerimeterLayer(fire.id, ring, fire.severity.value)
		if not self._add_layers(fresh):
			return False
		self._layers[fire.id] = fresh
		self._set_visible(fresh, visible)
		return visible

	def _remove_layers(self, layer: PerimeterLayer) -> None:
		for layer_id in layer.layer_ids:
			safe_map_call("remove_layer", self._remove_layer, layer_id)
		self._layers.pop(layer.fire_id, None)

	def _remove_layer(self, layer_id: str) -> None:
		if self.map_handle.has_layer(layer_id):
			self.map_handle.remove_layer(layer_id)

	def _add_layers(self, layer: PerimeterLayer) -> bool:
		added = safe_map_call("add_layer", self._add_layer_pair, layer, default=False)
		if not added:
			logger.error(f"Could not add perimeter layers for wildfire {layer.fire_id}")
		return bool(added)

	def _add_layer_pair(self, layer: PerimeterLayer) -> bool:
		if not self.map_handle.has_layer(layer.fill_id):
			self.map_handle.add_layer(
				layer.fill_id,
				LayerType.FILL,
				layer.ring,
				MarkerStyle.perimeter_fill_paint(layer.severity)
			)
		if not self.map_handle.has_layer(layer.outline_id):
			self.map_handle.add_layer(
				layer.outline_id,
				LayerType.LINE,
				layer.ring,
				MarkerStyle.perimeter_outline_paint(layer.severity)
			)
		self.map_handle.set_layer_visible(layer.fill_id, True)
		self.map_handle.set_layer_visible(layer.outline_id, True)
		return True

	def _set_visible(self, layer: PerimeterLayer, visible: bool) -> None:
		for layer_id in layer.layer_ids:
			safe_map_call("set_layer_visible", self.map_handle.set_layer_visible, layer_id, visible)
		layer.visible = visible

	def hide_all(self, except_fire_id: Optional[str] = None) -> None:
		"""Hide every perimeter (optionally sparing one fire's layers)."""
		for fire_id, layer in self._layers.items():
			if fire_id == except_fire_id:
				continue
			if layer.visible:
				self._set_visible(layer, False)

	def restore(self) -> None:
		"""
		Re-add all known layers after the base style was replaced,
		keeping their visibility.
		"""
		for layer in list(self._layers.values()):
			visible = layer.visible
			if safe_map_call("add_layer", self._add_layer_pair, layer, default=False):
				self._set_visible(layer, visible)
			else:
				del self._layers[layer.fire_id]
