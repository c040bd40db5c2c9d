"""
Headless map backend.

Keeps camera, markers and layers in memory using the same web-mercator
math as a 512px-tile browser map. Used to produce static snapshots and to
exercise the map core without a browser.
"""
import logging
import math
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional
from firemap.config import settings
from firemap.exceptions import MapNotReadyError, MapUnsupportedError
from firemap.renderers.map_handle import LayerType, LngLat, MapEvent, MapHandle
from firemap.schemas.marker import MarkerSpec
from firemap.schemas.viewport import BoundingBox
from firemap.utils.geo_utils import lat_to_y, lng_to_x, x_to_lng, y_to_lat

logger = logging.getLogger(__name__)

TILE_SIZE = 512
MAX_MAP_ZOOM = 22.0


class MarkerState:
	def __init__(self, spec: MarkerSpec, visible: bool = True):
		self.spec = spec
		self.visible = visible


class LayerState:
	def __init__(self, layer_id: str, layer_type: LayerType, ring: List[LngLat], paint: Dict[str, Any]):
		self.layer_id = layer_id
		self.layer_type = layer_type
		self.ring = ring
		self.paint = paint
		self.visible = True


class InMemoryMap(MapHandle):
	"""In-memory implementation of MapHandle."""

	def __init__(
		self,
		center: Optional[LngLat] = None,
		zoom: Optional[float] = None,
		width: Optional[int] = None,
		height: Optional[int] = None,
		style: Optional[str] = None,
		supported: bool = True,
		auto_load: bool = True
	):
		self.center: LngLat = center or (settings.default_longitude, settings.default_latitude)
		self.zoom = settings.default_zoom if zoom is None else zoom
		self.width = width or settings.map_width_px
		self.height = height or settings.map_height_px
		self.style = style or settings.map_style_light
		self.last_flight_duration: Optional[int] = None
		self.markers: Dict[str, MarkerState] = {}
		self.layers: Dict[str, LayerState] = {}
		self._supported = supported
		self._loaded = False
		self._removed = False
		self._handlers: Dict[MapEvent, List[Callable[..., None]]] = defaultdict(list)
		if auto_load and supported:
			self._loaded = True

	@property
	def supported(self) -> bool:
		return self._supported

	@property
	def loaded(self) -> bool:
		return self._loaded and not self._removed

	def load(self) -> None:
		"""Finish loading and fire the load event."""
		if not self._supported:
			raise MapUnsupportedError(type(self).__name__)
		self._loaded = True
		self._emit(MapEvent.LOAD)

	def _require(self, operation: str) -> None:
		if not self.loaded:
			raise MapNotReadyError(operation)

	# Events

	def on(self, event: MapEvent, handler: Callable[..., None]) -> None:
		self._handlers[MapEvent(event)].append(handler)

	def off(self, event: MapEvent, handler: Callable[..., None]) -> None:
		handlers = self._handlers.get(MapEvent(event), [])
		if handler in handlers:
			handlers.remove(handler)

	def _emit(self, event: MapEvent, *args: Any) -> None:
		for handler in list(self._handlers.get(event, [])):
			try:
				handler(*args)
			except Exception as e:
				logger.error(f"Map '{event.value}' handler failed: {str(e)}")

	def click_marker(self, key: str) -> None:
		"""Simulate a user click on a visible marker."""
		self._require("click_marker")
		state = self.markers.get(key)
		if state is None or not state.visible:
			return
		self._emit(MapEvent.MARKER_CLICK, key)

	# Camera

	def _jump(self, center: Optional[LngLat] = None, zoom: Optional[float] = None) -> None:
		zoom_changed = zoom is not None and zoom != self.zoom
		if center is not None:
			self.center = (float(center[0]), float(center[1]))
		if zoom is not None:
			self.zoom = min(max(float(zoom), 0.0), MAX_MAP_ZOOM)
		if zoom_changed:
			self._emit(MapEvent.ZOOM, self.zoom)
		self._emit(MapEvent.MOVE)

	def zoom_in(self) -> None:
		self._require("zoom_in")
		self._jump(zoom=self.zoom + 1)

	def zoom_out(self) -> None:
		self._require("zoom_out")
		self._jump(zoom=self.zoom - 1)

	def fly_to(self, center: LngLat, zoom: Optional[float] = None, duration: Optional[int] = None) -> None:
		self._require("fly_to")
		self.last_flight_duration = duration
		self._jump(center=center, zoom=zoom)

	def get_zoom(self) -> float:
		self._require("get_zoom")
		return self.zoom

	def get_bounds(self) -> BoundingBox:
		self._require("get_bounds")
		world_size = TILE_SIZE * math.pow(2, self.zoom)
		cx = lng_to_x(self.center[0]) * world_size
		cy = lat_to_y(self.center[1]) * world_size
		half_w = self.width / 2.0
		half_h = self.height / 2.0
		top = min(max((cy - half_h) / world_size, 0.0), 1.0)
		bottom = min(max((cy + half_h) / world_size, 0.0), 1.0)
		return BoundingBox(
			north=y_to_lat(top),
			south=y_to_lat(bottom),
			east=x_to_lng((cx + half_w) / world_size),
			west=x_to_lng((cx - half_w) / world_size)
		)

	def fit_bounds(self, bounds: BoundingBox, padding: int = 0) -> None:
		self._require("fit_bounds")
		x0 = lng_to_x(bounds.west)
		x1 = lng_to_x(bounds.east)
		if x1 < x0:
			x1 += 1.0
		y0 = lat_to_y(bounds.north)
		y1 = lat_to_y(bounds.south)
		span_x = max(x1 - x0, 1e-12)
		span_y = max(y1 - y0, 1e-12)
		usable_w = max(self.width - 2 * padding, 1)
		usable_h = max(self.height - 2 * padding, 1)
		scale = min(usable_w / (span_x * TILE_SIZE), usable_h / (span_y * TILE_SIZE))
		zoom = math.log2(scale)
		center_x = (x0 + x1) / 2.0
		if center_x > 1.0:
			center_x -= 1.0
		self._jump(center=(x_to_lng(center_x), y_to_lat((y0 + y1) / 2.0)), zoom=zoom)

	# Markers

	def add_marker(self, spec: MarkerSpec) -> None:
		self._require("add_marker")
		if spec.key in self.markers:
			raise ValueError(f"Marker {spec.key} already exists")
		self.markers[spec.key] = MarkerState(spec)

	def update_marker(self, spec: MarkerSpec) -> None:
		self._require("update_marker")
		if spec.key not in self.markers:
			raise KeyError(spec.key)
		self.markers[spec.key].spec = spec

	def remove_marker(self, key: str) -> None:
		self._require("remove_marker")
		self.markers.pop(key, None)

	def set_marker_visible(self, key: str, visible: bool) -> None:
		self._require("set_marker_visible")
		if key not in self.markers:
			raise KeyError(key)
		self.markers[key].visible = visible

	def visible_markers(self) -> List[MarkerSpec]:
		return [state.spec for state in self.markers.values() if state.visible]

	# Layers

	def add_layer(self, layer_id: str, layer_type: LayerType, ring: List[LngLat], paint: Dict[str, Any]) -> None:
		self._require("add_layer")
		if layer_id in self.layers:
			raise ValueError(f"Layer {layer_id} already exists")
		self.layers[layer_id] = LayerState(layer_id, LayerType(layer_type), list(ring), dict(paint))

	def has_layer(self, layer_id: str) -> bool:
		self._require("has_layer")
		return layer_id in self.layers

	def remove_layer(self, layer_id: str) -> None:
		self._require("remove_layer")
		if layer_id not in self.layers:
			raise KeyError(layer_id)
		del self.layers[layer_id]

	def set_layer_visible(self, layer_id: str, visible: bool) -> None:
		self._require("set_layer_visible")
		if layer_id not in self.layers:
			raise KeyError(layer_id)
		self.layers[layer_id].visible = visible

	def visible_layers(self) -> List[LayerState]:
		return [layer for layer in self.layers.values() if layer.visible]

	def set_style(self, style_url: str) -> None:
		"""Switch base style. Like browser maps, custom layers do not survive."""
		self._require("set_style")
		self.style = style_url
		self.layers.clear()
		self._emit(MapEvent.STYLE_LOAD)

	def remove(self) -> None:
		self._removed = True
		self._handlers.clear()
		self.markers.clear()
		self.layers.clear()
