"""
Interface the map core drives. A concrete backend (a browser map bridge, the
headless InMemoryMap, ...) implements it and is injected into the MapView;
no map instance is ever kept in module-level state.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from firemap.schemas.marker import MarkerSpec
from firemap.schemas.viewport import BoundingBox

LngLat = Tuple[float, float]


class LayerType(str, Enum):
	FILL = "fill"
	LINE = "line"


class MapEvent(str, Enum):
	LOAD = "load"
	MOVE = "move"
	ZOOM = "zoom"
	MARKER_CLICK = "marker_click"
	STYLE_LOAD = "style_load"


class MapHandle(ABC):
	"""Camera, marker and layer operations of a rendering backend."""

	@property
	def supported(self) -> bool:
		"""False when the backend cannot render in this environment."""
		return True

	@property
	@abstractmethod
	def loaded(self) -> bool: ...

	# Camera
	@abstractmethod
	def zoom_in(self) -> None: ...

	@abstractmethod
	def zoom_out(self) -> None: ...

	@abstractmethod
	def fly_to(self, center: LngLat, zoom: Optional[float] = None, duration: Optional[int] = None) -> None: ...

	@abstractmethod
	def fit_bounds(self, bounds: BoundingBox, padding: int = 0) -> None: ...

	@abstractmethod
	def get_bounds(self) -> BoundingBox: ...

	@abstractmethod
	def get_zoom(self) -> float: ...

	# Markers
	@abstractmethod
	def add_marker(self, spec: MarkerSpec) -> None: ...

	@abstractmethod
	def update_marker(self, spec: MarkerSpec) -> None: ...

	@abstractmethod
	def remove_marker(self, key: str) -> None: ...

	@abstractmethod
	def set_marker_visible(self, key: str, visible: bool) -> None: ...

	# Layers
	@abstractmethod
	def add_layer(
		self,
		layer_id: str,
		layer_type: LayerType,
		ring: List[LngLat],
		paint: Dict[str, Any]
	) -> None: ...

	@abstractmethod
	def has_layer(self, layer_id: str) -> bool: ...

	@abstractmethod
	def remove_layer(self, layer_id: str) -> None: ...

	@abstractmethod
	def set_layer_visible(self, layer_id: str, visible: bool) -> None: ...

	@abstractmethod
	def set_style(self, style_url: str) -> None: ...

	# Events
	@abstractmethod
	def on(self, event: MapEvent, handler: Callable[..., None]) -> None: ...

	@abstractmethod
	def off(self, event: MapEvent, handler: Callable[..., None]) -> None: ...

	@abstractmethod
	def remove(self) -> None:
		"""Dispose the map; later calls fail with MapNotReadyError."""
