import logging
from typing import Callable, List, Optional
from firemap.config import settings
from firemap.renderers.map_handle import MapHandle
from firemap.schemas.viewport import BoundingBox, ViewportState
from firemap.utils.throttle import Scheduler, TrailingThrottle

logger = logging.getLogger(__name__)

ViewportListener = Callable[[ViewportState], None]
ZoomListener = Callable[[float], None]


class ViewportTracker:
	"""
	Reactive view of the map's zoom level and visible bounds.

	Move events are throttled (trailing edge) so downstream consumers see at
	most one update per window no matter how fast the map is dragged. Zoom
	is tracked separately and updated immediately, since it can change
	before the bounds settle.
	"""

	def __init__(
		self,
		map_handle: MapHandle,
		scheduler: Optional[Scheduler] = None,
		interval_seconds: Optional[float] = None
	):
		self.map_handle = map_handle
		self._viewport: Optional[ViewportState] = None
		self._zoom: Optional[float] = None
		self._listeners: List[ViewportListener] = []
		self._zoom_listeners: List[ZoomListener] = []
		self._throttle: TrailingThrottle[ViewportState] = TrailingThrottle(
			self._publish,
			settings.viewport_throttle_seconds if interval_seconds is None else interval_seconds,
			scheduler
		)

	@property
	def viewport(self) -> Optional[ViewportState]:
		"""Last published viewport."""
		return self._viewport

	@property
	def zoom_level(self) -> Optional[float]:
		return self._zoom

	@property
	def bounds(self) -> Optional[BoundingBox]:
		return self._viewport.bounds if self._viewport else None

	def subscribe(self, listener: ViewportListener) -> Callable[[], None]:
		self._listeners.append(listener)
		return lambda: self._listeners.remove(listener) if listener in self._listeners else None

	def subscribe_zoom(self, listener: ZoomListener) -> Callable[[], None]:
		self._zoom_listeners.append(listener)
		return lambda: self._zoom_listeners.remove(listener) if listener in self._zoom_listeners else None

	def on_move(self, bounds: BoundingBox, zoom: float) -> None:
		"""Record a raw movement; published after the throttle window closes."""
		self._throttle.submit(ViewportState(zoom=zoom, bounds=bounds))

	def on_zoom(self, zoom: float) -> None:
		"""Record a zoom change and notify zoom listeners right away."""
		if zoom == self._zoom:
			return
		self._zoom = zoom
		for listener in list(self._zoom_listeners):
			listener(zoom)

	def handle_map_move(self) -> None:
		"""Map event adapter: read the camera from the handle and record it."""
		self.on_move(self.map_handle.get_bounds(), self.map_handle.get_zoom())

	def sync(self) -> ViewportState:
		"""Read the camera now and publish it without throttling."""
		self._throttle.cancel()
		state = ViewportState(zoom=self.map_handle.get_zoom(), bounds=self.map_handle.get_bounds())
		self._publish(state)
		return state

	def crosses_zoom_threshold(self, threshold: float) -> bool:
		"""True once the map is zoomed in to at least threshold."""
		return self._zoom is not None and self._zoom >= threshold

	def _publish(self, state: ViewportState) -> None:
		self._viewport = state
		self.on_zoom(state.zoom)
		for listener in list(self._listeners):
			listener(state)

	def stop(self) -> None:
		"""Drop any pending update."""
		self._throttle.cancel()
