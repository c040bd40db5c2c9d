import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from firemap.config import settings
from firemap.exceptions import NotFoundError, handle_map_exceptions, safe_map_call
from firemap.renderers.map_handle import MapEvent, MapHandle
from firemap.schemas.marker import MarkerKind, MarkerOp, MarkerSpec
from firemap.schemas.viewport import BoundingBox, ViewportState
from firemap.schemas.wildfire import FireRecord
from firemap.services.marker_reconciler import MarkerReconciler
from firemap.services.perimeter_layer_manager import PerimeterLayerManager
from firemap.services.selection_state import SelectionState
from firemap.services.spatial_clusterer import SpatialClusterer
from firemap.services.theme import Theme, ThemeNotifier
from firemap.services.viewport_tracker import ViewportTracker
from firemap.utils.geo_utils import filter_nearby
from firemap.utils.marker_style import USER_LOCATION_COLOR, MarkerStyle
from firemap.utils.throttle import Scheduler

logger = logging.getLogger(__name__)

USER_LOCATION_KEY = "user-location"
USER_LOCATION_SIZE = 18


class MapView:
	"""
	Wires the map handle to the clustering, marker, perimeter and selection
	components.

	Data flow:
	----------
	map move/zoom -> ViewportTracker (throttled) -> SpatialClusterer.get_clusters
	-> MarkerReconciler.reconcile -> map handle

	The host supplies the map handle, callbacks and theme notifier; nothing is
	read from module-level state.
	"""

	def __init__(
		self,
		map_handle: MapHandle,
		scheduler: Optional[Scheduler] = None,
		on_wildfire_select: Optional[Callable[[Optional[FireRecord]], None]] = None,
		on_map_move: Optional[Callable[[BoundingBox], None]] = None,
		clusterer: Optional[SpatialClusterer] = None,
		theme_notifier: Optional[ThemeNotifier] = None
	):
		self.map_handle = map_handle
		self.on_wildfire_select = on_wildfire_select
		self.on_map_move = on_map_move
		self.clusterer = clusterer or SpatialClusterer()
		self.theme_notifier = theme_notifier or ThemeNotifier()
		self.tracker = ViewportTracker(map_handle, scheduler)
		self.reconciler = MarkerReconciler(map_handle, self.theme_notifier.theme)
		self.perimeters = PerimeterLayerManager(map_handle)
		self.selection = SelectionState(self.reconciler, self.perimeters)
		self.selection.subscribe(self._on_selection)
		self._fires: Dict[str, FireRecord] = {}
		self._user_location: Optional[Tuple[float, float]] = None
		self._initialized = False
		self._bindings: List[Tuple[MapEvent, Callable[..., None]]] = []
		self._unsubscribers: List[Callable[[], None]] = []

	@property
	def map(self) -> Optional[MapHandle]:
		"""The map handle, or None until initialized (or when unsupported)."""
		return self.map_handle if self._initialized else None

	@property
	def wildfires(self) -> List[FireRecord]:
		return list(self._fires.values())

	@property
	def user_location(self) -> Optional[Tuple[float, float]]:
		return self._user_location

	@property
	def selected(self) -> Optional[FireRecord]:
		return self.selection.selected

	def initialize(self) -> Optional[MapHandle]:
		"""
		Attach to the map handle and start tracking the viewport.

		Returns:
			The map handle, or None when the backend cannot render here
		"""
		if self._initialized:
			return self.map_handle
		if not self.map_handle.supported:
			logger.error(f"Map backend {type(self.map_handle).__name__} is not supported in this environment, rendering disabled")
			return None

		self._bind(MapEvent.MOVE, self.tracker.handle_map_move)
		self._bind(MapEvent.ZOOM, self.tracker.on_zoom)
		self._bind(MapEvent.MARKER_CLICK, self.handle_marker_click)
		self._bind(MapEvent.STYLE_LOAD, self.perimeters.restore)
		self._unsubscribers.append(self.tracker.subscribe(self._on_viewport))
		self._unsubscribers.append(self.theme_notifier.subscribe(self._on_theme))
		self._initialized = True

		if self.map_handle.loaded:
			self._on_load()
		else:
			self._bind(MapEvent.LOAD, self._on_load)
		logger.info("Map view initialized")
		return self.map_handle

	def _bind(self, event: MapEvent, handler: Callable[..., None]) -> None:
		self.map_handle.on(event, handler)
		self._bindings.append((event, handler))

	def _on_load(self) -> None:
		safe_map_call("sync_viewport", self.tracker.sync)

	def _on_viewport(self, state: ViewportState) -> None:
		self.refresh(state)
		if self.on_map_move is not None:
			self.on_map_move(state.bounds)

	def refresh(self, viewport: Optional[ViewportState] = None) -> List[MarkerOp]:
		"""
		Re-cluster the current (or given) viewport and reconcile markers.

		Returns:
			The marker operations that were computed
		"""
		if not self._initialized:
			return []
		viewport = viewport or self.tracker.viewport
		if viewport is None:
			return []
		nodes = self.clusterer.get_clusters(viewport.bounds, viewport.zoom)
		return self.reconciler.reconcile(nodes)

	def set_wildfires(self, fires: Iterable[FireRecord]) -> bool:
		"""
		Replace the fire set shown on the map.

		Args:
			fires: Full current fire list from the backend

		Returns:
			True if the clusters were rebuilt
		"""
		fires = list(fires)
		self._fires = {fire.id: fire for fire in fires}

		selected_id = self.selection.selected_id
		if selected_id is not None and selected_id not in self._fires:
			logger.info(f"Selected wildfire {selected_id} is no longer in the feed")
			self.deselect()
		elif selected_id is not None:
			self.selection.refresh(self._fires[selected_id])

		rebuilt = self.clusterer.load(fires)
		if rebuilt:
			self.refresh()
		return rebuilt

	def handle_marker_click(self, key: str) -> None:
		"""Select a clicked fire, or zoom into a clicked cluster."""
		spec = self.reconciler.rendered.get(key)
		if spec is None:
			return

		if spec.kind == MarkerKind.CLUSTER:
			try:
				zoom = self.clusterer.expansion_zoom(spec.cluster_id)
			except NotFoundError:
				logger.warning(f"Cluster {spec.cluster_id} vanished before it could be expanded")
				return
			safe_map_call("fly_to", self.map_handle.fly_to, (spec.longitude, spec.latitude), zoom)
			return

		fire = self._fires.get(spec.fire_id)
		if fire is None:
			logger.warning(f"Clicked marker {key} has no matching wildfire")
			return
		self.select(fire)

	def _on_selection(self, fire: Optional[FireRecord]) -> None:
		if self.on_wildfire_select is not None:
			self.on_wildfire_select(fire)

	def select(self, fire: FireRecord) -> None:
		"""Select a fire; without a perimeter the camera flies to its point instead."""
		shown = self.selection.select(fire)
		if not shown and fire.has_valid_location:
			safe_map_call(
				"fly_to",
				self.map_handle.fly_to,
				(fire.longitude, fire.latitude),
				settings.selected_fire_zoom
			)

	def deselect(self) -> None:
		self.selection.deselect()

	@handle_map_exceptions()
	def zoom_in(self) -> None:
		self.map_handle.zoom_in()

	@handle_map_exceptions()
	def zoom_out(self) -> None:
		self.map_handle.zoom_out()

	def _user_marker_spec(self) -> MarkerSpec:
		latitude, longitude = self._user_location
		return MarkerSpec(
			key=USER_LOCATION_KEY,
			kind=MarkerKind.USER_LOCATION,
			latitude=latitude,
			longitude=longitude,
			size=USER_LOCATION_SIZE,
			color=USER_LOCATION_COLOR,
			border_color=MarkerStyle.border_color(self.theme_notifier.theme)
		)

	def set_user_location(self, latitude: float, longitude: float) -> None:
		"""
		Place (or move) the single user-location marker and fly to it.

		Args:
			latitude: User latitude in degrees
			longitude: User longitude in degrees
		"""
		had_marker = self._user_location is not None
		self._user_location = (latitude, longitude)
		spec = self._user_marker_spec()
		if had_marker:
			safe_map_call("update_marker", self.map_handle.update_marker, spec)
		else:
			safe_map_call("add_marker", self.map_handle.add_marker, spec)
		safe_map_call(
			"fly_to",
			self.map_handle.fly_to,
			(longitude, latitude),
			settings.user_location_zoom,
			settings.user_location_fly_duration_ms
		)

	def nearby_fires(self, radius_miles: Optional[float] = None) -> List[FireRecord]:
		"""Fires within radius_miles of the user location (empty when unknown)."""
		if self._user_location is None:
			return []
		radius = settings.nearby_radius_miles if radius_miles is None else radius_miles
		latitude, longitude = self._user_location
		return filter_nearby(self._fires.values(), latitude, longitude, radius)

	def _on_theme(self, theme: Theme) -> None:
		# set_style fires STYLE_LOAD, which restores the perimeter layers
		safe_map_call("set_style", self.map_handle.set_style, settings.style_for_theme(theme))
		self.reconciler.set_theme(theme)
		if self._user_location is not None:
			safe_map_call("update_marker", self.map_handle.update_marker, self._user_marker_spec())

	def dispose(self) -> None:
		"""Detach from the map and release it."""
		self.tracker.stop()
		for unsubscribe in self._unsubscribers:
			unsubscribe()
		self._unsubscribers = []
		for event, handler in self._bindings:
			safe_map_call("off", self.map_handle.off, event, handler)
		self._bindings = []
		if self._initialized:
			safe_map_call("remove", self.map_handle.remove)
		self._initialized = False
		logger.info("Map view disposed")
