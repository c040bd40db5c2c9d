import logging
from typing import Dict, Iterable, List, Optional
from firemap.exceptions import safe_map_call
from firemap.renderers.map_handle import MapHandle
from firemap.schemas.cluster import ClusterAggregate, ClusterNode
from firemap.schemas.marker import MarkerKind, MarkerOp, MarkerOpType, MarkerSpec
from firemap.schemas.wildfire import FireRecord
from firemap.utils.marker_style import CLUSTER_COLOR, MarkerStyle

logger = logging.getLogger(__name__)


class MarkerReconciler:
	"""
	Keeps the map's marker set in line with the latest cluster result.

	Each call computes the desired marker set, diffs it against what is
	already rendered and applies a minimal edit list:

	1. remove markers whose key is no longer present
	2. update markers whose position or appearance changed
	3. create markers for new keys

	While a fire is selected every marker is hidden rather than removed, so
	deselection only has to flip visibility back.
	"""

	def __init__(self, map_handle: MapHandle, theme: str = "light"):
		self.map_handle = map_handle
		self.theme = theme
		self._rendered: Dict[str, MarkerSpec] = {}
		self._hidden = False

	@property
	def rendered(self) -> Dict[str, MarkerSpec]:
		"""Markers currently on the map, keyed by marker key."""
		return dict(self._rendered)

	@property
	def hidden(self) -> bool:
		return self._hidden

	def build_spec(self, node: ClusterNode) -> Optional[MarkerSpec]:
		"""
		Describe the marker for one cluster node.

		Args:
			node: Leaf or aggregate node from the clusterer

		Returns:
			MarkerSpec, or None when the node cannot be placed on the map
		"""
		border_color = MarkerStyle.border_color(self.theme)

		if isinstance(node, ClusterAggregate):
			size = MarkerStyle.cluster_size(node.count)
			return MarkerSpec(
				key=node.key,
				kind=MarkerKind.CLUSTER,
				latitude=node.latitude,
				longitude=node.longitude,
				size=size,
				color=CLUSTER_COLOR,
				border_color=border_color,
				label=str(node.count),
				font_size=MarkerStyle.cluster_font_size(size),
				cluster_id=node.cluster_id
			)

		fire = node.payload
		if not isinstance(fire, FireRecord) or not fire.has_valid_location:
			logger.warning(f"Skipping marker for {node.key}: missing or malformed coordinates")
			return None

		return MarkerSpec(
			key=node.key,
			kind=MarkerKind.FIRE,
			latitude=fire.latitude,
			longitude=fire.longitude,
			size=MarkerStyle.fire_size(fire.acres),
			color=MarkerStyle.severity_color(fire.severity),
			border_color=border_color,
			pulsing=fire.is_active,
			badge=MarkerStyle.containment_badge(fire.containment),
			fire_id=fire.id
		)

	def desired_specs(self, nodes: Iterable[ClusterNode]) -> Dict[str, MarkerSpec]:
		desired: Dict[str, MarkerSpec] = {}
		for node in nodes:
			spec = self.build_spec(node)
			if spec is not None:
				desired[spec.key] = spec
		return desired

	def diff(self, nodes: Iterable[ClusterNode]) -> List[MarkerOp]:
		"""
		Compute the edit list that turns the rendered markers into the desired set.
		Pure: neither the map nor the rendered state is touched.
		"""
		desired = self.desired_specs(nodes)
		removes = [
			MarkerOp(op=MarkerOpType.REMOVE, key=key)
			for key in self._rendered
			if key not in desired
		]
		updates = []
		creates = []
		for key, spec in desired.items():
			current = self._rendered.get(key)
			if current is None:
				creates.append(MarkerOp(op=MarkerOpType.CREATE, key=key, spec=spec))
			elif current != spec:
				updates.append(MarkerOp(op=MarkerOpType.UPDATE, key=key, spec=spec))
		return removes + updates + creates

	def apply(self, ops: List[MarkerOp]) -> int:
		"""
		Execute an edit list against the map handle.
		Failed calls are logged and skipped; only successful ones are recorded.

		Returns:
			Number of operations applied
		"""
		applied = 0
		for op in ops:
			if op.op == MarkerOpType.REMOVE:
				if safe_map_call("remove_marker", self._remove, op.key, default=False):
					applied += 1
			elif op.op == MarkerOpType.UPDATE:
				if safe_map_call("update_marker", self._update, op.spec, default=False):
					applied += 1
			elif op.op == MarkerOpType.CREATE:
				if safe_map_call("add_marker", self._create, op.spec, default=False):
					applied += 1
		return applied

	def _remove(self, key: str) -> bool:
		self.map_handle.remove_marker(key)
		self._rendered.pop(key, None)
		return True

	def _update(self, spec: MarkerSpec) -> bool:
		self.map_handle.update_marker(spec)
		self._rendered[spec.key] = spec
		return True

	def _create(self, spec: MarkerSpec) -> bool:
		self.map_handle.add_marker(spec)
		self._rendered[spec.key] = spec
		if self._hidden:
			self.map_handle.set_marker_visible(spec.key, False)
		return True

	def reconcile(self, nodes: Iterable[ClusterNode]) -> List[MarkerOp]:
		"""Diff the nodes against the rendered markers and apply the result."""
		ops = self.diff(nodes)
		if ops:
			applied = self.apply(ops)
			logger.debug(f"Reconciled markers: {applied}/{len(ops)} operations applied, {len(self._rendered)} on map")
		return ops

	def hide_all(self) -> None:
		"""Hide every marker without destroying it."""
		self._hidden = True
		for key in list(self._rendered):
			safe_map_call("set_marker_visible", self.map_handle.set_marker_visible, key, False)

	def show_all(self) -> None:
		self._hidden = False
		for key in list(self._rendered):
			safe_map_call("set_marker_visible", self.map_handle.set_marker_visible, key, True)

	def set_theme(self, theme: str) -> List[MarkerOp]:
		"""
		Restyle rendered markers for a new theme.

		Returns:
			The update operations that were applied
		"""
		self.theme = theme
		border_color = MarkerStyle.border_color(theme)
		ops = [
			MarkerOp(
				op=MarkerOpType.UPDATE,
				key=key,
				spec=spec.model_copy(update={"border_color": border_color})
			)
			for key, spec in self._rendered.items()
			if spec.border_color != border_color
		]
		self.apply(ops)
		return ops

	def clear(self) -> None:
		"""Remove every rendered marker."""
		self.apply([MarkerOp(op=MarkerOpType.REMOVE, key=key) for key in list(self._rendered)])
