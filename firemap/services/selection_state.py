import logging
from typing import Callable, List, Optional
from firemap.schemas.wildfire import FireRecord
from firemap.services.marker_reconciler import MarkerReconciler
from firemap.services.perimeter_layer_manager import PerimeterLayerManager

logger = logging.getLogger(__name__)

SelectionListener = Callable[[Optional[FireRecord]], None]


class SelectionState:
	"""
	Tracks the single selected fire.

	States are Unselected (initial) and Selected(fire_id). Selecting while
	another fire is selected is a direct transition: the old perimeter is
	hidden as part of showing the new one, never leaving both visible.
	"""

	def __init__(self, reconciler: MarkerReconciler, perimeters: PerimeterLayerManager):
		self.reconciler = reconciler
		self.perimeters = perimeters
		self._selected: Optional[FireRecord] = None
		self._listeners: List[SelectionListener] = []

	@property
	def selected(self) -> Optional[FireRecord]:
		return self._selected

	@property
	def selected_id(self) -> Optional[str]:
		return self._selected.id if self._selected else None

	@property
	def is_selected(self) -> bool:
		return self._selected is not None

	def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
		"""Register a listener; returns a callable that unregisters it."""
		self._listeners.append(listener)
		return lambda: self._listeners.remove(listener) if listener in self._listeners else None

	def _notify(self) -> None:
		for listener in list(self._listeners):
			listener(self._selected)

	def select(self, fire: FireRecord) -> bool:
		"""
		Enter Selected(fire.id).

		Returns:
			True if the perimeter of the fire is visible afterwards
		"""
		previous_id = self.selected_id
		self._selected = fire
		self.reconciler.hide_all()
		shown = self.perimeters.show(fire)
		if not shown:
			# The new fire has no perimeter; the previous one must not linger.
			self.perimeters.hide_all()
		if previous_id != fire.id:
			logger.info(f"Selected wildfire {fire.id} (previous: {previous_id})")
			self._notify()
		return shown

	def deselect(self) -> None:
		"""Return to Unselected: markers come back, perimeters go away."""
		if self._selected is None:
			return
		logger.info(f"Deselected wildfire {self._selected.id}")
		self._selected = None
		self.reconciler.show_all()
		self.perimeters.hide_all()
		self._notify()

	def refresh(self, fire: FireRecord) -> None:
		"""Swap in a fresher record of the selected fire and update its perimeter."""
		if self._selected is None or self._selected.id != fire.id:
			return
		self._selected = fire
		if fire.id in self.perimeters.layers:
			self.perimeters.update(fire)
		elif fire.perimeter is not None:
			self.perimeters.show(fire)
