import logging
from typing import Iterable, List, Optional, Set
from firemap.schemas.alert import Alert

logger = logging.getLogger(__name__)


class AlertBoard:
	"""
	Client-side view of backend alerts.

	Alerts are read-only copies; dismissing one is local bookkeeping that
	survives refreshes but is never sent back to the backend.
	"""

	def __init__(self, alerts: Optional[Iterable[Alert]] = None):
		self._alerts: List[Alert] = []
		self._dismissed: Set[str] = set()
		if alerts is not None:
			self.replace(alerts)

	def replace(self, alerts: Iterable[Alert]) -> None:
		"""Swap in a freshly fetched alert list, keeping dismissals."""
		self._alerts = sorted(alerts, key=lambda a: a.created_at, reverse=True)

	def dismiss(self, alert_id: str) -> bool:
		"""
		Hide an alert locally.

		Returns:
			True if the alert was visible before
		"""
		was_visible = any(a.id == alert_id for a in self.visible)
		self._dismissed.add(alert_id)
		if was_visible:
			logger.info(f"Dismissed alert {alert_id}")
		return was_visible

	def is_dismissed(self, alert_id: str) -> bool:
		return alert_id in self._dismissed

	@property
	def visible(self) -> List[Alert]:
		"""Active, not dismissed alerts, newest first."""
		return [a for a in self._alerts if a.active and a.id not in self._dismissed]

	@property
	def top(self) -> Optional[Alert]:
		"""The alert a banner should show, if any."""
		visible = self.visible
		return visible[0] if visible else None

	def alerts_for(self, wildfire_id: str) -> List[Alert]:
		return [a for a in self.visible if a.wildfire_id == wildfire_id]
