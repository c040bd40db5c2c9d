import asyncio
import logging
from typing import Callable, List, Optional
from firemap.exceptions import FireMapException
from firemap.http_client.wildfire_client import WildfireClient
from firemap.schemas.alert import Alert
from firemap.schemas.viewport import BoundingBox
from firemap.schemas.wildfire import FireRecord

logger = logging.getLogger(__name__)


class WildfireFeed:
	"""
	Pulls fires and alerts from the backend and hands them to the map.

	Only the newest wildfire request may deliver: starting a request cancels
	the one still in flight, so a slow response for an old viewport never
	overwrites a newer one.
	"""

	def __init__(
		self,
		client: WildfireClient,
		on_wildfires: Callable[[List[FireRecord]], None],
		on_alerts: Optional[Callable[[List[Alert]], None]] = None
	):
		self.client = client
		self.on_wildfires = on_wildfires
		self.on_alerts = on_alerts
		self._task: Optional[asyncio.Task] = None

	@property
	def in_flight(self) -> bool:
		return self._task is not None and not self._task.done()

	def request_wildfires(self, bounds: Optional[BoundingBox] = None) -> asyncio.Task:
		"""
		Start fetching wildfires, superseding any request still running.

		Args:
			bounds: Optional viewport bounds to restrict the query to

		Returns:
			The task delivering the result
		"""
		if self.in_flight:
			logger.debug("Cancelling superseded wildfire request")
			self._task.cancel()
		self._task = asyncio.create_task(self._fetch_wildfires(bounds))
		return self._task

	async def _fetch_wildfires(self, bounds: Optional[BoundingBox]) -> Optional[List[FireRecord]]:
		try:
			wildfires = await self.client.get_wildfires(bounds)
		except FireMapException as e:
			logger.error(f"Failed to fetch wildfires: {e.message}")
			return None
		self.on_wildfires(wildfires)
		return wildfires

	async def refresh_alerts(self) -> Optional[List[Alert]]:
		"""Fetch active alerts and pass them to on_alerts."""
		try:
			alerts = await self.client.get_active_alerts()
		except FireMapException as e:
			logger.error(f"Failed to fetch alerts: {e.message}")
			return None
		if self.on_alerts is not None:
			self.on_alerts(alerts)
		return alerts

	async def aclose(self) -> None:
		"""Cancel the pending request and close the HTTP client."""
		if self.in_flight:
			self._task.cancel()
			try:
				await self._task
			except asyncio.CancelledError:
				pass
		self._task = None
		await self.client.close()
