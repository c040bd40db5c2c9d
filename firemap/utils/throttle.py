"""
Trailing-edge throttle for high-rate event streams.

Scheduling is injected so the throttle can run on an asyncio loop (whose
``call_later`` already has the right signature) or on a test clock.
"""
import asyncio
import logging
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Cancellable(Protocol):
	def cancel(self) -> Any: ...


class Scheduler(Protocol):
	def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


class TrailingThrottle(Generic[T]):
	"""
	Emit at most one value per interval; the last value submitted within the
	window is the one emitted when the window closes.
	
	Example
	-------
		throttle = TrailingThrottle(on_viewport, interval_seconds=0.1)
		for bounds in drag_events:
			throttle.submit(bounds)   # on_viewport runs once, 100ms later
	"""

	def __init__(
		self,
		callback: Callable[[T], None],
		interval_seconds: float,
		scheduler: Optional[Scheduler] = None
	):
		self.callback = callback
		self.interval_seconds = interval_seconds
		self._scheduler = scheduler
		self._handle: Optional[Cancellable] = None
		self._pending: Optional[T] = None
		self._has_pending = False

	@property
	def is_pending(self) -> bool:
		return self._has_pending

	def _get_scheduler(self) -> Scheduler:
		if self._scheduler is not None:
			return self._scheduler
		return asyncio.get_running_loop()

	def submit(self, value: T) -> None:
		"""Record a value; opens a new window if none is running."""
		self._pending = value
		self._has_pending = True
		if self._handle is None:
			self._handle = self._get_scheduler().call_later(self.interval_seconds, self._flush)

	def _flush(self) -> None:
		self._handle = None
		if not self._has_pending:
			return
		value = self._pending
		self._pending = None
		self._has_pending = False
		self.callback(value)

	def flush_now(self) -> None:
		"""Emit the pending value immediately, closing the current window."""
		if self._handle is not None:
			self._handle.cancel()
		self._flush()

	def cancel(self) -> None:
		"""Drop the pending value and the open window."""
		if self._handle is not None:
			self._handle.cancel()
		self._handle = None
		self._pending = None
		self._has_pending = False
