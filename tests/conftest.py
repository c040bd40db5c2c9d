"""
Pytest configuration and fixtures.
"""
import json
import pytest
from firemap.renderers.memory_map import InMemoryMap
from firemap.schemas.wildfire import FireRecord


class ManualHandle:
	"""Timer handle returned by ManualScheduler."""

	def __init__(self, when, callback, args):
		self.when = when
		self.callback = callback
		self.args = args
		self.cancelled = False

	def cancel(self):
		self.cancelled = True


class ManualScheduler:
	"""Test clock with the call_later signature of an asyncio loop."""

	def __init__(self):
		self.now = 0.0
		self.handles = []

	def call_later(self, delay, callback, *args):
		handle = ManualHandle(self.now + delay, callback, args)
		self.handles.append(handle)
		return handle

	@property
	def pending(self):
		return [h for h in self.handles if not h.cancelled]

	def advance(self, seconds):
		"""Move the clock forward, running every timer that comes due in order."""
		target = self.now + seconds
		while True:
			due = [h for h in self.pending if h.when <= target]
			if not due:
				break
			handle = min(due, key=lambda h: h.when)
			self.handles.remove(handle)
			self.now = handle.when
			handle.callback(*handle.args)
		self.now = target


def perimeter_json(points):
	"""Perimeter string in the backend's format from (lng, lat) pairs."""
	return json.dumps([{"lng": lng, "lat": lat} for lng, lat in points])


@pytest.fixture
def scheduler():
	"""Manually advanced scheduler."""
	return ManualScheduler()


@pytest.fixture
def make_fire():
	"""Factory for FireRecord objects with sensible defaults."""
	def _make_fire(fire_id="fire-1", latitude=37.0, longitude=-119.0, **overrides):
		data = {
			"id": fire_id,
			"name": f"Fire {fire_id}",
			"location": "Test County, CA",
			"latitude": latitude,
			"longitude": longitude,
			"acres": 500,
			"containment": 20,
			"severity": "medium",
		}
		data.update(overrides)
		return FireRecord.from_dict(data)
	return _make_fire


@pytest.fixture
def sample_perimeter():
	"""Small square perimeter around (-119.5, 37.85)."""
	return perimeter_json([
		(-119.6, 37.8),
		(-119.4, 37.8),
		(-119.4, 37.9),
		(-119.6, 37.9),
	])


@pytest.fixture
def seed_fires(sample_perimeter):
	"""Seed wildfires served by the dashboard backend."""
	records = [
		{
			"id": "crf-001",
			"name": "California Ridge Fire",
			"location": "Yosemite National Park, CA",
			"latitude": 37.8651,
			"longitude": -119.5383,
			"acres": 1243,
			"containment": 15,
			"startDate": "2023-07-12",
			"severity": "high",
			"cause": "Lightning",
			"perimeterCoordinates": sample_perimeter,
		},
		{
			"id": "emf-002",
			"name": "Eagle Mountain Fire",
			"location": "Eagle County, CO",
			"latitude": 39.6553,
			"longitude": -106.8287,
			"acres": 487,
			"containment": 45,
			"severity": "medium",
		},
		{
			"id": "blf-003",
			"name": "Blue Lake Fire",
			"location": "Sierra National Forest, CA",
			"latitude": 37.2046,
			"longitude": -119.2539,
			"acres": 150,
			"containment": 85,
			"severity": "low",
		},
		{
			"id": "rrf-004",
			"name": "Red Rock Fire",
			"location": "Coconino County, AZ",
			"latitude": 35.9728,
			"longitude": -111.9876,
			"acres": 3200,
			"containment": 10,
			"severity": "high",
		},
		{
			"id": "gbf-005",
			"name": "Green Basin Fire",
			"location": "Summit County, UT",
			"latitude": 40.6461,
			"longitude": -111.4980,
			"acres": 890,
			"containment": 60,
			"severity": "medium",
		},
	]
	return [FireRecord.from_dict(r) for r in records]


@pytest.fixture
def memory_map():
	"""Loaded headless map centred on the contiguous US."""
	return InMemoryMap(center=(-98.5795, 39.8283), zoom=4, width=1280, height=800)
