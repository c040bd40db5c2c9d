"""
Unit tests for WildfireClient.
"""
import json
import httpx
import pytest
from firemap.exceptions import NotFoundError, ServiceError, ValidationError
from firemap.http_client.wildfire_client import WildfireClient
from firemap.schemas.viewport import BoundingBox
from firemap.schemas.wildfire import FireRecord


def _fire_payload(fire_id="crf-001", **overrides):
	payload = {
		"id": fire_id,
		"name": "California Ridge Fire",
		"location": "Yosemite National Park, CA",
		"latitude": 37.8651,
		"longitude": -119.5383,
		"acres": 1243,
		"containment": 15,
		"severity": "high"
	}
	payload.update(overrides)
	return payload


def _client(handler, max_retries=3):
	client = WildfireClient(base_url="http://backend.test", transport=httpx.MockTransport(handler))
	client.max_retries = max_retries
	return client


class TestGetWildfires:
	"""Test cases for WildfireClient.get_wildfires."""
	
	@pytest.mark.asyncio
	async def test_parses_wildfires(self):
		"""Test the wildfire list is unwrapped and parsed."""
		def handler(request):
			assert request.url.path == "/api/wildfires"
			return httpx.Response(200, json={"wildfires": [_fire_payload(), _fire_payload("emf-002", severity="medium")]})
		
		async with _client(handler) as client:
			wildfires = await client.get_wildfires()
		
		assert [f.id for f in wildfires] == ["crf-001", "emf-002"]
		assert all(isinstance(f, FireRecord) for f in wildfires)
	
	@pytest.mark.asyncio
	async def test_skips_malformed_records(self):
		"""Test records failing validation are dropped, not fatal."""
		def handler(request):
			return httpx.Response(200, json={"wildfires": [
				_fire_payload(),
				{"id": "bad-001", "name": "No severity"},
				_fire_payload("bad-002", containment=140),
				"not a record"
			]})
		
		async with _client(handler) as client:
			wildfires = await client.get_wildfires()
		
		assert [f.id for f in wildfires] == ["crf-001"]
	
	@pytest.mark.asyncio
	async def test_bounds_sent_as_json(self):
		"""Test the bounds query parameter is a JSON object."""
		seen = {}
		
		def handler(request):
			seen["bounds"] = json.loads(request.url.params["bounds"])
			return httpx.Response(200, json={"wildfires": []})
		
		bounds = BoundingBox(north=45, south=30, east=-100, west=-125)
		async with _client(handler) as client:
			await client.get_wildfires(bounds)
		
		assert seen["bounds"] == {"north": 45, "south": 30, "east": -100, "west": -125}


class TestGetWildfire:
	"""Test cases for WildfireClient.get_wildfire."""
	
	@pytest.mark.asyncio
	async def test_found(self):
		"""Test a single wildfire is unwrapped."""
		def handler(request):
			assert request.url.path == "/api/wildfires/crf-001"
			return httpx.Response(200, json={"wildfire": _fire_payload()})
		
		async with _client(handler) as client:
			fire = await client.get_wildfire("crf-001")
		
		assert fire.name == "California Ridge Fire"
	
	@pytest.mark.asyncio
	async def test_not_found(self):
		"""Test a 404 becomes NotFoundError without retrying."""
		calls = []
		
		def handler(request):
			calls.append(request)
			return httpx.Response(404, json={"message": "Wildfire not found"})
		
		async with _client(handler) as client:
			with pytest.raises(NotFoundError):
				await client.get_wildfire("missing")
		
		assert len(calls) == 1


class TestRetries:
	"""Test cases for retry behaviour inherited from BaseHTTPClient."""
	
	@pytest.mark.asyncio
	async def test_server_error_retried(self):
		"""Test a 5xx followed by success returns the data."""
		responses = [httpx.Response(503), httpx.Response(200, json={"alerts": []})]
		
		def handler(request):
			return responses.pop(0)
		
		async with _client(handler) as client:
			alerts = await client.get_active_alerts()
		
		assert alerts == []
		assert responses == []
	
	@pytest.mark.asyncio
	async def test_server_error_exhausts_retries(self):
		"""Test persistent 5xx responses raise ServiceError after max_retries."""
		calls = []
		
		def handler(request):
			calls.append(request)
			return httpx.Response(500)
		
		async with _client(handler, max_retries=3) as client:
			with pytest.raises(ServiceError) as exc_info:
				await client.get_active_alerts()
		
		assert len(calls) == 3
		assert exc_info.value.status_code == 500
	
	@pytest.mark.asyncio
	async def test_client_error_not_retried(self):
		"""Test 4xx responses fail immediately."""
		calls = []
		
		def handler(request):
			calls.append(request)
			return httpx.Response(400)
		
		async with _client(handler) as client:
			with pytest.raises(ServiceError) as exc_info:
				await client.get_active_alerts()
		
		assert len(calls) == 1
		assert exc_info.value.status_code == 400
	
	@pytest.mark.asyncio
	async def test_network_error(self):
		"""Test transport failures are retried and then raised as ServiceError."""
		calls = []
		
		def handler(request):
			calls.append(request)
			raise httpx.ConnectError("connection refused", request=request)
		
		async with _client(handler, max_retries=2) as client:
			with pytest.raises(ServiceError):
				await client.get_wildfires()
		
		assert len(calls) == 2


class TestOtherEndpoints:
	"""Test cases for nearby, stats, alerts and updates."""
	
	@pytest.mark.asyncio
	async def test_nearby_default_radius(self):
		"""Test the nearby query defaults to the configured radius."""
		seen = {}
		
		def handler(request):
			seen.update(request.url.params)
			return httpx.Response(200, json={"wildfires": [_fire_payload()]})
		
		async with _client(handler) as client:
			wildfires = await client.get_nearby_wildfires(37.8, -119.5)
		
		assert len(wildfires) == 1
		assert float(seen["radius"]) == 100
		assert float(seen["latitude"]) == 37.8
	
	@pytest.mark.asyncio
	async def test_stats(self):
		"""Test stats are unwrapped."""
		def handler(request):
			return httpx.Response(200, json={"stats": {
				"activeFiresCount": 5,
				"totalAcresBurning": 5970,
				"nearbyFiresCount": 2
			}})
		
		async with _client(handler) as client:
			stats = await client.get_stats(37.8, -119.5)
		
		assert stats.active_fires_count == 5
		assert stats.total_acres_burning == 5970
		assert stats.nearby_fires_count == 2
	
	@pytest.mark.asyncio
	async def test_wildfire_alerts_and_updates(self):
		"""Test per-wildfire alerts and updates."""
		def handler(request):
			if request.url.path == "/api/alerts/wildfire/emf-002":
				return httpx.Response(200, json={"alerts": [{
					"id": "alert-001",
					"type": "evacuation",
					"title": "Evacuation Order",
					"message": "Evacuate now",
					"severity": "high",
					"wildfireId": "emf-002",
					"createdAt": "2023-07-14T10:00:00Z"
				}]})
			return httpx.Response(200, json={"updates": [{
				"id": 1,
				"wildfireId": "emf-002",
				"content": "Containment at 45%",
				"timestamp": "2023-07-14T10:00:00Z"
			}]})
		
		async with _client(handler) as client:
			alerts = await client.get_wildfire_alerts("emf-002")
			updates = await client.get_recent_updates("emf-002")
		
		assert [a.id for a in alerts] == ["alert-001"]
		assert updates[0].content == "Containment at 45%"


class TestMalformedWildfire:
	"""Test cases for malformed single-wildfire responses."""
	
	@pytest.mark.asyncio
	async def test_malformed_record_raises(self):
		"""Test an invalid single record raises ValidationError."""
		def handler(request):
			return httpx.Response(200, json={"wildfire": {"id": "crf-001"}})
		
		async with _client(handler) as client:
			with pytest.raises(ValidationError):
				await client.get_wildfire("crf-001")


class TestUnexpectedBody:
	"""Test cases for successful responses that do not carry a JSON object."""
	
	@pytest.mark.asyncio
	async def test_html_body_raises_service_error(self):
		"""Test a proxy error page served with 200 becomes a ServiceError."""
		def handler(request):
			return httpx.Response(200, text="<html>gateway</html>", headers={"Content-Type": "text/html"})
		
		async with _client(handler) as client:
			with pytest.raises(ServiceError):
				await client.get_wildfires()
	
	@pytest.mark.asyncio
	async def test_non_object_body_raises_service_error(self):
		"""Test a JSON body that is not an object is rejected."""
		def handler(request):
			return httpx.Response(200, json=[_fire_payload()])
		
		async with _client(handler) as client:
			with pytest.raises(ServiceError):
				await client.get_wildfires()
