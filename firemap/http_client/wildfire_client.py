"""
HTTP client for the wildfire dashboard backend.
"""
import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
import httpx
from pydantic import ValidationError as PydanticValidationError
from firemap.config import settings
from firemap.exceptions import NotFoundError, ServiceError, ValidationError
from firemap.http_client.base_client import BaseHTTPClient
from firemap.schemas.alert import Alert, FireUpdate, WildfireStats
from firemap.schemas.base import BaseSchema
from firemap.schemas.viewport import BoundingBox
from firemap.schemas.wildfire import FireRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseSchema)


class WildfireClient(BaseHTTPClient):
	"""Client for fetching fires, alerts, updates and stats from the backend."""

	def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
		super().__init__(
			base_url=base_url or settings.firemap_api_base_url,
			default_headers={"Accept": "application/json"},
			timeout=settings.http_timeout_seconds,
			max_retries=settings.http_max_retries,
			transport=transport
		)

	@staticmethod
	def parse_records(raw_records: Any, schema_class: Type[T], entity_type: str = "entity") -> List[T]:
		"""
		Validate a list of raw records, skipping the ones that fail.
		
		Args:
			raw_records: List of dictionaries from the response body
			schema_class: Schema class with from_dict method
			entity_type: Type of entity (for logging)
		
		Returns:
			List of schema objects (only successful validations)
		"""
		if not isinstance(raw_records, list):
			logger.warning(f"Expected a list of {entity_type} records, got {type(raw_records).__name__}")
			return []
		
		results = []
		for raw in raw_records:
			try:
				results.append(schema_class.from_dict(raw))
			except (PydanticValidationError, TypeError) as e:
				record_id = raw.get("id") if isinstance(raw, dict) else None
				logger.warning(f"Skipping malformed {entity_type} record {record_id}: {str(e)}")
		return results

	async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
		try:
			data = await self.get(endpoint, params=params)
		except httpx.HTTPStatusError as e:
			raise ServiceError(
				f"Backend request {endpoint} failed with status {e.response.status_code}",
				status_code=e.response.status_code
			) from e
		except httpx.TransportError as e:
			raise ServiceError(f"Backend request {endpoint} failed: {str(e)}") from e
		except ValueError as e:
			# JSONDecodeError, e.g. an HTML error page from a proxy
			raise ServiceError(f"Backend request {endpoint} returned a non-JSON body: {str(e)}") from e
		if not isinstance(data, dict):
			raise ServiceError(f"Backend request {endpoint} returned {type(data).__name__}, expected an object")
		return data

	async def get_wildfires(self, bounds: Optional[BoundingBox] = None) -> List[FireRecord]:
		"""
		Fetch all wildfires, or only those whose point lies inside bounds.
		
		Args:
			bounds: Optional viewport bounds, sent as a JSON query parameter
		
		Returns:
			List of FireRecord objects
		"""
		params = None
		if bounds is not None:
			params = {"bounds": json.dumps(bounds.to_dict())}
		data = await self._get("/api/wildfires", params=params)
		wildfires = self.parse_records(data.get("wildfires", []), FireRecord, "wildfire")
		logger.info(f"Fetched {len(wildfires)} wildfires")
		return wildfires

	async def get_wildfire(self, wildfire_id: str) -> FireRecord:
		try:
			data = await self._get(f"/api/wildfires/{wildfire_id}")
		except ServiceError as e:
			if e.status_code == httpx.codes.NOT_FOUND:
				raise NotFoundError("Wildfire", wildfire_id) from e
			raise
		try:
			return FireRecord.from_dict(data.get("wildfire", {}))
		except PydanticValidationError as e:
			raise ValidationError(f"Malformed wildfire record {wildfire_id}", detail=str(e)) from e

	async def get_nearby_wildfires(self, latitude: float, longitude: float, radius_miles: Optional[float] = None) -> List[FireRecord]:
		params = {
			"latitude": latitude,
			"longitude": longitude,
			"radius": settings.nearby_radius_miles if radius_miles is None else radius_miles
		}
		data = await self._get("/api/wildfires/nearby", params=params)
		return self.parse_records(data.get("wildfires", []), FireRecord, "wildfire")

	async def get_stats(self, latitude: Optional[float] = None, longitude: Optional[float] = None) -> WildfireStats:
		params = None
		if latitude is not None and longitude is not None:
			params = {"latitude": latitude, "longitude": longitude}
		data = await self._get("/api/wildfires/stats", params=params)
		return WildfireStats.from_dict(data.get("stats", {}))

	async def get_active_alerts(self) -> List[Alert]:
		data = await self._get("/api/alerts/active")
		return self.parse_records(data.get("alerts", []), Alert, "alert")

	async def get_wildfire_alerts(self, wildfire_id: str) -> List[Alert]:
		data = await self._get(f"/api/alerts/wildfire/{wildfire_id}")
		return self.parse_records(data.get("alerts", []), Alert, "alert")

	async def get_recent_updates(self, wildfire_id: str) -> List[FireUpdate]:
		data = await self._get(f"/api/updates/wildfire/{wildfire_id}")
		return self.parse_records(data.get("updates", []), FireUpdate, "update")
