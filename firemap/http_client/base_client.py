import logging
from typing import Optional, Dict, Any
import httpx
from abc import ABC

logger = logging.getLogger(__name__)

class BaseHTTPClient(ABC):
	"""
	Base HTTP client class for API interactions.
	Can be extended for different API clients.
	"""
	
	def __init__(
		self,
		base_url: str,
		default_headers: Optional[Dict[str, str]] = None,
		timeout: float = 30.0,
		max_retries: int = 3,
		transport: Optional[httpx.AsyncBaseTransport] = None
	):
		self.base_url = base_url.rstrip('/')
		self.default_headers = default_headers or {}
		self.timeout = timeout
		self.max_retries = max(1, max_retries)
		self.client = httpx.AsyncClient(
			base_url=self.base_url,
			headers=self.default_headers,
			timeout=self.timeout,
			transport=transport
		)
	
	async def get(
		self,
		endpoint: str,
		params: Optional[Dict[str, Any]] = None,
		headers: Optional[Dict[str, str]] = None
	) -> Dict[str, Any]:
		"""
		Perform a GET request.
		
		Server errors and transport failures are retried up to max_retries
		times; client errors (4xx) are raised immediately.
		
		Args:
			endpoint: API endpoint (relative to base_url)
			params: Query parameters
			headers: Additional headers (merged with default_headers)
		
		Returns:
			Response JSON as dictionary
		"""
		merged_headers = {**self.default_headers, **(headers or {})}
		
		for attempt in range(self.max_retries):
			try:
				response = await self.client.get(
					endpoint,
					params=params,
					headers=merged_headers
				)
				response.raise_for_status()
				return response.json()
			except httpx.HTTPStatusError as e:
				if e.response.status_code < 500 or attempt == self.max_retries - 1:
					raise
				logger.warning(f"GET {endpoint} returned {e.response.status_code}, retrying ({attempt + 1}/{self.max_retries})")
			except httpx.TransportError as e:
				if attempt == self.max_retries - 1:
					raise
				logger.warning(f"GET {endpoint} failed: {str(e)}, retrying ({attempt + 1}/{self.max_retries})")
	
	async def close(self):
		"""Close the HTTP client."""
		await self.client.aclose()
	
	async def __aenter__(self):
		return self
	
	async def __aexit__(self, exc_type, exc_val, exc_tb):
		await self.close()
