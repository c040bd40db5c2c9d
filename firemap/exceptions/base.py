from typing import Optional
from httpx import codes

class FireMapException(Exception):
	"""
	Base exception class for all FireMap custom exceptions.
	All service layer exceptions should inherit from this.
	"""
	def __init__(
		self,
		message: str,
		status_code: int = codes.INTERNAL_SERVER_ERROR,
		detail: Optional[str] = None
	):
		self.message = message
		self.status_code = status_code
		self.detail = detail or message
		super().__init__(self.message)

class NotFoundError(FireMapException):
	"""
	Exception raised when a resource is not found.
	Maps to HTTP 404.
	"""
	def __init__(self, resource_type: str, resource_id: str):
		message = f"{resource_type} '{resource_id}' not found"
		super().__init__(
			message=message,
			status_code=codes.NOT_FOUND,
			detail=message
		)

class ValidationError(FireMapException):
	"""
	Exception raised when validation fails.
	Maps to HTTP 400.
	"""
	def __init__(self, message: str, detail: Optional[str] = None):
		super().__init__(
			message=message,
			status_code=codes.BAD_REQUEST,
			detail=detail or message
		)

class ServiceError(FireMapException):
	"""
	Exception raised when a backend call fails.
	Maps to HTTP 500 by default, but can be customized.
	"""
	def __init__(self, message: str, status_code: int = codes.INTERNAL_SERVER_ERROR):
		super().__init__(
			message=message,
			status_code=status_code,
			detail=message
		)

class MapNotReadyError(FireMapException):
	"""
	Raised by a map backend when it is called before it has loaded
	or after it has been removed.
	"""
	def __init__(self, operation: str):
		message = f"Map is not ready for '{operation}'"
		super().__init__(
			message=message,
			status_code=codes.SERVICE_UNAVAILABLE,
			detail=message
		)

class MapUnsupportedError(FireMapException):
	"""
	Raised when the map backend cannot render in the current environment.
	"""
	def __init__(self, backend: str):
		message = f"Map backend '{backend}' is not supported in this environment"
		super().__init__(
			message=message,
			status_code=codes.NOT_IMPLEMENTED,
			detail=message
		)
