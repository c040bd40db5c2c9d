from firemap.exceptions.base import (
	FireMapException,
	NotFoundError,
	ValidationError,
	ServiceError,
	MapNotReadyError,
	MapUnsupportedError
)
from firemap.exceptions.handler import safe_map_call, handle_map_exceptions

__all__ = [
	"FireMapException",
	"NotFoundError",
	"ValidationError",
	"ServiceError",
	"MapNotReadyError",
	"MapUnsupportedError",
	"safe_map_call",
	"handle_map_exceptions"
]
