"""
Structured JSON logging configuration.
Outputs to stdout so log collectors can properly categorize log levels.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
	"""
	Custom formatter that outputs logs as JSON, one object per line.
	"""
	
	def format(self, record: logging.LogRecord) -> str:
		"""Format log record as JSON."""
		log_data: Dict[str, Any] = {
			"timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
			"level": record.levelname,
			"logger": record.name,
			"message": record.getMessage(),
		}
		
		# Add exception info if present
		if record.exc_info:
			log_data["exception"] = self.formatException(record.exc_info)
		
		# Add extra fields if present
		if hasattr(record, "extra_fields"):
			log_data.update(record.extra_fields)
		
		if record.module:
			log_data["module"] = record.module
		if record.funcName:
			log_data["function"] = record.funcName
		if record.lineno:
			log_data["line"] = record.lineno
		
		return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO") -> None:
	"""
	Configure application-wide logging to use structured JSON output to stdout.
	
	Args:
		level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
	
	Note:
		If PYTHONDEBUG is set, this function will skip setup to allow
		an existing debug logging configuration to take precedence.
	"""
	is_debug_mode = os.getenv("PYTHONDEBUG", "").lower() in ("1", "true")
	if is_debug_mode:
		logging.getLogger("firemap").setLevel(getattr(logging, level.upper(), logging.INFO))
		return
	
	root_logger = logging.getLogger()
	root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
	
	# Remove any existing handlers
	root_logger.handlers.clear()
	
	stdout_handler = logging.StreamHandler(sys.stdout)
	stdout_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
	stdout_handler.setFormatter(JSONFormatter())
	root_logger.addHandler(stdout_handler)
	
	# Set level for noisy libraries
	logging.getLogger("httpx").setLevel(logging.WARNING)
	logging.getLogger("httpcore").setLevel(logging.WARNING)
	logging.getLogger("asyncio").setLevel(logging.WARNING)
