"""
Styling rules for fire, cluster and perimeter map elements.
"""
import logging
import math
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SEVERITY_COLORS: Dict[str, str] = {
	"high": "#D32F2F",
	"medium": "#FFA000",
	"low": "#689F38",
	"contained": "#2E7D32",
}
UNKNOWN_SEVERITY_COLOR = "#757575"

CLUSTER_COLOR = "#E64A19"
USER_LOCATION_COLOR = "#1E88E5"

BORDER_COLORS: Dict[str, str] = {
	"light": "#FFFFFF",
	"dark": "#1F2937",
}

CLUSTER_MIN_SIZE = 35
CLUSTER_MAX_SIZE = 55
CLUSTER_BASE_FONT_SIZE = 12


class MarkerStyle:
	"""Helper class for marker and layer styling."""

	@staticmethod
	def severity_color(severity: Optional[str]) -> str:
		"""
		Map a severity tier to its fixed color bin.
		
		Args:
			severity: "high", "medium", "low" or "contained" (enum values accepted)
		
		Returns:
			Hex color, grey for unknown tiers
		"""
		key = getattr(severity, "value", severity)
		if key not in SEVERITY_COLORS:
			logger.warning(f"Unknown severity tier: {severity}, using fallback color")
			return UNKNOWN_SEVERITY_COLOR
		return SEVERITY_COLORS[key]

	@staticmethod
	def cluster_size(count: int) -> int:
		"""
		Pixel diameter of a cluster marker: clamp(35, 35 + log10(count) * 10, 55).
		
		Args:
			count: Number of points in the cluster
		
		Returns:
			Marker diameter in pixels
		"""
		raw = CLUSTER_MIN_SIZE + math.log10(max(count, 1)) * 10
		return int(round(min(max(raw, CLUSTER_MIN_SIZE), CLUSTER_MAX_SIZE)))

	@staticmethod
	def cluster_font_size(size: int) -> int:
		"""Label font size scaled proportionally to the marker size."""
		return int(round(CLUSTER_BASE_FONT_SIZE * size / CLUSTER_MIN_SIZE))

	@staticmethod
	def fire_size(acres: int) -> int:
		"""
		Pixel diameter of a fire marker, stepped by burned area.
		
		Args:
			acres: Burned area
		
		Returns:
			Marker diameter in pixels
		"""
		if acres > 10000:
			return 24
		if acres > 1000:
			return 20
		return 16

	@staticmethod
	def border_color(theme: str) -> str:
		key = getattr(theme, "value", theme)
		return BORDER_COLORS.get(key, BORDER_COLORS["light"])

	@staticmethod
	def containment_badge(containment: int) -> Optional[str]:
		"""Badge text for partially contained fires, None at 0%."""
		if containment > 0:
			return f"{containment}%"
		return None

	@staticmethod
	def perimeter_fill_paint(severity: Optional[str]) -> Dict[str, object]:
		return {
			"fill-color": MarkerStyle.severity_color(severity),
			"fill-opacity": 0.35,
		}

	@staticmethod
	def perimeter_outline_paint(severity: Optional[str]) -> Dict[str, object]:
		return {
			"line-color": MarkerStyle.severity_color(severity),
			"line-width": 2,
		}
