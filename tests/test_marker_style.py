"""
Unit tests for MarkerStyle.
"""
from firemap.schemas.wildfire import SeverityTier
from firemap.services.theme import Theme
from firemap.utils.marker_style import BORDER_COLORS, UNKNOWN_SEVERITY_COLOR, MarkerStyle


class TestMarkerStyle:
	"""Test cases for MarkerStyle."""
	
	def test_severity_colors(self):
		"""Test each severity tier has its own color."""
		assert MarkerStyle.severity_color("high") == "#D32F2F"
		assert MarkerStyle.severity_color(SeverityTier.MEDIUM) == "#FFA000"
		assert MarkerStyle.severity_color("low") == "#689F38"
		assert MarkerStyle.severity_color(SeverityTier.CONTAINED) == "#2E7D32"
		assert MarkerStyle.severity_color("extreme") == UNKNOWN_SEVERITY_COLOR
	
	def test_cluster_size(self):
		"""Test cluster size grows logarithmically and clamps."""
		assert MarkerStyle.cluster_size(1) == 35
		assert MarkerStyle.cluster_size(10) == 45
		assert MarkerStyle.cluster_size(100) == 55
		assert MarkerStyle.cluster_size(100000) == 55
	
	def test_fire_size(self):
		"""Test fire size steps by acreage."""
		assert MarkerStyle.fire_size(150) == 16
		assert MarkerStyle.fire_size(3200) == 20
		assert MarkerStyle.fire_size(25000) == 24
	
	def test_border_color_by_theme(self):
		"""Test border color follows the theme, enum or string."""
		assert MarkerStyle.border_color(Theme.DARK) == BORDER_COLORS["dark"]
		assert MarkerStyle.border_color("light") == BORDER_COLORS["light"]
		assert MarkerStyle.border_color("sepia") == BORDER_COLORS["light"]
	
	def test_containment_badge(self):
		"""Test the badge appears only for partial containment."""
		assert MarkerStyle.containment_badge(0) is None
		assert MarkerStyle.containment_badge(45) == "45%"
