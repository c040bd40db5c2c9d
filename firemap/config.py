import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings:
	# Backend API configuration
	firemap_api_base_url: str = os.getenv("FIREMAP_API_BASE_URL", "http://localhost:5000")
	http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
	http_max_retries: int = int(os.getenv("HTTP_MAX_RETRIES", "3"))

	# Clustering configuration
	cluster_radius: int = int(os.getenv("CLUSTER_RADIUS", "60"))
	cluster_max_zoom: int = int(os.getenv("CLUSTER_MAX_ZOOM", "16"))
	cluster_min_points: int = int(os.getenv("CLUSTER_MIN_POINTS", "3"))
	cluster_extent: int = int(os.getenv("CLUSTER_EXTENT", "512"))

	# Viewport events are throttled to one downstream update per window
	viewport_throttle_ms: int = int(os.getenv("VIEWPORT_THROTTLE_MS", "100"))

	perimeter_fit_padding: int = int(os.getenv("PERIMETER_FIT_PADDING", "50"))
	selected_fire_zoom: float = float(os.getenv("SELECTED_FIRE_ZOOM", "10"))
	user_location_zoom: float = float(os.getenv("USER_LOCATION_ZOOM", "5"))
	user_location_fly_duration_ms: int = int(os.getenv("USER_LOCATION_FLY_DURATION_MS", "2000"))
	nearby_radius_miles: float = float(os.getenv("NEARBY_RADIUS_MILES", "100"))

	# Geographic center of the contiguous US
	default_latitude: float = float(os.getenv("DEFAULT_LATITUDE", "39.8283"))
	default_longitude: float = float(os.getenv("DEFAULT_LONGITUDE", "-98.5795"))
	default_zoom: float = float(os.getenv("DEFAULT_ZOOM", "4"))

	map_style_light: str = os.getenv("MAP_STYLE_LIGHT", "mapbox://styles/mapbox/outdoors-v12")
	map_style_dark: str = os.getenv("MAP_STYLE_DARK", "mapbox://styles/mapbox/dark-v11")

	# Headless map viewport size
	map_width_px: int = int(os.getenv("MAP_WIDTH_PX", "1280"))
	map_height_px: int = int(os.getenv("MAP_HEIGHT_PX", "800"))

	log_level: str = os.getenv("LOG_LEVEL", "INFO")
	snapshot_output_path: Optional[str] = os.getenv("SNAPSHOT_OUTPUT_PATH", None)

	@property
	def viewport_throttle_seconds(self) -> float:
		"""Throttle window in seconds, as expected by event loop schedulers."""
		return self.viewport_throttle_ms / 1000.0

	def style_for_theme(self, theme: str) -> str:
		"""Base map style URL for a theme name ("light" or "dark")."""
		if theme == "dark":
			return self.map_style_dark
		return self.map_style_light

settings = Settings()
