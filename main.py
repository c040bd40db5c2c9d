#!/usr/bin/env python3
"""
Render a snapshot of the wildfire map.

Fetches the current fires and alerts from the dashboard backend, drives the
map core on a headless map and writes the visible state to an HTML file.

Usage:
	python main.py --output wildfires.html
	python main.py --select emf-002 --theme dark
	python main.py --user-location 39.74 -104.99
"""
import argparse
import asyncio
import logging
from typing import List, Optional
from firemap.config import settings
from firemap.exceptions import FireMapException
from firemap.http_client.wildfire_client import WildfireClient
from firemap.logging_config import setup_logging
from firemap.processors.map_view_processor import MapView
from firemap.processors.wildfire_feed import WildfireFeed
from firemap.renderers.folium_renderer import FoliumRenderer
from firemap.renderers.memory_map import InMemoryMap
from firemap.schemas.viewport import MapPosition
from firemap.services.alert_board import AlertBoard
from firemap.services.theme import Theme, ThemeNotifier

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Render a wildfire map snapshot")
	parser.add_argument(
		"--output",
		default=settings.snapshot_output_path or "wildfire_map.html",
		help="Path of the HTML file to write"
	)
	parser.add_argument("--select", metavar="FIRE_ID", help="Wildfire to select before rendering")
	parser.add_argument(
		"--theme",
		choices=[theme.value for theme in Theme],
		default=Theme.LIGHT.value,
		help="Map theme"
	)
	parser.add_argument(
		"--user-location",
		nargs=2,
		type=float,
		metavar=("LAT", "LNG"),
		help="Show the user marker and fly to it"
	)
	parser.add_argument(
		"--position",
		nargs=3,
		type=float,
		metavar=("LAT", "LNG", "ZOOM"),
		help="Initial camera position"
	)
	parser.add_argument("--base-url", default=None, help="Backend base URL")
	return parser.parse_args(argv)


async def render_snapshot(args: argparse.Namespace) -> int:
	theme_notifier = ThemeNotifier(Theme(args.theme))
	if args.position:
		position = MapPosition(latitude=args.position[0], longitude=args.position[1], zoom=args.position[2])
	else:
		position = MapPosition(
			latitude=settings.default_latitude,
			longitude=settings.default_longitude,
			zoom=settings.default_zoom
		)
	map_state = InMemoryMap(
		center=(position.longitude, position.latitude),
		zoom=position.zoom,
		style=settings.style_for_theme(theme_notifier.theme)
	)
	view = MapView(map_state, theme_notifier=theme_notifier)
	if view.initialize() is None:
		return 1

	alerts = AlertBoard()
	client = WildfireClient(base_url=args.base_url)
	feed = WildfireFeed(client, on_wildfires=view.set_wildfires, on_alerts=alerts.replace)
	try:
		wildfires = await feed.request_wildfires()
		if wildfires is None:
			logger.error("No wildfire data available, snapshot not written")
			return 1
		await feed.refresh_alerts()

		if args.user_location:
			view.set_user_location(*args.user_location)
			nearby = view.nearby_fires()
			logger.info(f"{len(nearby)} wildfires within {settings.nearby_radius_miles} miles of the user")

		if args.select:
			try:
				fire = await client.get_wildfire(args.select)
			except FireMapException as e:
				logger.error(f"Cannot select wildfire: {e.message}")
				return 1
			view.select(fire)
			for alert in alerts.alerts_for(fire.id):
				logger.info(f"Alert for {fire.name}: {alert.title}")

		# Publish the final camera position without waiting for the throttle
		view.tracker.sync()

		top = alerts.top
		if top is not None:
			logger.info(f"Top alert: {top.title}")

		FoliumRenderer(map_state).save(args.output, selected=view.selected)
		return 0
	finally:
		view.dispose()
		await feed.aclose()


def main(argv: Optional[List[str]] = None) -> int:
	setup_logging(level=settings.log_level)
	args = parse_args(argv)
	return asyncio.run(render_snapshot(args))


if __name__ == "__main__":
	raise SystemExit(main())
