"""
Static HTML snapshots of the headless map with folium.
"""
import logging
from typing import Optional
import folium
from firemap.config import settings
from firemap.renderers.map_handle import LayerType
from firemap.renderers.memory_map import InMemoryMap, LayerState
from firemap.schemas.marker import MarkerKind, MarkerSpec
from firemap.schemas.wildfire import FireRecord

logger = logging.getLogger(__name__)

LIGHT_TILES = "CartoDB positron"
DARK_TILES = "CartoDB dark_matter"


class FoliumRenderer:
	"""Writes what an InMemoryMap currently shows to a folium map."""

	def __init__(self, map_state: InMemoryMap):
		self.map_state = map_state

	def _tiles(self) -> str:
		if self.map_state.style == settings.map_style_dark:
			return DARK_TILES
		return LIGHT_TILES

	def build(self, selected: Optional[FireRecord] = None) -> folium.Map:
		"""
		Create a folium map mirroring the camera, visible markers and visible layers.

		Args:
			selected: Currently selected fire, used for the perimeter tooltip

		Returns:
			folium.Map object
		"""
		lng, lat = self.map_state.center
		m = folium.Map(location=[lat, lng], zoom_start=int(round(self.map_state.zoom)), tiles=self._tiles())

		for layer in self.map_state.visible_layers():
			self._add_layer(m, layer, selected)

		markers = self.map_state.visible_markers()
		for spec in markers:
			if spec.kind == MarkerKind.FIRE:
				self._add_fire_marker(m, spec)
			else:
				self._add_icon_marker(m, spec)

		logger.info(f"Built folium map with {len(markers)} markers and {len(self.map_state.visible_layers())} layers")
		return m

	def _add_layer(self, m: folium.Map, layer: LayerState, selected: Optional[FireRecord]) -> None:
		locations = [[point[1], point[0]] for point in layer.ring]
		tooltip = selected.name if selected is not None else None
		if layer.layer_type == LayerType.FILL:
			color = layer.paint.get("fill-color")
			folium.Polygon(
				locations=locations,
				color=color,
				weight=0,
				fill=True,
				fill_color=color,
				fill_opacity=layer.paint.get("fill-opacity", 0.35),
				tooltip=tooltip
			).add_to(m)
		else:
			folium.PolyLine(
				locations=locations,
				color=layer.paint.get("line-color"),
				weight=layer.paint.get("line-width", 2)
			).add_to(m)

	def _add_fire_marker(self, m: folium.Map, spec: MarkerSpec) -> None:
		popup = spec.fire_id
		if spec.badge:
			popup = f"{spec.fire_id} ({spec.badge} contained)"
		folium.CircleMarker(
			location=[spec.latitude, spec.longitude],
			radius=spec.size / 2,
			color=spec.border_color,
			weight=2,
			fill=True,
			fill_color=spec.color,
			fill_opacity=0.9,
			popup=popup
		).add_to(m)

	def _add_icon_marker(self, m: folium.Map, spec: MarkerSpec) -> None:
		label = spec.label or ""
		font_size = spec.font_size or 12
		html = (
			f'<div style="width:{spec.size}px;height:{spec.size}px;border-radius:50%;'
			f'background:{spec.color};border:2px solid {spec.border_color};color:#FFFFFF;'
			f'font-size:{font_size}px;font-weight:bold;display:flex;'
			f'align-items:center;justify-content:center;">{label}</div>'
		)
		folium.Marker(
			location=[spec.latitude, spec.longitude],
			icon=folium.DivIcon(
				html=html,
				icon_size=(spec.size, spec.size),
				icon_anchor=(spec.size // 2, spec.size // 2)
			)
		).add_to(m)

	def save(self, output_path: str, selected: Optional[FireRecord] = None) -> folium.Map:
		m = self.build(selected)
		logger.info(f"Saving map snapshot to: {output_path}")
		m.save(output_path)
		return m
