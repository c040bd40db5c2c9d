"""
Explicit theme subscription. The hosting application owns a ThemeNotifier
and calls set_theme; the map core subscribes instead of watching the page.
"""
import logging
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class Theme(str, Enum):
	LIGHT = "light"
	DARK = "dark"


ThemeListener = Callable[[Theme], None]


class ThemeNotifier:
	def __init__(self, theme: Theme = Theme.LIGHT):
		self._theme = Theme(theme)
		self._listeners: List[ThemeListener] = []

	@property
	def theme(self) -> Theme:
		return self._theme

	def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
		self._listeners.append(listener)
		return lambda: self._listeners.remove(listener) if listener in self._listeners else None

	def set_theme(self, theme: Theme) -> None:
		theme = Theme(theme)
		if theme == self._theme:
			return
		logger.info(f"Theme changed from {self._theme.value} to {theme.value}")
		self._theme = theme
		for listener in list(self._listeners):
			listener(theme)
