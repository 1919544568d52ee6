"""
Window Registry

Tracks the windows under management, their creation order, the minimized
set, and a cache of last known geometry.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable, Dict, Iterator, List, Optional

from .protocol import Geometry

logger = logging.getLogger(__name__)

# Returned when a geometry query fails; geometry only feeds snapping and
# fullscreen bookkeeping, so a plausible rectangle beats an error.
FALLBACK_GEOMETRY = Geometry(0, 0, 100, 100)


class WindowRegistry:
    """Insertion-ordered set of managed windows plus a minimized list.

    The order of ``windows`` is creation history: the last entry is the most
    recently managed window. ``current_index`` is the position focus cycling
    starts from; it is always a valid index, or 0 when there are no windows.
    ``windows`` and ``minimized`` never share an id.
    """

    def __init__(self, query_geometry: Callable[[int], Optional[Geometry]]):
        """Initialize the registry.

        Args:
            query_geometry: Function asking the X server for a window's geometry,
                returning None when the query fails
        """
        self._query_geometry = query_geometry
        self.windows: List[int] = []
        self.minimized: List[int] = []
        self.current_index = 0
        self._geometry_cache: Dict[int, Geometry] = {}

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self.windows))

    def __contains__(self, window: int) -> bool:
        return window in self.windows

    def register(self, window: int) -> bool:
        """Start managing a window.

        Args:
            window: The window id

        Returns:
            True if the window was appended, False if it was already managed
        """
        if window in self.minimized:
            self.minimized.remove(window)
        if window in self.windows:
            return False
        self.windows.append(window)
        self.current_index = len(self.windows) - 1
        return True

    def unregister(self, window: int) -> bool:
        """Forget a window entirely.

        Returns:
            True if the window was active or minimized
        """
        known = False
        if window in self.windows:
            self.windows.remove(window)
            known = True
            if self.current_index >= len(self.windows):
                self.current_index = 0
        if window in self.minimized:
            self.minimized.remove(window)
            known = True
        self.invalidate(window)
        return known

    def is_minimized(self, window: int) -> bool:
        return window in self.minimized

    def minimize(self, window: int) -> bool:
        """Move an active window to the minimized list."""
        if window not in self.windows:
            return False
        self.windows.remove(window)
        if self.current_index >= len(self.windows):
            self.current_index = 0
        self.minimized.append(window)
        return True

    def take_minimized(self) -> List[int]:
        """Return the minimized windows in minimize order and clear the list."""
        taken = self.minimized
        self.minimized = []
        return taken

    def last(self) -> Optional[int]:
        """Most recently registered active window."""
        return self.windows[-1] if self.windows else None

    def current(self) -> Optional[int]:
        return self.windows[self.current_index] if self.windows else None

    def geometry(self, window: int) -> Geometry:
        """Return the window's geometry, querying the server on a cache miss."""
        cached = self._geometry_cache.get(window)
        if cached is not None:
            return cached

        geometry = self._query_geometry(window)
        if geometry is None:
            logger.debug("Geometry query failed for window %#x", window)
            return replace(FALLBACK_GEOMETRY)

        self._geometry_cache[window] = geometry
        return geometry

    def invalidate(self, window: int):
        """Drop the cached geometry of a window whose geometry changed."""
        self._geometry_cache.pop(window, None)

    def is_cached(self, window: int) -> bool:
        return window in self._geometry_cache
