"""
Fullscreen Manager

Toggles windows between their normal geometry and the full screen,
remembering where they were.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from .protocol import WmStateAction

if TYPE_CHECKING:
    from .connection import Connection
    from .state import WindowManagerState

logger = logging.getLogger(__name__)


class FullscreenManager:
    """Handles fullscreen state through the _NET_WM_STATE property.

    A window's pre-fullscreen geometry is kept in ``state.saved_geometry``
    from the moment it enters fullscreen until it leaves it.

    Responsibilities:
    - CMD_TOGGLE_FULLSCREEN: toggle the focused window
    - _NET_WM_STATE client requests for the fullscreen state
    """

    def __init__(self, conn: Connection, state: WindowManagerState):
        """Initialize fullscreen manager.

        Args:
            conn: Protocol adapter
            state: Shared window manager state
        """
        self.conn = conn
        self.state = state

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to fullscreen command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_toggle_fullscreen, topics.CMD_TOGGLE_FULLSCREEN)

    def is_fullscreen(self, window: int) -> bool:
        """Check the window's _NET_WM_STATE for the fullscreen marker."""
        atoms = self.conn.atoms
        states = self.conn.get_atom_list(window, atoms.net_wm_state)
        return atoms.net_wm_state_fullscreen in states

    def toggle(self, window: Optional[int]):
        """Toggle fullscreen for a window.

        Args:
            window: The window to toggle; None is ignored
        """
        if not window:
            return
        self.set_fullscreen(window, not self.is_fullscreen(window))

    def set_fullscreen(self, window: int, enabled: bool):
        """Enter or leave fullscreen.

        Args:
            window: The window to change
            enabled: True to cover the screen, False to restore
        """
        atoms = self.conn.atoms
        registry = self.state.registry
        states = self.conn.get_atom_list(window, atoms.net_wm_state)
        fullscreen = atoms.net_wm_state_fullscreen in states

        if enabled and not fullscreen:
            self.state.saved_geometry[window] = registry.geometry(window)
            self.conn.set_atom_list(
                window, atoms.net_wm_state, states + [atoms.net_wm_state_fullscreen]
            )
            self.conn.configure_window(
                window,
                x=0,
                y=0,
                width=self.conn.screen_width,
                height=self.conn.screen_height,
            )
            self.conn.raise_window(window)
            logger.debug("Window %#x entered fullscreen", window)

        elif not enabled and fullscreen:
            saved = self.state.saved_geometry.pop(window, None)
            if saved is not None:
                self.conn.configure_window(
                    window,
                    x=saved.x,
                    y=saved.y,
                    width=saved.width,
                    height=saved.height,
                )
            self.conn.set_atom_list(
                window,
                atoms.net_wm_state,
                [atom for atom in states if atom != atoms.net_wm_state_fullscreen],
            )
            logger.debug("Window %#x left fullscreen", window)

        registry.invalidate(window)

    def handle_state_request(self, window: int, action: int, first: int, second: int):
        """Apply a client's _NET_WM_STATE request if it names fullscreen.

        Args:
            window: The requesting window
            action: 0 remove, 1 add, 2 toggle
            first: First property atom of the request
            second: Second property atom of the request (may be 0)
        """
        if self.conn.atoms.net_wm_state_fullscreen not in (first, second):
            return

        if action == WmStateAction.TOGGLE:
            self.toggle(window)
        elif action == WmStateAction.ADD:
            self.set_fullscreen(window, True)
        elif action == WmStateAction.REMOVE:
            self.set_fullscreen(window, False)

    def forget(self, window: int):
        """Drop saved geometry for a destroyed window."""
        self.state.saved_geometry.pop(window, None)

    def _on_toggle_fullscreen(self, window: Optional[int]):
        """Handle CMD_TOGGLE_FULLSCREEN command."""
        self.toggle(window)
