"""
Window Controller

Handles window lifecycle commands (close, minimize, restore).
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .connection import Connection
    from .focus_manager import FocusManager
    from .state import WindowManagerState

logger = logging.getLogger(__name__)


class WindowController:
    """Handles window lifecycle commands.

    This component subscribes to command events and executes window operations
    on the window that had focus when the command was issued.

    Responsibilities:
    - CMD_CLOSE_WINDOW: Close focused window
    - CMD_MINIMIZE: Minimize focused window
    - CMD_RESTORE_ALL: Restore every minimized window
    """

    def __init__(
        self, conn: Connection, state: WindowManagerState, focus_manager: FocusManager
    ):
        """Initialize window controller.

        Args:
            conn: Protocol adapter
            state: Shared window manager state
            focus_manager: Used to move focus after minimize/restore
        """
        self.conn = conn
        self.state = state
        self.focus_manager = focus_manager

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to window command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_close_window, topics.CMD_CLOSE_WINDOW)
        pub.subscribe(self._on_minimize, topics.CMD_MINIMIZE)
        pub.subscribe(self._on_restore_all, topics.CMD_RESTORE_ALL)

    def close(self, window: Optional[int]):
        """Ask a window to close, or destroy it if it cannot be asked.

        Windows advertising WM_DELETE_WINDOW get a WM_PROTOCOLS message;
        anything else is destroyed outright.
        """
        if not window:
            return

        atoms = self.conn.atoms
        if atoms.wm_delete_window in self.conn.get_wm_protocols(window):
            self.conn.send_client_message(
                window, atoms.wm_protocols, [atoms.wm_delete_window, 0]
            )
            logger.debug("Sent WM_DELETE_WINDOW to %#x", window)
        else:
            self.conn.destroy_window(window)
            logger.debug("Destroyed window %#x (no WM_DELETE_WINDOW)", window)

    def minimize(self, window: Optional[int]) -> bool:
        """Hide a managed window and remember it for restore.

        Dialog windows are never minimized.

        Returns:
            True if the window was minimized
        """
        if not window or self.state.is_dialog_window(window):
            return False
        if not self.state.registry.minimize(window):
            return False

        self.conn.unmap_window(window)
        self.focus_manager.reset_focus()
        return True

    def restore_all(self):
        """Map every minimized window again and focus the last of them."""
        registry = self.state.registry
        restored = registry.take_minimized()
        for window in restored:
            self.conn.map_window(window)
            registry.register(window)

        if restored:
            self.focus_manager.focus(restored[-1])

    def _on_close_window(self, window: Optional[int]):
        """Handle CMD_CLOSE_WINDOW command."""
        self.close(window)

    def _on_minimize(self, window: Optional[int]):
        """Handle CMD_MINIMIZE command."""
        self.minimize(window)

    def _on_restore_all(self, window: Optional[int]):
        """Handle CMD_RESTORE_ALL command."""
        self.restore_all()
