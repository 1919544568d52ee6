"""
Focus Manager

Handles input focus, raise order, and cyclic focus traversal.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .connection import Connection
    from .state import WindowManagerState

logger = logging.getLogger(__name__)


class FocusManager:
    """Decides which window receives input and raises it.

    Responsibilities:
    - Focus a window (raise, map, set input focus)
    - CMD_FOCUS_NEXT: cycle to the next viewable window
    - Reset focus after a window or dialog goes away
    - Focus follows mouse on pointer enter (when enabled)
    """

    def __init__(
        self,
        conn: Connection,
        state: WindowManagerState,
        focus_follows_mouse: bool = True,
    ):
        """Initialize focus manager.

        Args:
            conn: Protocol adapter
            state: Shared window manager state
            focus_follows_mouse: Whether focus follows mouse pointer
        """
        self.conn = conn
        self.state = state
        self.focus_follows_mouse = focus_follows_mouse

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to focus command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_focus_next, topics.CMD_FOCUS_NEXT)

    def focus(self, window: Optional[int]):
        """Raise a window, make sure it is mapped and give it input focus.

        Args:
            window: The window to focus; None is ignored
        """
        from pubsub import pub
        from . import topics

        if not window:
            return

        self.conn.raise_window(window)
        self.conn.map_window(window)
        self.conn.set_input_focus(window)

        pub.sendMessage(topics.FOCUS_CHANGED, window=window)

    def focus_next(self) -> Optional[int]:
        """Focus the next viewable window after the current index.

        Windows that are withdrawn or iconified but still registered are
        skipped. After one full cycle without a viewable window nothing
        changes.

        Returns:
            The newly focused window, or None
        """
        registry = self.state.registry
        count = len(registry.windows)
        if count == 0:
            return None

        for step in range(1, count + 1):
            index = (registry.current_index + step) % count
            window = registry.windows[index]
            attributes = self.conn.get_attributes(window)
            if attributes is not None and attributes.viewable:
                registry.current_index = index
                self.focus(window)
                return window

        logger.debug("No viewable window to focus")
        return None

    def reset_focus(self):
        """Focus the open dialog, else the most recently managed window, else root."""
        from pubsub import pub
        from . import topics

        if self.state.dialog is not None:
            self.focus(self.state.dialog.window)
            return

        window = self.state.registry.last()
        if window is not None:
            self.focus(window)
        else:
            self.conn.set_input_focus(None)
            pub.sendMessage(topics.FOCUS_CHANGED, window=None)

    def handle_pointer_enter(self, window: int):
        """Focus a managed window the pointer just entered.

        Ignored while a dialog is open so it keeps the keyboard.

        Args:
            window: The window the pointer entered
        """
        if not self.focus_follows_mouse or self.state.dialog is not None:
            return
        if window and window in self.state.registry:
            self.focus(window)

    def _on_focus_next(self, window: Optional[int]):
        """Handle CMD_FOCUS_NEXT command."""
        self.focus_next()
