"""
Binding Manager

Handles keyboard and pointer bindings for window manager actions.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

from . import topics
from .protocol import BTN, XK

if TYPE_CHECKING:
    from .connection import Connection


@dataclass
class KeyBinding:
    """Represents a keyboard binding."""

    keysym: int
    label: str  # Key name as shown in the help dialog
    event_topic: str  # Event topic to publish (e.g., 'cmd.close_window')
    description: str


DEFAULT_KEY_BINDINGS = (
    KeyBinding(XK.f, "F", topics.CMD_TOGGLE_FULLSCREEN, "Toggle fullscreen"),
    KeyBinding(XK.e, "E", topics.CMD_CLOSE_WINDOW, "Close focused window"),
    KeyBinding(XK.q, "Q", topics.CMD_CONFIRM_EXIT, "Exit confirmation dialog"),
    KeyBinding(XK.r, "R", topics.CMD_OPEN_RUNNER, "Runner prompt"),
    KeyBinding(XK.Tab, "Tab", topics.CMD_FOCUS_NEXT, "Focus next window"),
    KeyBinding(XK.i, "I", topics.CMD_SHOW_HELP, "Help dialog"),
    KeyBinding(XK.m, "M", topics.CMD_MINIMIZE, "Minimize window"),
    KeyBinding(XK.n, "N", topics.CMD_RESTORE_ALL, "Restore all minimized"),
)

# Buttons grabbed for move (left) and resize (right)
POINTER_BUTTONS = (BTN.LEFT, BTN.RIGHT)


class BindingManager:
    """Manages keyboard and pointer bindings.

    Every key binding is a modifier + key chord that publishes a command
    topic. The same table drives the help dialog.
    """

    def __init__(
        self,
        modifiers: int,
        modifier_label: str = "Alt",
        bindings: Optional[List[KeyBinding]] = None,
    ):
        """Initialize binding manager.

        Args:
            modifiers: Modifier mask every chord requires
            modifier_label: Modifier name shown in the help dialog
            bindings: Key bindings; defaults to DEFAULT_KEY_BINDINGS
        """
        self.modifiers = modifiers
        self.modifier_label = modifier_label
        self.key_bindings: List[KeyBinding] = list(
            bindings if bindings is not None else DEFAULT_KEY_BINDINGS
        )
        self._by_keysym: Dict[int, KeyBinding] = {
            binding.keysym: binding for binding in self.key_bindings
        }

    def grab(self, conn: Connection):
        """Grab every chord and the move/resize buttons on the root window."""
        conn.grab_keys([binding.keysym for binding in self.key_bindings], self.modifiers)
        conn.grab_buttons(POINTER_BUTTONS, self.modifiers)

    def lookup(self, keysym: int, state: int) -> Optional[KeyBinding]:
        """Find the binding for a key press.

        Args:
            keysym: Resolved keysym of the pressed key
            state: Modifier state of the key event

        Returns:
            The matching binding, or None if the modifier is not held or
            the key is not bound
        """
        if not state & self.modifiers:
            return None
        return self._by_keysym.get(keysym)

    def help_lines(self) -> List[str]:
        """Format the binding table for the help dialog."""
        return [
            f"{self.modifier_label + '+' + binding.label:<15}=> {binding.description}"
            for binding in self.key_bindings
        ]
