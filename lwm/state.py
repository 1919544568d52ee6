"""
Window Manager State

All mutable window manager state lives in one ``WindowManagerState`` value.
The dispatcher owns it and hands it to each component when it is built.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from .protocol import Geometry
from .registry import WindowRegistry

if TYPE_CHECKING:
    from .dialogs import Dialog
    from .operation_manager import Operation


@dataclass
class WindowManagerState:
    """State shared by the dispatcher and its components.

    ``dialog`` and ``operation`` are single slots: at most one modal dialog
    and at most one move/resize operation can exist at any time.
    """

    registry: WindowRegistry
    dialog: Optional["Dialog"] = None
    operation: Optional["Operation"] = None
    saved_geometry: Dict[int, Geometry] = field(default_factory=dict)

    def is_dialog_window(self, window: int) -> bool:
        """Check whether ``window`` backs the active dialog."""
        return self.dialog is not None and window != 0 and self.dialog.window == window
