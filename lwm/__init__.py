"""
Lightweight Window Manager (lwm)

A minimal floating window manager for X11.

This package provides:
- A protocol adapter over python-xlib with typed events
- A window registry with minimized tracking and a geometry cache
- Focus cycling, focus follows mouse, move/resize with edge snapping
- Fullscreen toggling through _NET_WM_STATE
- Runner, exit confirmation and help dialogs drawn with Cairo

Example usage:
    from lwm import LWM, LWMConfig

    config = LWMConfig(
        snap_threshold=16,
        focus_follows_mouse=False,
    )
    wm = LWM(config)
    wm.run()

Or run directly:
    python -m lwm
"""

__version__ = "0.1.0"

from .protocol import (
    Modifiers,
    MapState,
    Geometry,
    WindowAttributes,
    Atoms,
    XK,
    BTN,
)

from .connection import Connection, XConnection

from .registry import WindowRegistry

from .state import WindowManagerState

from .operation_manager import OperationManager, OpType, Operation

from .dialogs import (
    DialogManager,
    DialogKind,
    RunnerDialog,
    ExitConfirmationDialog,
    HelpDialog,
)

from .xwm import LWM, LWMConfig

from . import events, topics

__all__ = [
    # Version
    "__version__",
    # Protocol types
    "Modifiers",
    "MapState",
    "Geometry",
    "WindowAttributes",
    "Atoms",
    "XK",
    "BTN",
    # Connection
    "Connection",
    "XConnection",
    # State
    "WindowRegistry",
    "WindowManagerState",
    # Operations
    "OperationManager",
    "OpType",
    "Operation",
    # Dialogs
    "DialogManager",
    "DialogKind",
    "RunnerDialog",
    "ExitConfirmationDialog",
    "HelpDialog",
    # Window Manager
    "LWM",
    "LWMConfig",
    # Events and topics
    "events",
    "topics",
]
