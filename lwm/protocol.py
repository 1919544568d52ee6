"""
X11 Protocol Value Types

Plain values exchanged between the window manager core and the protocol
adapter: geometry, window attributes, modifier masks, button and keysym
constants, and the well-known atoms the core cares about.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Tuple


class Modifiers(IntFlag):
    """Keyboard modifier masks as reported in the X event state field."""

    NONE = 0
    SHIFT = 1
    LOCK = 2  # Caps Lock
    CTRL = 4
    MOD1 = 8  # Alt
    MOD2 = 16  # Num Lock
    MOD3 = 32
    MOD4 = 64  # Super/Logo
    MOD5 = 128


# Lock-style modifiers that must not change the meaning of a chord
IGNORED_MODIFIERS = Modifiers.LOCK | Modifiers.MOD2


class MapState(IntEnum):
    """Window map state."""

    UNMAPPED = 0
    UNVIEWABLE = 1
    VIEWABLE = 2


class BTN:
    """Mouse button constants."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class XK:
    """Common X keysym constants (from X11/keysymdef.h)."""

    # Letters
    a, b, c, d, e, f, g, h, i, j = (
        0x61,
        0x62,
        0x63,
        0x64,
        0x65,
        0x66,
        0x67,
        0x68,
        0x69,
        0x6A,
    )
    k, l, m, n, o, p, q, r, s, t = (
        0x6B,
        0x6C,
        0x6D,
        0x6E,
        0x6F,
        0x70,
        0x71,
        0x72,
        0x73,
        0x74,
    )
    u, v, w, x, y, z = 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A

    # Uppercase letters used by dialogs
    N = 0x4E
    Y = 0x59

    # Special keys
    Return = 0xFF0D
    KP_Enter = 0xFF8D
    Escape = 0xFF1B
    Tab = 0xFF09
    BackSpace = 0xFF08
    space = 0x20
    asciitilde = 0x7E


@dataclass
class Geometry:
    """Window position and size in root coordinates."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class WindowAttributes:
    """The subset of window attributes the core inspects."""

    map_state: MapState = MapState.UNMAPPED
    override_redirect: bool = False

    @property
    def viewable(self) -> bool:
        return self.map_state == MapState.VIEWABLE


@dataclass
class Atoms:
    """Interned atoms for the protocols the window manager speaks."""

    wm_protocols: int = 0
    wm_delete_window: int = 0
    net_supported: int = 0
    net_wm_state: int = 0
    net_wm_state_fullscreen: int = 0
    net_supporting_wm_check: int = 0
    net_active_window: int = 0
    net_wm_name: int = 0

    NAMES = {
        "wm_protocols": "WM_PROTOCOLS",
        "wm_delete_window": "WM_DELETE_WINDOW",
        "net_supported": "_NET_SUPPORTED",
        "net_wm_state": "_NET_WM_STATE",
        "net_wm_state_fullscreen": "_NET_WM_STATE_FULLSCREEN",
        "net_supporting_wm_check": "_NET_SUPPORTING_WM_CHECK",
        "net_active_window": "_NET_ACTIVE_WINDOW",
        "net_wm_name": "_NET_WM_NAME",
    }


class WmStateAction(IntEnum):
    """Action field of a _NET_WM_STATE client message."""

    REMOVE = 0
    ADD = 1
    TOGGLE = 2


def parse_color(color: str | Tuple[int, int, int, int]) -> Tuple[int, int, int, int]:
    """
    Parse a color value into RGBA tuple.

    Accepts:
    - Hex string: "#RRGGBB" or "#RRGGBBAA" (e.g., "#2e3440" or "#2e3440ff")
    - Tuple: (R, G, B, A) where each value is 0-255

    Returns:
    - Tuple of (R, G, B, A) values from 0-255
    """
    if isinstance(color, str):
        color = color.lstrip("#")

        if len(color) == 6:
            r, g, b = int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)
            return (r, g, b, 0xFF)
        elif len(color) == 8:
            r = int(color[0:2], 16)
            g = int(color[2:4], 16)
            b = int(color[4:6], 16)
            a = int(color[6:8], 16)
            return (r, g, b, a)
        else:
            raise ValueError(f"Invalid color format: {color}. Use #RRGGBB or #RRGGBBAA")
    elif isinstance(color, tuple) and len(color) == 4:
        return color
    else:
        raise ValueError(
            f"Invalid color type: {type(color)}. Use hex string or RGBA tuple"
        )


def color_to_pixel(color: Tuple[int, int, int, int]) -> int:
    """Pack an RGBA tuple into a 24-bit TrueColor pixel value."""
    r, g, b, _ = color
    return (r << 16) | (g << 8) | b
