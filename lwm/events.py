"""
Typed X Events

The closed set of events the protocol adapter delivers to the dispatcher.
Each event kind is its own dataclass; ``Event`` is the union of all of them
and ``EVENT_TYPES`` lists every member so the dispatcher can check that it
routes each kind.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple, Union


@dataclass
class KeyPress:
    """A key was pressed. ``keysym`` is already resolved for the shift level."""

    window: int
    keycode: int
    keysym: int
    state: int


@dataclass
class ButtonPress:
    """A pointer button was pressed.

    ``window`` is the window the event was reported on (the root window for
    grabbed buttons) and ``child`` the top-level window under the pointer,
    or 0 when there is none.
    """

    window: int
    child: int
    button: int
    state: int
    root_x: int
    root_y: int


@dataclass
class MotionNotify:
    window: int
    root_x: int
    root_y: int
    state: int


@dataclass
class ButtonRelease:
    window: int
    button: int
    state: int


@dataclass
class MapRequest:
    window: int


@dataclass
class DestroyNotify:
    window: int


@dataclass
class UnmapNotify:
    window: int


@dataclass
class ConfigureRequest:
    """A client asked to change its geometry or stacking.

    ``changes`` only holds the fields named in the request's value mask,
    keyed by ``x``, ``y``, ``width``, ``height``, ``border_width``,
    ``sibling`` and ``stack_mode``.
    """

    window: int
    changes: Dict[str, int] = field(default_factory=dict)


@dataclass
class Expose:
    window: int
    width: int
    height: int
    count: int = 0


@dataclass
class ClientMessage:
    window: int
    message_type: int
    data: Tuple[int, ...] = ()


@dataclass
class EnterNotify:
    window: int


@dataclass
class UnknownEvent:
    """Any event kind the core does not model."""

    kind: int


Event = Union[
    KeyPress,
    ButtonPress,
    MotionNotify,
    ButtonRelease,
    MapRequest,
    DestroyNotify,
    UnmapNotify,
    ConfigureRequest,
    Expose,
    ClientMessage,
    EnterNotify,
    UnknownEvent,
]

EVENT_TYPES = (
    KeyPress,
    ButtonPress,
    MotionNotify,
    ButtonRelease,
    MapRequest,
    DestroyNotify,
    UnmapNotify,
    ConfigureRequest,
    Expose,
    ClientMessage,
    EnterNotify,
    UnknownEvent,
)
