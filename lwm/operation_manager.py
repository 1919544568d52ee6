"""
Operation Manager

Handles interactive move and resize operations for windows, including
snapping moved windows to the screen edges.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from .protocol import BTN

if TYPE_CHECKING:
    from .connection import Connection
    from .events import ButtonPress, MotionNotify
    from .state import WindowManagerState

logger = logging.getLogger(__name__)

SNAP_THRESHOLD = 10
MIN_WINDOW_SIZE = 50


class OpType(Enum):
    """Type of interactive operation."""

    NONE = auto()
    MOVE = auto()
    RESIZE = auto()


@dataclass
class Operation:
    """Represents an active interactive operation.

    For a move, ``orig_x``/``orig_y`` hold the window position when the
    drag started; for a resize, ``orig_width``/``orig_height`` hold its size.
    """

    type: OpType
    window: int
    start_x: int
    start_y: int
    orig_x: int = 0
    orig_y: int = 0
    orig_width: int = 0
    orig_height: int = 0


def snap(position: int, size: int, screen_size: int, threshold: int) -> int:
    """Snap one axis of a window to the near or far screen edge.

    Args:
        position: Proposed position of the window's near edge
        size: Window size along the axis
        screen_size: Screen size along the axis
        threshold: Distance in pixels within which an edge sticks

    Returns:
        The snapped position
    """
    if abs(position) < threshold:
        position = 0
    if abs(position + size - screen_size) < threshold:
        position = screen_size - size
    return position


class OperationManager:
    """Interprets modifier + drag gestures as move or resize operations.

    The gesture lives in ``state.operation``: None means idle. Since there is
    a single slot, a move and a resize can never be active together.
    """

    def __init__(
        self,
        conn: Connection,
        state: WindowManagerState,
        modifiers: int,
        snap_threshold: int = SNAP_THRESHOLD,
        min_size: int = MIN_WINDOW_SIZE,
    ):
        """Initialize operation manager.

        Args:
            conn: Protocol adapter
            state: Shared window manager state
            modifiers: Modifier mask that must be held to start a gesture
            snap_threshold: Edge snapping distance in pixels
            min_size: Smallest width and height a resize may produce
        """
        self.conn = conn
        self.state = state
        self.modifiers = modifiers
        self.snap_threshold = snap_threshold
        self.min_size = min_size

    def is_active(self) -> bool:
        """Check if an operation is currently active."""
        return self.state.operation is not None

    def get_operation_type(self) -> OpType:
        """Get the current operation type."""
        return self.state.operation.type if self.state.operation else OpType.NONE

    def get_current_window(self) -> Optional[int]:
        """Get the window involved in the current operation."""
        return self.state.operation.window if self.state.operation else None

    def handle_button_press(self, event: ButtonPress) -> bool:
        """Start a move (left button) or resize (right button).

        Presses on the active dialog, presses without the modifier or without
        a window under the pointer, and presses during another operation are
        ignored.

        Returns:
            True if an operation started
        """
        if self.state.is_dialog_window(event.window) or self.state.is_dialog_window(
            event.child
        ):
            return False
        if not event.state & self.modifiers:
            return False
        if not event.child:
            return False

        if event.button == BTN.LEFT:
            return self.start_move(event.child, event.root_x, event.root_y)
        if event.button == BTN.RIGHT:
            return self.start_resize(event.child, event.root_x, event.root_y)
        return False

    def start_move(self, window: int, pointer_x: int, pointer_y: int) -> bool:
        """Start an interactive move operation.

        Args:
            window: The window to move
            pointer_x: Pointer X in root coordinates
            pointer_y: Pointer Y in root coordinates

        Returns:
            True if operation started, False if operation already active
        """
        if self.state.operation is not None:
            return False

        geometry = self.state.registry.geometry(window)
        self.state.operation = Operation(
            type=OpType.MOVE,
            window=window,
            start_x=pointer_x,
            start_y=pointer_y,
            orig_x=geometry.x,
            orig_y=geometry.y,
        )
        self._publish_started()
        return True

    def start_resize(self, window: int, pointer_x: int, pointer_y: int) -> bool:
        """Start an interactive resize operation.

        Args:
            window: The window to resize
            pointer_x: Pointer X in root coordinates
            pointer_y: Pointer Y in root coordinates

        Returns:
            True if operation started, False if operation already active
        """
        if self.state.operation is not None:
            return False

        geometry = self.state.registry.geometry(window)
        self.state.operation = Operation(
            type=OpType.RESIZE,
            window=window,
            start_x=pointer_x,
            start_y=pointer_y,
            orig_width=geometry.width,
            orig_height=geometry.height,
        )
        self._publish_started()
        return True

    def handle_motion(self, event: MotionNotify):
        """Handle pointer motion during an operation."""
        op = self.state.operation
        if op is None:
            return

        dx = event.root_x - op.start_x
        dy = event.root_y - op.start_y

        if op.type == OpType.MOVE:
            self._move(op, dx, dy)
        elif op.type == OpType.RESIZE:
            self._resize(op, dx, dy)

    def _move(self, op: Operation, dx: int, dy: int):
        registry = self.state.registry
        geometry = registry.geometry(op.window)

        new_x = snap(
            op.orig_x + dx, geometry.width, self.conn.screen_width, self.snap_threshold
        )
        new_y = snap(
            op.orig_y + dy, geometry.height, self.conn.screen_height, self.snap_threshold
        )

        self.conn.configure_window(op.window, x=new_x, y=new_y)
        registry.invalidate(op.window)

    def _resize(self, op: Operation, dx: int, dy: int):
        new_width = max(op.orig_width + dx, self.min_size)
        new_height = max(op.orig_height + dy, self.min_size)

        self.conn.configure_window(op.window, width=new_width, height=new_height)
        self.state.registry.invalidate(op.window)

    def end_operation(self):
        """End the current operation, whichever kind it is."""
        from pubsub import pub
        from . import topics

        op = self.state.operation
        if op is None:
            return

        self.state.operation = None
        pub.sendMessage(topics.OPERATION_ENDED, window=op.window, op_type=op.type)

    def cancel_for_window(self, window: int):
        """Drop the operation if its window went away."""
        if self.state.operation is not None and self.state.operation.window == window:
            logger.debug("Cancelling operation on destroyed window %#x", window)
            self.end_operation()

    def _publish_started(self):
        from pubsub import pub
        from . import topics

        op = self.state.operation
        pub.sendMessage(topics.OPERATION_STARTED, window=op.window, op_type=op.type)
