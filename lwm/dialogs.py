"""
Modal Dialogs

The Runner prompt, the exit confirmation, and the key binding help. At most
one dialog exists at a time: ``state.dialog`` holds it, and a request to open
another while it is occupied is ignored.

Dialogs never draw themselves. Keystrokes update dialog state and, where the
text changed, ask for a redraw by sending the window a synthetic Expose; the
Expose handler then asks ``frame()`` what to paint and hands that to the
renderer.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

from .protocol import XK, color_to_pixel

if TYPE_CHECKING:
    from .connection import Connection
    from .focus_manager import FocusManager
    from .state import WindowManagerState
    from .xwm import LWMConfig

logger = logging.getLogger(__name__)

EXIT_PROMPT = "Exit WM? (Y/N or ESC)"

# First printable and last printable ASCII keysym
PRINTABLE_FIRST = XK.space
PRINTABLE_LAST = XK.asciitilde


class DialogKind(Enum):
    RUNNER = "runner"
    EXIT_CONFIRMATION = "exit_confirmation"
    HELP = "help"


@dataclass
class RunnerDialog:
    """Text entry prompt; ``buffer`` holds the typed characters."""

    window: int
    buffer: List[str] = field(default_factory=list)
    kind = DialogKind.RUNNER

    @property
    def text(self) -> str:
        return "".join(self.buffer)


@dataclass
class ExitConfirmationDialog:
    window: int
    kind = DialogKind.EXIT_CONFIRMATION


@dataclass
class HelpDialog:
    window: int
    kind = DialogKind.HELP


Dialog = Union[RunnerDialog, ExitConfirmationDialog, HelpDialog]


@dataclass
class Font:
    family: str
    size: int


@dataclass
class TextLine:
    """One line of text and where and how to draw it."""

    text: str
    x: int
    y: int
    foreground: Tuple[int, int, int, int]
    background: Tuple[int, int, int, int]
    font: Font


@dataclass
class DialogFrame:
    """Everything the renderer needs to paint a dialog."""

    width: int
    height: int
    background: Tuple[int, int, int, int]
    lines: List[TextLine] = field(default_factory=list)


class DialogManager:
    """Creates, drives and tears down the modal dialogs.

    This component subscribes to the dialog command events.

    Responsibilities:
    - CMD_OPEN_RUNNER: show the Runner prompt
    - CMD_CONFIRM_EXIT: show the exit confirmation
    - CMD_SHOW_HELP: show the key binding help
    - Route keystrokes to the active dialog
    - Describe the active dialog's contents for rendering
    """

    def __init__(
        self,
        conn: Connection,
        state: WindowManagerState,
        focus_manager: FocusManager,
        config: LWMConfig,
        help_lines: Sequence[str] = (),
    ):
        """Initialize dialog manager.

        Args:
            conn: Protocol adapter
            state: Shared window manager state
            focus_manager: Used to focus new dialogs and restore focus after
            config: Window manager configuration (sizes, colors, fonts)
            help_lines: Lines shown by the help dialog
        """
        self.conn = conn
        self.state = state
        self.focus_manager = focus_manager
        self.config = config
        self.help_lines = list(help_lines)

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to dialog command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_open_runner, topics.CMD_OPEN_RUNNER)
        pub.subscribe(self._on_confirm_exit, topics.CMD_CONFIRM_EXIT)
        pub.subscribe(self._on_show_help, topics.CMD_SHOW_HELP)

    def is_active(self) -> bool:
        return self.state.dialog is not None

    def is_dialog_window(self, window: int) -> bool:
        return self.state.is_dialog_window(window)

    # Lifecycle

    def _size(self, kind: DialogKind) -> Tuple[int, int]:
        if kind == DialogKind.RUNNER:
            return self.config.runner_width, self.config.runner_height
        if kind == DialogKind.EXIT_CONFIRMATION:
            return self.config.exit_width, self.config.exit_height
        return self.config.help_width, self.config.help_height

    def _background(self, kind: DialogKind) -> Tuple[int, int, int, int]:
        if kind == DialogKind.HELP:
            return self.config.help_background_color
        return self.config.background_color

    def _create(self, kind: DialogKind, title: str) -> Optional[Dialog]:
        """Create and show the backing window for a dialog.

        Returns:
            The new dialog, or None if another dialog is already active
        """
        from pubsub import pub
        from . import topics

        if self.state.dialog is not None:
            logger.debug(
                "Ignoring %s request, %s is active", kind.value, self.state.dialog.kind.value
            )
            return None

        width, height = self._size(kind)
        x = (self.conn.screen_width - width) // 2
        y = (self.conn.screen_height - height) // 2

        window = self.conn.create_window(
            title, x, y, width, height, color_to_pixel(self._background(kind))
        )

        if kind == DialogKind.RUNNER:
            dialog: Dialog = RunnerDialog(window)
        elif kind == DialogKind.EXIT_CONFIRMATION:
            dialog = ExitConfirmationDialog(window)
        else:
            dialog = HelpDialog(window)
        self.state.dialog = dialog

        self.conn.map_window(window)
        self.state.registry.register(window)
        self.focus_manager.focus(window)

        pub.sendMessage(topics.DIALOG_OPENED, window=window, kind=kind)
        return dialog

    def open_runner(self) -> Optional[Dialog]:
        return self._create(DialogKind.RUNNER, "Run Program")

    def open_exit_confirmation(self) -> Optional[Dialog]:
        return self._create(DialogKind.EXIT_CONFIRMATION, "Confirm Exit")

    def open_help(self) -> Optional[Dialog]:
        return self._create(DialogKind.HELP, "Key Bindings")

    def close(self):
        """Tear down the active dialog and hand focus back."""
        from pubsub import pub
        from . import topics

        dialog = self.state.dialog
        if dialog is None:
            return

        self.conn.unmap_window(dialog.window)
        self.conn.destroy_window(dialog.window)
        self.state.registry.unregister(dialog.window)
        self.state.dialog = None

        pub.sendMessage(topics.DIALOG_CLOSED, window=dialog.window, kind=dialog.kind)
        self.focus_manager.reset_focus()

    def forget_window(self, window: int) -> bool:
        """Clear the dialog slot if its window was destroyed from outside.

        Returns:
            True if ``window`` backed the active dialog
        """
        if not self.state.is_dialog_window(window):
            return False
        logger.debug("Dialog window %#x destroyed externally", window)
        self.state.dialog = None
        return True

    # Input

    def handle_key(self, keysym: int):
        """Feed a keystroke to the active dialog."""
        dialog = self.state.dialog
        if isinstance(dialog, RunnerDialog):
            self._runner_key(dialog, keysym)
        elif isinstance(dialog, ExitConfirmationDialog):
            self._exit_key(keysym)
        elif isinstance(dialog, HelpDialog):
            if keysym == XK.Escape:
                self.close()

    def _runner_key(self, dialog: RunnerDialog, keysym: int):
        from pubsub import pub
        from . import topics

        if keysym == XK.Escape:
            self.close()
        elif keysym in (XK.Return, XK.KP_Enter):
            command = dialog.text
            dialog.buffer.clear()
            if command:
                pub.sendMessage(topics.CMD_SPAWN, command=command)
            self.close()
        elif keysym == XK.BackSpace:
            if dialog.buffer:
                dialog.buffer.pop()
                self.request_redraw()
        elif PRINTABLE_FIRST <= keysym <= PRINTABLE_LAST:
            dialog.buffer.append(chr(keysym))
            self.request_redraw()

    def _exit_key(self, keysym: int):
        from pubsub import pub
        from . import topics

        if keysym in (XK.y, XK.Y):
            logger.info("Exit confirmed")
            pub.sendMessage(topics.CMD_QUIT)
        elif keysym in (XK.n, XK.N, XK.Escape):
            self.close()

    def request_redraw(self):
        """Ask for the active dialog to be repainted via a synthetic Expose."""
        dialog = self.state.dialog
        if dialog is None:
            return
        width, height = self._size(dialog.kind)
        self.conn.send_expose(dialog.window, width, height)

    # Rendering

    def frame(self) -> Optional[DialogFrame]:
        """Describe what the active dialog should look like right now."""
        dialog = self.state.dialog
        if dialog is None:
            return None

        config = self.config
        width, height = self._size(dialog.kind)
        background = self._background(dialog.kind)
        frame = DialogFrame(width, height, background)
        font = Font(config.font_family, config.font_size)

        if isinstance(dialog, RunnerDialog):
            runner_font = Font(config.font_family, config.runner_font_size)
            frame.lines.append(
                TextLine(
                    dialog.text,
                    10,
                    height // 2 + 10,
                    config.foreground_color,
                    background,
                    runner_font,
                )
            )
        elif isinstance(dialog, ExitConfirmationDialog):
            frame.lines.append(
                TextLine(
                    EXIT_PROMPT, 10, height // 2, config.foreground_color, background, font
                )
            )
        else:
            y = 20
            for line in self.help_lines:
                frame.lines.append(
                    TextLine(line, 10, y, config.foreground_color, background, font)
                )
                y += 20

        return frame

    # Command handlers

    def _on_open_runner(self, window: Optional[int]):
        """Handle CMD_OPEN_RUNNER command."""
        self.open_runner()

    def _on_confirm_exit(self, window: Optional[int]):
        """Handle CMD_CONFIRM_EXIT command."""
        self.open_exit_confirmation()

    def _on_show_help(self, window: Optional[int]):
        """Handle CMD_SHOW_HELP command."""
        self.open_help()
