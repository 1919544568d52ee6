"""
LWM Window Manager Implementation

A minimal floating window manager for X11: Alt + mouse moves and resizes
windows with edge snapping, Alt + key chords drive focus, fullscreen,
minimize and three small modal dialogs.
"""

from __future__ import annotations
import logging
import os
import signal
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type

from pubsub import pub

from . import events, topics
from .application_launcher import ApplicationLauncher
from .binding_manager import BindingManager
from .connection import Connection, XConnection
from .dialogs import DialogManager
from .focus_manager import FocusManager
from .fullscreen import FullscreenManager
from .logger import DEFAULT_LOG_PATH, setup_logging, shutdown_logging
from .operation_manager import MIN_WINDOW_SIZE, SNAP_THRESHOLD, OperationManager
from .protocol import Modifiers, parse_color
from .registry import WindowRegistry
from .renderer import DialogRenderer
from .state import WindowManagerState
from .window_controller import WindowController

logger = logging.getLogger(__name__)


@dataclass
class LWMConfig:
    """Window manager configuration."""

    # Key binding and drag modifier
    mod: Modifiers = Modifiers.MOD1
    mod_label: str = "Alt"

    # Dialog colors
    background_color: str | Tuple[int, int, int, int] = "#2e3440"
    foreground_color: str | Tuple[int, int, int, int] = "#ffffff"
    help_background_color: str | Tuple[int, int, int, int] = "#000000"

    # Dialog fonts
    font_family: str = "monospace"
    font_size: int = 13
    runner_font_size: int = 18

    # Dialog sizes
    runner_width: int = 300
    runner_height: int = 50
    exit_width: int = 300
    exit_height: int = 100
    help_width: int = 400
    help_height: int = 240

    # Move/resize
    snap_threshold: int = SNAP_THRESHOLD
    min_window_size: int = MIN_WINDOW_SIZE

    # Focus follows mouse
    focus_follows_mouse: bool = True

    # Name advertised through _NET_SUPPORTING_WM_CHECK
    wm_name: str = "LWM"

    # Logging
    log_path: str = DEFAULT_LOG_PATH
    debug: bool = False

    def __post_init__(self):
        """Parse color strings into tuples."""
        self.background_color = parse_color(self.background_color)
        self.foreground_color = parse_color(self.foreground_color)
        self.help_background_color = parse_color(self.help_background_color)


class LWM:
    """
    LWM Window Manager

    Owns the window manager state and the event loop. Each event from the
    connection is routed to exactly one component; key chords are turned
    into command topics that the components subscribe to.
    """

    def __init__(
        self, config: Optional[LWMConfig] = None, connection: Optional[Connection] = None
    ):
        """Initialize LWM.

        Architecture:
        1. Create the shared state
        2. Create components - they self-subscribe to command topics
        3. Build the event routing table
        4. Run
        """
        self.config = config or LWMConfig()
        self.conn = connection or XConnection()
        self.running = False

        # Setup debug event logging if enabled
        if self.config.debug:
            pub.subscribe(self.debug_event_logger, pub.ALL_TOPICS)

        self.state = WindowManagerState(
            registry=WindowRegistry(query_geometry=self.conn.get_geometry)
        )

        self.binding_manager = BindingManager(self.config.mod, self.config.mod_label)

        # Focus management (self-subscribes to events)
        self.focus_manager = FocusManager(
            self.conn, self.state, focus_follows_mouse=self.config.focus_follows_mouse
        )

        # Interactive move/resize
        self.operation_manager = OperationManager(
            self.conn,
            self.state,
            self.config.mod,
            snap_threshold=self.config.snap_threshold,
            min_size=self.config.min_window_size,
        )

        # Modal dialogs (self-subscribes)
        self.dialog_manager = DialogManager(
            self.conn,
            self.state,
            self.focus_manager,
            self.config,
            help_lines=self.binding_manager.help_lines(),
        )
        self.renderer = DialogRenderer(self.conn)

        # Fullscreen and window lifecycle commands (self-subscribe)
        self.fullscreen_manager = FullscreenManager(self.conn, self.state)
        self.window_controller = WindowController(
            self.conn, self.state, self.focus_manager
        )

        # Command execution (self-subscribes)
        self.application_launcher = ApplicationLauncher()

        pub.subscribe(self._on_quit, topics.CMD_QUIT)

        self._handlers: Dict[Type, Callable] = {
            events.KeyPress: self._on_key_press,
            events.ButtonPress: self._on_button_press,
            events.MotionNotify: self._on_motion_notify,
            events.ButtonRelease: self._on_button_release,
            events.MapRequest: self._on_map_request,
            events.DestroyNotify: self._on_destroy_notify,
            events.UnmapNotify: self._on_unmap_notify,
            events.ConfigureRequest: self._on_configure_request,
            events.Expose: self._on_expose,
            events.ClientMessage: self._on_client_message,
            events.EnterNotify: self._on_enter_notify,
            events.UnknownEvent: self._on_unknown_event,
        }

    def debug_event_logger(self, topic=pub.AUTO_TOPIC, **kwargs):
        """Log all events published on the event bus."""
        data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items() if k != "topic")
        logger.debug("EVENT: %s | %s", topic.getName(), data_str)

    # Event loop

    def setup(self) -> bool:
        """Connect and take over the root window.

        Returns:
            False if the display could not be opened
        """
        if not self.conn.connect():
            return False

        if not self.conn.select_root_input(self.config.focus_follows_mouse):
            logger.warning(
                "Another WM is probably running; cannot redirect the root window."
            )

        self.conn.set_root_cursor()
        self.conn.advertise_support(self.config.wm_name)
        self.binding_manager.grab(self.conn)
        return True

    def dispatch(self, event: events.Event):
        """Route one event to its handler.

        A failing handler is logged and the event dropped; nothing raised
        while handling an event stops the loop.
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.debug("Unhandled event: %r", event)
            return
        try:
            handler(event)
        except Exception:
            logger.exception("Error handling %r", event)

    def run(self) -> int:
        """Run the window manager until quit or the connection closes."""
        if not self.setup():
            logger.error("LWM initialization failed.")
            return 1

        logger.info("LWM started")
        self.running = True
        try:
            while self.running:
                event = self.conn.next_event()
                if event is None:
                    break
                self.dispatch(event)
        except KeyboardInterrupt:
            pass
        finally:
            self.running = False
            self.conn.disconnect()

        logger.info("LWM stopped")
        return 0

    def stop(self):
        """Leave the event loop after the current event."""
        self.running = False

    def _on_quit(self):
        """Handle CMD_QUIT command."""
        self.stop()

    # Handlers

    def _on_key_press(self, event: events.KeyPress):
        if self.dialog_manager.is_active():
            self.dialog_manager.handle_key(event.keysym)
            return

        binding = self.binding_manager.lookup(event.keysym, event.state)
        if binding is None:
            return

        focused = self.conn.get_input_focus()
        pub.sendMessage(binding.event_topic, window=focused)

    def _on_button_press(self, event: events.ButtonPress):
        if self.operation_manager.handle_button_press(event):
            # Click to focus
            if event.child in self.state.registry:
                self.focus_manager.focus(event.child)

    def _on_motion_notify(self, event: events.MotionNotify):
        self.operation_manager.handle_motion(event)

    def _on_button_release(self, event: events.ButtonRelease):
        self.operation_manager.end_operation()

    def _on_map_request(self, event: events.MapRequest):
        window = event.window
        attributes = self.conn.get_attributes(window)
        if attributes is not None and attributes.override_redirect:
            self.conn.map_window(window)
            return

        self.conn.map_window(window)
        self.conn.raise_window(window)
        if self.dialog_manager.is_active():
            self.focus_manager.focus(self.state.dialog.window)
        else:
            self.focus_manager.focus(window)

        created = self.state.registry.register(window)

        if self.config.focus_follows_mouse:
            self.conn.select_enter_window(window)

        geometry = self.state.registry.geometry(window)
        self.conn.send_configure_notify(window, geometry)

        if created:
            pub.sendMessage(topics.WINDOW_CREATED, window=window)

    def _on_destroy_notify(self, event: events.DestroyNotify):
        window = event.window
        registry = self.state.registry

        if window in registry or registry.is_minimized(window):
            registry.unregister(window)
            self.fullscreen_manager.forget(window)
            self.operation_manager.cancel_for_window(window)
            self.dialog_manager.forget_window(window)
            self.focus_manager.reset_focus()
            pub.sendMessage(topics.WINDOW_CLOSED, window=window)

        registry.invalidate(window)

    def _on_unmap_notify(self, event: events.UnmapNotify):
        self.state.registry.invalidate(event.window)

    def _on_configure_request(self, event: events.ConfigureRequest):
        self.conn.configure_window(event.window, **event.changes)
        self.state.registry.invalidate(event.window)

    def _on_expose(self, event: events.Expose):
        if event.count != 0 or not self.dialog_manager.is_dialog_window(event.window):
            return
        frame = self.dialog_manager.frame()
        if frame is not None:
            self.renderer.render(event.window, frame)

    def _on_client_message(self, event: events.ClientMessage):
        atoms = self.conn.atoms
        data = tuple(event.data) + (0, 0, 0)

        if event.message_type == atoms.wm_protocols and data[0] == atoms.wm_delete_window:
            self.conn.destroy_window(event.window)
        elif event.message_type == atoms.net_active_window:
            if event.window and not self.dialog_manager.is_active():
                self.focus_manager.focus(event.window)
        elif event.message_type == atoms.net_wm_state:
            self.fullscreen_manager.handle_state_request(
                event.window, data[0], data[1], data[2]
            )

    def _on_enter_notify(self, event: events.EnterNotify):
        self.focus_manager.handle_pointer_enter(event.window)

    def _on_unknown_event(self, event: events.UnknownEvent):
        logger.debug("Unhandled event type: %d", event.kind)


def main():
    """Main entry point."""
    signal.signal(signal.SIGCHLD, signal.SIG_IGN)

    config = LWMConfig(
        log_path=os.getenv("LWM_LOG", DEFAULT_LOG_PATH),
        debug=bool(os.getenv("LWM_DEBUG")),
    )
    setup_logging(config.log_path, debug=config.debug)
    logger.info("Starting LWM")

    try:
        wm = LWM(config)
        return wm.run()
    finally:
        shutdown_logging()


if __name__ == "__main__":
    import sys

    sys.exit(main())
