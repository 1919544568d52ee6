"""
X Connection Module

The protocol adapter between the window manager core and the X server.
``Connection`` is the interface the core is written against; ``XConnection``
implements it on top of python-xlib and translates Xlib events into the
typed events of ``lwm.events``.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from Xlib import X, Xatom, error
from Xlib.display import Display
from Xlib.protocol import event as xevent

from . import events
from .protocol import (
    IGNORED_MODIFIERS,
    Atoms,
    Geometry,
    MapState,
    Modifiers,
    WindowAttributes,
)

logger = logging.getLogger(__name__)

# Glyph index of "left_ptr" in the standard cursor font
XC_LEFT_PTR = 68

# Largest image chunk sent in one PutImage request
MAX_IMAGE_CHUNK = 128 * 1024

ROOT_EVENT_MASK = (
    X.SubstructureRedirectMask
    | X.SubstructureNotifyMask
    | X.PropertyChangeMask
    | X.ButtonPressMask
    | X.ButtonReleaseMask
    | X.PointerMotionMask
    | X.ExposureMask
)

DIALOG_EVENT_MASK = (
    X.ExposureMask | X.KeyPressMask | X.ButtonPressMask | X.ButtonReleaseMask
)

GRAB_BUTTON_MASK = X.ButtonPressMask | X.ButtonReleaseMask | X.PointerMotionMask


def lock_variants(mod: int) -> List[int]:
    """Return ``mod`` combined with every Caps Lock / Num Lock combination."""
    return [
        mod,
        mod | Modifiers.LOCK,
        mod | Modifiers.MOD2,
        mod | Modifiers.LOCK | Modifiers.MOD2,
    ]


class Connection(ABC):
    """Primitive windowing operations the window manager core relies on.

    Query methods never raise for a vanished window: they return ``None``
    or an empty list and leave the choice of default to the caller.
    """

    root: int = 0
    screen_width: int = 0
    screen_height: int = 0
    atoms: Atoms

    # Session

    @abstractmethod
    def connect(self, display_name: Optional[str] = None) -> bool:
        """Connect to the display and intern the well-known atoms."""

    @abstractmethod
    def disconnect(self):
        """Close the connection."""

    @abstractmethod
    def select_root_input(self, enter_window: bool) -> bool:
        """Ask for substructure redirection on the root window.

        Returns:
            False if another window manager already owns redirection
        """

    @abstractmethod
    def set_root_cursor(self):
        """Give the root window the default arrow cursor."""

    @abstractmethod
    def advertise_support(self, wm_name: str):
        """Publish _NET_SUPPORTED and the _NET_SUPPORTING_WM_CHECK window."""

    @abstractmethod
    def grab_keys(self, keysyms: Iterable[int], modifiers: int):
        """Grab the given keys with ``modifiers`` (and lock variants) on root."""

    @abstractmethod
    def grab_buttons(self, buttons: Iterable[int], modifiers: int):
        """Grab the given pointer buttons with ``modifiers`` on root."""

    # Windows

    @abstractmethod
    def create_window(
        self, title: str, x: int, y: int, width: int, height: int, background: int
    ) -> int:
        """Create an unmapped top-level window and return its id."""

    @abstractmethod
    def destroy_window(self, window: int):
        pass

    @abstractmethod
    def map_window(self, window: int):
        pass

    @abstractmethod
    def unmap_window(self, window: int):
        pass

    @abstractmethod
    def configure_window(self, window: int, **changes: int):
        """Change any of x, y, width, height, border_width, sibling, stack_mode."""

    @abstractmethod
    def raise_window(self, window: int):
        pass

    @abstractmethod
    def select_enter_window(self, window: int):
        """Receive EnterNotify events for ``window``."""

    @abstractmethod
    def get_geometry(self, window: int) -> Optional[Geometry]:
        pass

    @abstractmethod
    def get_attributes(self, window: int) -> Optional[WindowAttributes]:
        pass

    @abstractmethod
    def get_atom_list(self, window: int, prop: int) -> List[int]:
        """Read an ATOM[] property; empty if unset or unreadable."""

    @abstractmethod
    def set_atom_list(self, window: int, prop: int, values: Sequence[int]):
        pass

    @abstractmethod
    def get_wm_protocols(self, window: int) -> List[int]:
        pass

    # Focus

    @abstractmethod
    def get_input_focus(self) -> Optional[int]:
        """Return the focused window, or None for the root/no window."""

    @abstractmethod
    def set_input_focus(self, window: Optional[int]):
        """Focus ``window``; None focuses the root window."""

    # Synthetic events

    @abstractmethod
    def send_client_message(self, window: int, message_type: int, data: Sequence[int]):
        pass

    @abstractmethod
    def send_expose(self, window: int, width: int, height: int):
        pass

    @abstractmethod
    def send_configure_notify(self, window: int, geometry: Geometry):
        pass

    # Drawing

    @abstractmethod
    def put_image(self, window: int, width: int, height: int, data: bytes, stride: int):
        """Copy a 32 bits-per-pixel image to the window origin."""

    # Events

    @abstractmethod
    def next_event(self) -> Optional[events.Event]:
        """Block for the next event; None once the connection is gone."""


def _xid(resource) -> int:
    """Return the numeric id of an Xlib resource (or an already numeric id)."""
    return getattr(resource, "id", resource) or 0


class XConnection(Connection):
    """python-xlib implementation of ``Connection``."""

    def __init__(self):
        self.display: Optional[Display] = None
        self.screen = None
        self.atoms = Atoms()
        self._check_window = None

    def connect(self, display_name: Optional[str] = None) -> bool:
        """Connect to the X display."""
        try:
            self.display = Display(display_name)
        except error.DisplayError as e:
            logger.error("Failed to connect to X server: %s", e)
            return False

        self.display.set_error_handler(self._on_x_error)

        self.screen = self.display.screen()
        if self.screen is None:
            logger.error("No valid screen found.")
            return False

        self.root = self.screen.root.id
        self.screen_width = self.screen.width_in_pixels
        self.screen_height = self.screen.height_in_pixels

        for field_name, atom_name in Atoms.NAMES.items():
            setattr(self.atoms, field_name, self.display.intern_atom(atom_name))

        return True

    def disconnect(self):
        if self.display is not None:
            self.display.close()
            self.display = None

    def _on_x_error(self, err, request):
        """Log asynchronous X errors instead of printing them."""
        logger.debug("X error: %s", err)

    def _window(self, window: int):
        return self.display.create_resource_object("window", window)

    def select_root_input(self, enter_window: bool) -> bool:
        mask = ROOT_EVENT_MASK
        if enter_window:
            mask |= X.EnterWindowMask

        catcher = error.CatchError(error.BadAccess)
        self.screen.root.change_attributes(event_mask=mask, onerror=catcher)
        self.display.sync()
        return catcher.get_error() is None

    def set_root_cursor(self):
        font = self.display.open_font("cursor")
        cursor = font.create_glyph_cursor(
            font, XC_LEFT_PTR, XC_LEFT_PTR + 1, (0, 0, 0), (0xFFFF, 0xFFFF, 0xFFFF)
        )
        self.screen.root.change_attributes(cursor=cursor)
        font.close()
        self.display.flush()

    def advertise_support(self, wm_name: str):
        root = self.screen.root
        root.change_property(
            self.atoms.net_supported,
            Xatom.ATOM,
            32,
            [
                self.atoms.net_wm_state,
                self.atoms.net_wm_state_fullscreen,
                self.atoms.net_active_window,
            ],
        )

        self._check_window = root.create_window(-100, -100, 1, 1, 0, X.CopyFromParent)
        for win in (self._check_window, root):
            win.change_property(
                self.atoms.net_supporting_wm_check,
                Xatom.WINDOW,
                32,
                [self._check_window.id],
            )
        self._check_window.change_property(
            self.atoms.net_wm_name, Xatom.STRING, 8, wm_name.encode()
        )
        self._check_window.map()
        self.display.flush()

    def grab_keys(self, keysyms: Iterable[int], modifiers: int):
        root = self.screen.root
        for keysym in keysyms:
            keycodes = {code for code, _ in self.display.keysym_to_keycodes(keysym)}
            for keycode in keycodes:
                for mod in lock_variants(modifiers):
                    root.grab_key(
                        keycode, int(mod), True, X.GrabModeAsync, X.GrabModeAsync
                    )
        self.display.flush()

    def grab_buttons(self, buttons: Iterable[int], modifiers: int):
        root = self.screen.root
        for button in buttons:
            for mod in lock_variants(modifiers):
                root.grab_button(
                    button,
                    int(mod),
                    True,
                    GRAB_BUTTON_MASK,
                    X.GrabModeAsync,
                    X.GrabModeAsync,
                    X.NONE,
                    X.NONE,
                )
        self.display.flush()

    def create_window(
        self, title: str, x: int, y: int, width: int, height: int, background: int
    ) -> int:
        win = self.screen.root.create_window(
            x,
            y,
            width,
            height,
            0,
            self.screen.root_depth,
            X.InputOutput,
            X.CopyFromParent,
            background_pixel=background,
            event_mask=DIALOG_EVENT_MASK,
        )
        win.set_wm_name(title)
        self.display.flush()
        return win.id

    def destroy_window(self, window: int):
        self._window(window).destroy()
        self.display.flush()

    def map_window(self, window: int):
        self._window(window).map()
        self.display.flush()

    def unmap_window(self, window: int):
        self._window(window).unmap()
        self.display.flush()

    def configure_window(self, window: int, **changes: int):
        if not changes:
            return
        self._window(window).configure(**changes)
        self.display.flush()

    def raise_window(self, window: int):
        self.configure_window(window, stack_mode=X.Above)

    def select_enter_window(self, window: int):
        self._window(window).change_attributes(event_mask=X.EnterWindowMask)
        self.display.flush()

    def get_geometry(self, window: int) -> Optional[Geometry]:
        try:
            reply = self._window(window).get_geometry()
        except error.XError:
            return None
        return Geometry(reply.x, reply.y, reply.width, reply.height)

    def get_attributes(self, window: int) -> Optional[WindowAttributes]:
        try:
            reply = self._window(window).get_attributes()
        except error.XError:
            return None
        return WindowAttributes(
            map_state=MapState(reply.map_state),
            override_redirect=bool(reply.override_redirect),
        )

    def get_atom_list(self, window: int, prop: int) -> List[int]:
        try:
            reply = self._window(window).get_full_property(prop, Xatom.ATOM)
        except error.XError:
            return []
        if reply is None:
            return []
        return [int(value) for value in reply.value]

    def set_atom_list(self, window: int, prop: int, values: Sequence[int]):
        self._window(window).change_property(prop, Xatom.ATOM, 32, list(values))
        self.display.flush()

    def get_wm_protocols(self, window: int) -> List[int]:
        return self.get_atom_list(window, self.atoms.wm_protocols)

    def get_input_focus(self) -> Optional[int]:
        try:
            reply = self.display.get_input_focus()
        except error.XError:
            return None
        focus = _xid(reply.focus)
        if focus in (X.NONE, X.PointerRoot, self.root):
            return None
        return focus

    def set_input_focus(self, window: Optional[int]):
        target = self._window(window) if window else self.screen.root
        self.display.set_input_focus(target, X.RevertToPointerRoot, X.CurrentTime)
        self.display.flush()

    def send_client_message(self, window: int, message_type: int, data: Sequence[int]):
        payload = (list(data) + [0] * 5)[:5]
        win = self._window(window)
        message = xevent.ClientMessage(
            window=win, client_type=message_type, data=(32, payload)
        )
        win.send_event(message, event_mask=X.NoEventMask)
        self.display.flush()

    def send_expose(self, window: int, width: int, height: int):
        win = self._window(window)
        expose = xevent.Expose(window=win, x=0, y=0, width=width, height=height, count=0)
        win.send_event(expose, event_mask=X.ExposureMask)
        self.display.flush()

    def send_configure_notify(self, window: int, geometry: Geometry):
        win = self._window(window)
        notify = xevent.ConfigureNotify(
            event=win,
            window=win,
            above_sibling=X.NONE,
            x=geometry.x,
            y=geometry.y,
            width=geometry.width,
            height=geometry.height,
            border_width=0,
            override=0,
        )
        win.send_event(notify, event_mask=X.StructureNotifyMask)
        self.display.flush()

    @contextmanager
    def graphics_context(self, window: int, **values) -> Iterator:
        """Create a GC for ``window`` that is freed when the block exits."""
        gc = self._window(window).create_gc(**values)
        try:
            yield gc
        finally:
            gc.free()

    def put_image(self, window: int, width: int, height: int, data: bytes, stride: int):
        win = self._window(window)
        rows_per_chunk = max(1, MAX_IMAGE_CHUNK // stride)
        with self.graphics_context(window) as gc:
            for y in range(0, height, rows_per_chunk):
                rows = min(rows_per_chunk, height - y)
                chunk = data[y * stride : (y + rows) * stride]
                win.put_image(
                    gc, 0, y, width, rows, X.ZPixmap, self.screen.root_depth, 0, chunk
                )
        self.display.flush()

    def _keysym(self, keycode: int, state: int) -> int:
        """Resolve a keycode to the keysym for the current shift level."""
        state &= ~IGNORED_MODIFIERS
        column = 1 if state & Modifiers.SHIFT else 0
        return self.display.keycode_to_keysym(keycode, column)

    def next_event(self) -> Optional[events.Event]:
        try:
            xev = self.display.next_event()
        except error.ConnectionClosedError:
            logger.info("X connection closed")
            return None
        return self._translate(xev)

    def _translate(self, xev) -> events.Event:
        """Convert an Xlib event into its typed counterpart."""
        kind = xev.type

        if kind == X.KeyPress:
            return events.KeyPress(
                window=_xid(xev.window),
                keycode=xev.detail,
                keysym=self._keysym(xev.detail, xev.state),
                state=xev.state,
            )
        if kind == X.ButtonPress:
            return events.ButtonPress(
                window=_xid(xev.window),
                child=_xid(xev.child),
                button=xev.detail,
                state=xev.state,
                root_x=xev.root_x,
                root_y=xev.root_y,
            )
        if kind == X.MotionNotify:
            return events.MotionNotify(
                window=_xid(xev.window),
                root_x=xev.root_x,
                root_y=xev.root_y,
                state=xev.state,
            )
        if kind == X.ButtonRelease:
            return events.ButtonRelease(
                window=_xid(xev.window), button=xev.detail, state=xev.state
            )
        if kind == X.MapRequest:
            return events.MapRequest(window=_xid(xev.window))
        if kind == X.DestroyNotify:
            return events.DestroyNotify(window=_xid(xev.window))
        if kind == X.UnmapNotify:
            return events.UnmapNotify(window=_xid(xev.window))
        if kind == X.ConfigureRequest:
            return events.ConfigureRequest(
                window=_xid(xev.window), changes=self._configure_changes(xev)
            )
        if kind == X.Expose:
            return events.Expose(
                window=_xid(xev.window),
                width=xev.width,
                height=xev.height,
                count=xev.count,
            )
        if kind == X.ClientMessage:
            _, data = xev.data
            return events.ClientMessage(
                window=_xid(xev.window),
                message_type=xev.client_type,
                data=tuple(data),
            )
        if kind == X.EnterNotify:
            return events.EnterNotify(window=_xid(xev.window))
        return events.UnknownEvent(kind=kind)

    @staticmethod
    def _configure_changes(xev) -> Dict[str, int]:
        """Collect only the fields named in a ConfigureRequest's value mask."""
        fields = (
            (X.CWX, "x", xev.x),
            (X.CWY, "y", xev.y),
            (X.CWWidth, "width", xev.width),
            (X.CWHeight, "height", xev.height),
            (X.CWBorderWidth, "border_width", xev.border_width),
            (X.CWSibling, "sibling", _xid(xev.sibling)),
            (X.CWStackMode, "stack_mode", xev.stack_mode),
        )
        return {name: value for bit, name, value in fields if xev.value_mask & bit}
