"""
Shared pytest fixtures for lwm tests.
"""

import pytest
from pubsub import pub

from lwm.connection import Connection
from lwm.protocol import Atoms, Geometry, MapState, WindowAttributes
from lwm.registry import WindowRegistry
from lwm.state import WindowManagerState

SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1080


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without an X server")


@pytest.fixture(autouse=True)
def clean_pubsub():
    """Drop listeners left behind by a previous test."""
    pub.unsubAll()
    yield
    pub.unsubAll()


class FakeConnection(Connection):
    """In-memory stand-in for the X server.

    Every request is appended to ``calls`` as a tuple so tests can assert on
    what the window manager asked for. Windows have a geometry and map state
    that requests update.
    """

    def __init__(self):
        self.root = 1
        self.screen_width = SCREEN_WIDTH
        self.screen_height = SCREEN_HEIGHT
        self.atoms = Atoms(
            wm_protocols=100,
            wm_delete_window=101,
            net_supported=102,
            net_wm_state=103,
            net_wm_state_fullscreen=104,
            net_supporting_wm_check=105,
            net_active_window=106,
            net_wm_name=107,
        )
        self.calls = []
        self.geometries = {}
        self.attributes = {}
        self.attribute_queries = []
        self.properties = {}
        self.protocols = {}
        self.focused = None
        self.events = []
        self.connected = False
        self.connect_result = True
        self.redirect_result = True
        self._next_id = 0x400000

    def add_window(self, window, x=0, y=0, width=640, height=480, mapped=True):
        self.geometries[window] = Geometry(x, y, width, height)
        self.attributes[window] = WindowAttributes(
            MapState.VIEWABLE if mapped else MapState.UNMAPPED
        )
        return window

    def calls_named(self, name):
        return [call[1:] for call in self.calls if call[0] == name]

    # Session

    def connect(self, display_name=None):
        self.calls.append(("connect", display_name))
        self.connected = self.connect_result
        return self.connect_result

    def disconnect(self):
        self.calls.append(("disconnect",))
        self.connected = False

    def select_root_input(self, enter_window):
        self.calls.append(("select_root_input", enter_window))
        return self.redirect_result

    def set_root_cursor(self):
        self.calls.append(("set_root_cursor",))

    def advertise_support(self, wm_name):
        self.calls.append(("advertise_support", wm_name))

    def grab_keys(self, keysyms, modifiers):
        self.calls.append(("grab_keys", list(keysyms), modifiers))

    def grab_buttons(self, buttons, modifiers):
        self.calls.append(("grab_buttons", list(buttons), modifiers))

    # Windows

    def create_window(self, title, x, y, width, height, background):
        self._next_id += 1
        window = self._next_id
        self.calls.append(("create_window", window, title, x, y, width, height, background))
        self.add_window(window, x, y, width, height, mapped=False)
        return window

    def destroy_window(self, window):
        self.calls.append(("destroy_window", window))
        self.geometries.pop(window, None)
        self.attributes.pop(window, None)

    def map_window(self, window):
        self.calls.append(("map_window", window))
        if window in self.attributes:
            self.attributes[window].map_state = MapState.VIEWABLE

    def unmap_window(self, window):
        self.calls.append(("unmap_window", window))
        if window in self.attributes:
            self.attributes[window].map_state = MapState.UNMAPPED

    def configure_window(self, window, **changes):
        self.calls.append(("configure_window", window, changes))
        geometry = self.geometries.get(window)
        if geometry is not None:
            for name in ("x", "y", "width", "height"):
                if name in changes:
                    setattr(geometry, name, changes[name])

    def raise_window(self, window):
        self.calls.append(("raise_window", window))

    def select_enter_window(self, window):
        self.calls.append(("select_enter_window", window))

    def get_geometry(self, window):
        geometry = self.geometries.get(window)
        if geometry is None:
            return None
        return Geometry(geometry.x, geometry.y, geometry.width, geometry.height)

    def get_attributes(self, window):
        self.attribute_queries.append(window)
        return self.attributes.get(window)

    def get_atom_list(self, window, prop):
        return list(self.properties.get((window, prop), []))

    def set_atom_list(self, window, prop, values):
        self.calls.append(("set_atom_list", window, prop, list(values)))
        self.properties[(window, prop)] = list(values)

    def get_wm_protocols(self, window):
        return list(self.protocols.get(window, []))

    # Focus

    def get_input_focus(self):
        return self.focused

    def set_input_focus(self, window):
        self.calls.append(("set_input_focus", window))
        self.focused = window

    # Synthetic events

    def send_client_message(self, window, message_type, data):
        self.calls.append(("send_client_message", window, message_type, list(data)))

    def send_expose(self, window, width, height):
        self.calls.append(("send_expose", window, width, height))

    def send_configure_notify(self, window, geometry):
        self.calls.append(("send_configure_notify", window, geometry))

    # Drawing

    def put_image(self, window, width, height, data, stride):
        self.calls.append(("put_image", window, width, height, len(data), stride))

    # Events

    def next_event(self):
        if not self.events:
            return None
        return self.events.pop(0)


@pytest.fixture
def conn():
    """Fake connection with a 1920x1080 screen and no windows."""
    return FakeConnection()


@pytest.fixture
def state(conn):
    """Fresh window manager state backed by the fake connection."""
    return WindowManagerState(registry=WindowRegistry(query_geometry=conn.get_geometry))


@pytest.fixture
def config():
    """Default configuration."""
    from lwm.xwm import LWMConfig

    return LWMConfig()
