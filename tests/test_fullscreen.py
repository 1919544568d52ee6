"""
Unit tests for FullscreenManager.
"""

import pytest
from pubsub import pub

from lwm import topics
from lwm.fullscreen import FullscreenManager
from lwm.protocol import Geometry, WmStateAction


@pytest.fixture
def fullscreen(conn, state):
    return FullscreenManager(conn, state)


@pytest.fixture
def window(conn, state):
    conn.add_window(10, x=100, y=50, width=640, height=480)
    state.registry.register(10)
    return 10


def wm_state(conn, window):
    return conn.get_atom_list(window, conn.atoms.net_wm_state)


@pytest.mark.unit
class TestToggle:
    """Test toggling fullscreen."""

    def test_enter_fullscreen(self, conn, state, fullscreen, window):
        fullscreen.toggle(window)

        assert fullscreen.is_fullscreen(window)
        assert conn.geometries[window] == Geometry(0, 0, 1920, 1080)
        assert ("raise_window", window) in conn.calls
        assert state.saved_geometry[window] == Geometry(100, 50, 640, 480)

    def test_round_trip_restores_geometry(self, conn, state, fullscreen, window):
        fullscreen.toggle(window)
        fullscreen.toggle(window)

        assert not fullscreen.is_fullscreen(window)
        assert conn.geometries[window] == Geometry(100, 50, 640, 480)
        assert window not in state.saved_geometry

    def test_leave_without_saved_geometry(self, conn, state, fullscreen, window):
        """A window already fullscreen before we managed it keeps its geometry."""
        conn.properties[(window, conn.atoms.net_wm_state)] = [
            conn.atoms.net_wm_state_fullscreen
        ]

        fullscreen.toggle(window)

        assert wm_state(conn, window) == []
        assert conn.calls_named("configure_window") == []

    def test_other_state_atoms_preserved(self, conn, fullscreen, window):
        above = 555
        conn.properties[(window, conn.atoms.net_wm_state)] = [above]

        fullscreen.toggle(window)
        assert wm_state(conn, window) == [above, conn.atoms.net_wm_state_fullscreen]

        fullscreen.toggle(window)
        assert wm_state(conn, window) == [above]

    def test_toggle_invalidates_cache(self, state, fullscreen, window):
        state.registry.geometry(window)

        fullscreen.toggle(window)

        assert not state.registry.is_cached(window)

    def test_toggle_none(self, conn, fullscreen):
        fullscreen.toggle(None)

        assert conn.calls == []

    def test_toggle_command(self, conn, fullscreen, window):
        pub.sendMessage(topics.CMD_TOGGLE_FULLSCREEN, window=window)

        assert fullscreen.is_fullscreen(window)

    def test_forget_drops_saved_geometry(self, state, fullscreen, window):
        fullscreen.toggle(window)

        fullscreen.forget(window)

        assert window not in state.saved_geometry


@pytest.mark.unit
class TestStateRequest:
    """Test _NET_WM_STATE client messages."""

    def test_add(self, conn, fullscreen, window):
        fs = conn.atoms.net_wm_state_fullscreen

        fullscreen.handle_state_request(window, WmStateAction.ADD, fs, 0)
        fullscreen.handle_state_request(window, WmStateAction.ADD, fs, 0)

        assert wm_state(conn, window) == [fs]

    def test_remove(self, conn, fullscreen, window):
        fs = conn.atoms.net_wm_state_fullscreen
        fullscreen.handle_state_request(window, WmStateAction.ADD, fs, 0)

        fullscreen.handle_state_request(window, WmStateAction.REMOVE, fs, 0)

        assert wm_state(conn, window) == []
        assert conn.geometries[window] == Geometry(100, 50, 640, 480)

    def test_toggle_via_second_property(self, conn, fullscreen, window):
        fs = conn.atoms.net_wm_state_fullscreen

        fullscreen.handle_state_request(window, WmStateAction.TOGGLE, 777, fs)

        assert fullscreen.is_fullscreen(window)

    def test_other_properties_ignored(self, conn, fullscreen, window):
        fullscreen.handle_state_request(window, WmStateAction.ADD, 777, 0)

        assert conn.calls == []
