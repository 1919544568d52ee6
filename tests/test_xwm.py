"""
Unit tests for the LWM dispatcher and event loop.
"""

import pytest
from pubsub import pub

from lwm import events, topics
from lwm.dialogs import ExitConfirmationDialog, RunnerDialog
from lwm.operation_manager import OpType
from lwm.protocol import BTN, XK, Geometry, Modifiers, WindowAttributes
from lwm.xwm import LWM, LWMConfig

ALT = Modifiers.MOD1


@pytest.fixture
def wm(conn, config):
    return LWM(config, connection=conn)


def key(keysym, state=ALT):
    return events.KeyPress(window=1, keycode=0, keysym=keysym, state=state)


def map_window(wm, window, **geometry):
    wm.conn.add_window(window, mapped=False, **geometry)
    wm.dispatch(events.MapRequest(window))


@pytest.mark.unit
class TestDispatch:
    """Test event routing."""

    def test_every_event_type_has_a_handler(self, wm):
        assert set(wm._handlers) == set(events.EVENT_TYPES)

    def test_unknown_event_is_dropped(self, wm):
        wm.dispatch(events.UnknownEvent(kind=99))

        assert wm.conn.calls == []

    def test_handler_errors_do_not_escape(self, wm, monkeypatch):
        def broken(event):
            raise RuntimeError("boom")

        monkeypatch.setitem(wm._handlers, events.MapRequest, broken)

        wm.dispatch(events.MapRequest(10))

    def test_key_chord_publishes_command_with_focused_window(self, wm):
        received = []

        def on_close(window):
            received.append(window)

        pub.subscribe(on_close, topics.CMD_CLOSE_WINDOW)
        wm.conn.focused = 10

        wm.dispatch(key(XK.e))

        assert received == [10]

    def test_chord_with_lock_modifiers(self, wm):
        wm.dispatch(key(XK.i, state=ALT | Modifiers.LOCK | Modifiers.MOD2))

        assert wm.dialog_manager.is_active()

    def test_key_without_modifier_is_ignored(self, wm):
        wm.dispatch(key(XK.r, state=0))

        assert not wm.dialog_manager.is_active()

    def test_keys_go_to_active_dialog(self, wm):
        wm.dispatch(key(XK.r))
        dialog = wm.state.dialog
        assert isinstance(dialog, RunnerDialog)

        # Alt+Q while the runner is open is text, not a chord
        wm.dispatch(key(XK.q))

        assert wm.state.dialog is dialog
        assert dialog.text == "q"

    def test_drag_gesture(self, wm):
        map_window(wm, 10, x=100, y=100, width=400, height=300)

        wm.dispatch(
            events.ButtonPress(
                window=1, child=10, button=BTN.LEFT, state=ALT, root_x=200, root_y=200
            )
        )
        assert wm.operation_manager.get_operation_type() == OpType.MOVE

        wm.dispatch(events.MotionNotify(window=1, root_x=260, root_y=240, state=ALT))
        assert wm.conn.geometries[10] == Geometry(160, 140, 400, 300)

        wm.dispatch(events.ButtonRelease(window=1, button=BTN.LEFT, state=ALT))
        assert not wm.operation_manager.is_active()


@pytest.mark.unit
class TestWindowLifecycle:
    """Test MapRequest, DestroyNotify and friends."""

    def test_map_request_manages_window(self, wm):
        created = []

        def on_created(window):
            created.append(window)

        pub.subscribe(on_created, topics.WINDOW_CREATED)

        map_window(wm, 10)

        assert 10 in wm.state.registry
        assert wm.conn.focused == 10
        assert ("select_enter_window", 10) in wm.conn.calls
        assert wm.conn.calls_named("send_configure_notify") == [
            (10, Geometry(0, 0, 640, 480))
        ]
        assert created == [10]

    def test_second_map_request_does_not_duplicate(self, wm):
        map_window(wm, 10)
        wm.dispatch(events.MapRequest(10))

        assert wm.state.registry.windows == [10]

    def test_override_redirect_window_is_not_managed(self, wm):
        wm.conn.attributes[10] = WindowAttributes(override_redirect=True)

        wm.dispatch(events.MapRequest(10))

        assert ("map_window", 10) in wm.conn.calls
        assert 10 not in wm.state.registry
        assert wm.conn.focused is None

    def test_no_enter_selection_without_focus_follows_mouse(self, conn):
        wm = LWM(LWMConfig(focus_follows_mouse=False), connection=conn)

        map_window(wm, 10)

        assert conn.calls_named("select_enter_window") == []

    def test_destroy_notify(self, wm):
        closed = []

        def on_closed(window):
            closed.append(window)

        pub.subscribe(on_closed, topics.WINDOW_CLOSED)
        map_window(wm, 10)
        map_window(wm, 20)

        wm.dispatch(events.DestroyNotify(20))

        assert wm.state.registry.windows == [10]
        assert wm.conn.focused == 10
        assert closed == [20]

    def test_destroy_notify_of_minimized_window(self, wm):
        map_window(wm, 10)
        wm.window_controller.minimize(10)

        wm.dispatch(events.DestroyNotify(10))

        assert wm.state.registry.minimized == []

    def test_destroy_notify_unknown_window(self, wm):
        wm.dispatch(events.DestroyNotify(99))

        assert wm.conn.calls == []

    def test_destroy_notify_cancels_operation_and_fullscreen(self, wm):
        map_window(wm, 10)
        wm.fullscreen_manager.toggle(10)
        wm.operation_manager.start_move(10, 0, 0)

        wm.dispatch(events.DestroyNotify(10))

        assert not wm.operation_manager.is_active()
        assert 10 not in wm.state.saved_geometry

    def test_external_dialog_destroy_clears_slot(self, wm):
        wm.dispatch(key(XK.q))
        dialog = wm.state.dialog

        wm.dispatch(events.DestroyNotify(dialog.window))

        assert wm.state.dialog is None
        assert dialog.window not in wm.state.registry

    def test_unmap_notify_invalidates_cache(self, wm):
        map_window(wm, 10)
        assert wm.state.registry.is_cached(10)

        wm.dispatch(events.UnmapNotify(10))

        assert not wm.state.registry.is_cached(10)
        assert 10 in wm.state.registry

    def test_configure_request_forwards_requested_fields(self, wm):
        map_window(wm, 10)

        wm.dispatch(events.ConfigureRequest(10, {"width": 800, "height": 600}))

        assert wm.conn.calls_named("configure_window")[-1] == (
            10,
            {"width": 800, "height": 600},
        )
        assert not wm.state.registry.is_cached(10)

    def test_enter_notify_focuses(self, wm):
        map_window(wm, 10)
        map_window(wm, 20)

        wm.dispatch(events.EnterNotify(10))

        assert wm.conn.focused == 10


@pytest.mark.unit
class TestDialogKeepsFocus:
    """Test that an open dialog holds the keyboard."""

    @pytest.fixture
    def runner(self, wm):
        map_window(wm, 10)
        wm.dispatch(key(XK.r))
        dialog = wm.state.dialog
        assert wm.conn.focused == dialog.window
        return dialog

    def test_enter_notify_does_not_steal_focus(self, wm, runner):
        wm.dispatch(events.EnterNotify(10))

        assert wm.conn.focused == runner.window

        wm.dispatch(key(XK.l, state=0))
        assert runner.text == "l"

    def test_map_request_manages_but_keeps_dialog_focused(self, wm, runner):
        map_window(wm, 20)

        assert 20 in wm.state.registry
        assert ("map_window", 20) in wm.conn.calls
        assert wm.conn.focused == runner.window
        assert wm.conn.calls_named("raise_window")[-1] == (runner.window,)

    def test_destroy_of_other_window_keeps_dialog_focused(self, wm, runner):
        map_window(wm, 20)

        wm.dispatch(events.DestroyNotify(20))

        assert wm.state.dialog is runner
        assert wm.conn.focused == runner.window

    def test_active_window_request_is_ignored(self, wm, runner):
        wm.dispatch(events.ClientMessage(10, wm.conn.atoms.net_active_window, (1, 0)))

        assert wm.conn.focused == runner.window

    def test_focus_returns_after_close(self, wm, runner):
        wm.dispatch(key(XK.Escape, state=0))

        assert wm.state.dialog is None
        assert wm.conn.focused == 10


@pytest.mark.unit
class TestClickToFocus:
    """Test focusing the window under a modifier click."""

    def test_press_focuses_window(self, conn):
        wm = LWM(LWMConfig(focus_follows_mouse=False), connection=conn)
        map_window(wm, 10)
        map_window(wm, 20)

        wm.dispatch(
            events.ButtonPress(
                window=1, child=10, button=BTN.LEFT, state=ALT, root_x=5, root_y=5
            )
        )

        assert conn.focused == 10
        assert wm.operation_manager.get_current_window() == 10

    def test_press_without_modifier_keeps_focus(self, conn):
        wm = LWM(LWMConfig(focus_follows_mouse=False), connection=conn)
        map_window(wm, 10)
        map_window(wm, 20)

        wm.dispatch(
            events.ButtonPress(
                window=1, child=10, button=BTN.LEFT, state=0, root_x=5, root_y=5
            )
        )

        assert conn.focused == 20


@pytest.mark.unit
class TestClientMessages:
    """Test client messages sent to the root window."""

    def test_wm_delete_window_destroys(self, wm):
        atoms = wm.conn.atoms
        map_window(wm, 10)

        wm.dispatch(
            events.ClientMessage(10, atoms.wm_protocols, (atoms.wm_delete_window, 0))
        )

        assert ("destroy_window", 10) in wm.conn.calls

    def test_active_window_focuses_message_window(self, wm):
        map_window(wm, 10)
        map_window(wm, 20)

        wm.dispatch(events.ClientMessage(10, wm.conn.atoms.net_active_window, (1, 0)))

        assert wm.conn.focused == 10

    def test_net_wm_state_fullscreen(self, wm):
        atoms = wm.conn.atoms
        map_window(wm, 10)

        wm.dispatch(
            events.ClientMessage(
                10, atoms.net_wm_state, (1, atoms.net_wm_state_fullscreen, 0)
            )
        )

        assert wm.fullscreen_manager.is_fullscreen(10)

    def test_short_data_is_padded(self, wm):
        wm.dispatch(events.ClientMessage(10, wm.conn.atoms.net_wm_state, ()))

        assert wm.conn.calls == []


@pytest.mark.unit
class TestExpose:
    """Test dialog rendering on Expose."""

    def test_expose_renders_dialog(self, wm):
        wm.dispatch(key(XK.q))
        window = wm.state.dialog.window

        wm.dispatch(events.Expose(window, 300, 100, count=0))

        [(target, width, height, size, stride)] = wm.conn.calls_named("put_image")
        assert (target, width, height) == (window, 300, 100)
        assert size == stride * height

    def test_only_last_expose_of_series(self, wm):
        wm.dispatch(key(XK.q))
        window = wm.state.dialog.window

        wm.dispatch(events.Expose(window, 300, 100, count=2))

        assert wm.conn.calls_named("put_image") == []

    def test_expose_of_other_window(self, wm):
        map_window(wm, 10)

        wm.dispatch(events.Expose(10, 640, 480))

        assert wm.conn.calls_named("put_image") == []


@pytest.mark.unit
class TestRun:
    """Test setup and the event loop."""

    def test_setup_grabs_bindings(self, wm):
        assert wm.setup() is True

        calls = wm.conn.calls
        assert ("select_root_input", True) in calls
        assert ("set_root_cursor",) in calls
        assert ("advertise_support", "LWM") in calls
        [(keysyms, modifiers)] = wm.conn.calls_named("grab_keys")
        assert XK.Tab in keysyms and modifiers == ALT
        assert wm.conn.calls_named("grab_buttons") == [([BTN.LEFT, BTN.RIGHT], ALT)]

    def test_run_fails_without_display(self, wm):
        wm.conn.connect_result = False

        assert wm.run() == 1

    def test_run_until_connection_closes(self, wm):
        wm.conn.events = [events.MapRequest(10)]
        wm.conn.add_window(10)

        assert wm.run() == 0

        assert 10 in wm.state.registry
        assert wm.conn.calls[-1] == ("disconnect",)

    def test_exit_confirmation_stops_loop(self, wm):
        wm.conn.events = [key(XK.q), key(XK.y), events.MapRequest(10)]
        wm.conn.add_window(10)

        assert wm.run() == 0

        assert isinstance(wm.state.dialog, ExitConfirmationDialog)
        assert 10 not in wm.state.registry
        assert wm.conn.events == [events.MapRequest(10)]
