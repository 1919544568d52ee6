"""
Event Topics for the lwm Window Manager

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Notification topics describe something that already happened. Command topics
(``cmd.*``) ask a component to do something; the key chords publish them.
Every window command carries a ``window`` argument: the window that had input
focus when the chord was pressed, or None.
"""

# Window lifecycle events
WINDOW_CREATED = "window.created"
"""Published when a window is taken under management. Params: window"""

WINDOW_CLOSED = "window.closed"
"""Published when a managed window is destroyed. Params: window"""

# Focus state notifications
FOCUS_CHANGED = "focus.changed"
"""Published when input focus is moved. Params: window (or None for root)"""

# Operation events (interactive move/resize)
OPERATION_STARTED = "operation.started"
"""Published when a move/resize gesture starts. Params: window, op_type"""

OPERATION_ENDED = "operation.ended"
"""Published when a move/resize gesture ends. Params: window, op_type"""

# Dialog events
DIALOG_OPENED = "dialog.opened"
"""Published when a modal dialog is shown. Params: window, kind"""

DIALOG_CLOSED = "dialog.closed"
"""Published when a modal dialog is dismissed. Params: window, kind"""

# Window management commands
CMD_TOGGLE_FULLSCREEN = "cmd.toggle_fullscreen"
"""Command: Toggle fullscreen for the focused window. Params: window"""

CMD_CLOSE_WINDOW = "cmd.close_window"
"""Command: Close the focused window. Params: window"""

CMD_MINIMIZE = "cmd.minimize"
"""Command: Minimize the focused window. Params: window"""

CMD_RESTORE_ALL = "cmd.restore_all"
"""Command: Restore every minimized window. Params: window"""

# Focus commands
CMD_FOCUS_NEXT = "cmd.focus_next"
"""Command: Focus the next viewable window. Params: window"""

# Dialog commands
CMD_OPEN_RUNNER = "cmd.open_runner"
"""Command: Open the Runner prompt. Params: window"""

CMD_CONFIRM_EXIT = "cmd.confirm_exit"
"""Command: Open the exit confirmation dialog. Params: window"""

CMD_SHOW_HELP = "cmd.show_help"
"""Command: Open the key binding help dialog. Params: window"""

# Session commands
CMD_SPAWN = "cmd.spawn"
"""Command: Run a shell command detached. Params: command"""

CMD_QUIT = "cmd.quit"
"""Command: Quit the window manager."""
