"""
Application Launcher

Spawns shell commands in response to command events.
"""

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


class ApplicationLauncher:
    """Spawns programs in response to command events.

    Children run in their own session with stdio detached and are never
    waited for; SIGCHLD is ignored so the kernel reaps them.

    Responsibilities:
    - CMD_SPAWN: run a shell command
    """

    def __init__(self):
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to spawn command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_spawn, topics.CMD_SPAWN)

    def _on_spawn(self, command: str):
        """Handle CMD_SPAWN command."""
        self.spawn(command)

    def spawn(self, command: str):
        """Spawn a program.

        Args:
            command: Shell command to execute
        """
        if not command:
            return
        try:
            env = os.environ.copy()
            process = subprocess.Popen(
                command,
                shell=True,
                start_new_session=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                env=env,
            )
        except OSError as e:
            logger.error("Failed to spawn %s: %s", command, e)
            return None
        logger.info("Launched command: %s [PID=%d]", command, process.pid)
        return process.pid
